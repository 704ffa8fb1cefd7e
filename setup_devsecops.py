#!/usr/bin/env python3
"""DevSecOps Setup launcher.

Usage:
    python3 setup_devsecops.py           # Configure the current project
    python3 setup_devsecops.py --debug   # With diagnostic logging

When this file was downloaded into a project (and is not tracked by git)
it removes itself after a successful run.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add lib/python to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent / "lib" / "python"))

from devsecops.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:], script_path=sys.argv[0]))
