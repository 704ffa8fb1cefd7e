"""Removal of the launcher script after a transient run."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from devsecops.constants import LAUNCHER_NAME

_log = logging.getLogger(__name__)

# argv[0] values that mean the script was streamed rather than read from disk
_STREAMED = {"", "-", "-c"}


def is_tracked(path: Path, project_dir: Path) -> bool:
    """Return True if git tracks ``path`` in the repository at ``project_dir``."""
    try:
        result = subprocess.run(
            ["git", "ls-files", "--error-unmatch", str(path)],
            capture_output=True,
            cwd=project_dir,
            check=False,
        )
    except OSError:
        _log.debug("git not available, treating %s as untracked", path)
        return False
    return result.returncode == 0


def remove_launcher(script_path: str | None, project_dir: Path) -> bool:
    """Delete the launcher if it was fetched transiently into the project.

    The file is removed only when it is the launcher, is a regular file
    inside ``project_dir``, and is not tracked by the project's git index.

    Returns:
        True if the file was removed.

    """
    if not script_path or script_path in _STREAMED:
        return False

    path = Path(script_path)
    if path.name != LAUNCHER_NAME or path.is_symlink() or not path.is_file():
        return False

    resolved = path.resolve()
    if not resolved.is_relative_to(project_dir.resolve()):
        _log.debug("%s is outside %s, keeping it", path, project_dir)
        return False

    if is_tracked(resolved, project_dir):
        _log.debug("%s is tracked by git, keeping it", path)
        return False

    path.unlink()
    return True
