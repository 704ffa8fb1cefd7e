"""Command-line entry point for ``devsecops-setup``.

Usage::

    devsecops-setup [--debug]
    devsecops-setup --version

The run is fully interactive; answers are read from standard input.
"""

from __future__ import annotations

import argparse
import logging
import sys

from devsecops.constants import NC, RED, REPO_URL_ENV
from devsecops.errors import NonInteractiveError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devsecops-setup",
        description="Install DevSecOps pre-commit hooks and CI/CD templates into this project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Environment:
  {REPO_URL_ENV}   Override the template repository URL

Prerequisites:
  - git and rsync (required)
  - pre-commit (recommended)
""",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_get_version()}")
    parser.add_argument("--debug", action="store_true", help="Log diagnostics to stderr")
    return parser


def _configure_logging(*, debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None, script_path: str | None = None) -> int:
    """CLI entry point for ``devsecops-setup``."""
    args = _build_parser().parse_args(argv)
    _configure_logging(debug=args.debug)

    if not sys.stdin.isatty():
        error = NonInteractiveError()
        print(f"{RED}✗ {error.message}{NC}", file=sys.stderr)
        for step in error.remediation:
            print(f"  {step}", file=sys.stderr)
        return 1

    from devsecops.workflow import run_setup

    try:
        return run_setup(script_path=script_path)
    except KeyboardInterrupt:
        print()
        print(f"{RED}✗ Interrupted{NC}", file=sys.stderr)
        return 130


def _get_version() -> str:
    """Return package version or ``"unknown"``."""
    try:
        from devsecops import __version__
    except ImportError:
        return "unknown"
    else:
        return __version__
