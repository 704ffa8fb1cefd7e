"""Installation path resolution for devsecops-setup.

Handles finding the configs directory in both development (repo checkout)
and installed (~/.devsecops-setup/) contexts.
"""

from __future__ import annotations

from pathlib import Path

from devsecops.constants import PROJECT_TYPES_FILENAME

_GLOBAL_INSTALL = Path.home() / ".devsecops-setup"


def _repo_root() -> Path:
    """Return the repo root (lib/python/devsecops → repo)."""
    return Path(__file__).resolve().parent.parent.parent.parent


def find_configs_dir() -> Path:
    """Find the devsecops-setup configs directory.

    Prefers local repo over global install (development takes precedence).

    Raises:
        FileNotFoundError: If no configs directory found.

    """
    local = _repo_root() / "configs"
    if local.exists():
        return local

    global_configs = _GLOBAL_INSTALL / "configs"
    if global_configs.exists():
        return global_configs

    msg = "Could not find devsecops-setup configs directory"
    raise FileNotFoundError(msg)


def find_project_types() -> Path:
    """Return the path of the project-type registry.

    Raises:
        FileNotFoundError: If the configs directory or registry is missing.

    """
    path = find_configs_dir() / PROJECT_TYPES_FILENAME
    if not path.exists():
        msg = f"Could not find {PROJECT_TYPES_FILENAME} in {path.parent}"
        raise FileNotFoundError(msg)
    return path
