"""Core installer module for DevSecOps setup.

Handles:
- Installation of rsync and pre-commit
- File copying to ~/.devsecops-setup/
- Symlink creation for the devsecops-setup command

NOTE: This module is designed for @local deployments only.
Path.exists() checks run on the controller (local machine).
"""

from __future__ import annotations

from pathlib import Path

from pyinfra import host
from pyinfra.api.deploy import deploy
from pyinfra.facts.server import Which
from pyinfra.operations import files, pip, server

from lib.installers._utils import install_system_packages

# Installation paths
INSTALL_DIR = Path.home() / ".devsecops-setup"
BIN_DIR = Path.home() / ".local" / "bin"

LAUNCHER = "setup_devsecops.py"
COMMAND = "devsecops-setup"
PACKAGE = "devsecops"

RSYNC_PACKAGES = {pm: ["rsync"] for pm in ("pacman", "apt", "dnf", "yum", "apk", "brew")}


def get_source_dir() -> Path:
    """Get the source directory (project root)."""
    # Navigate up from lib/installers/core.py to project root
    return Path(__file__).parent.parent.parent


@deploy("Install rsync")
def install_rsync() -> None:
    """Install rsync via the system package manager if it is missing."""
    if host.get_fact(Which, command="rsync"):
        return
    install_system_packages("rsync", RSYNC_PACKAGES)


@deploy("Install pre-commit")
def install_precommit() -> None:
    """Install pre-commit via pipx (preferred) or pip."""
    pipx_available = host.get_fact(Which, command="pipx")

    if pipx_available:
        # Check if already installed, then upgrade or install
        server.shell(
            name="Install pre-commit via pipx",
            commands=[
                "pipx list 2>/dev/null | grep -q 'package pre-commit' && "
                "pipx upgrade pre-commit || "
                "pipx install pre-commit",
            ],
        )
    else:
        pip.packages(
            name="Install pre-commit via pip",
            packages=["pre-commit"],
            extra_install_args="--user",
        )


@deploy("Create installation directories")
def create_directories() -> None:
    """Create the installation directory structure."""
    directories = [
        INSTALL_DIR,
        INSTALL_DIR / "lib" / "python" / PACKAGE,
        INSTALL_DIR / "configs",
        BIN_DIR,
    ]

    for directory in directories:
        files.directory(
            name=f"Create {directory}",
            path=str(directory),
            present=True,
        )


@deploy("Copy launcher")
def copy_launcher() -> None:
    """Copy the setup launcher to the installation directory."""
    src = get_source_dir() / LAUNCHER
    if src.exists():
        files.put(
            name=f"Copy {LAUNCHER}",
            src=str(src),
            dest=str(INSTALL_DIR / LAUNCHER),
            mode="755",
        )


@deploy("Copy Python library files")
def copy_python_lib() -> None:
    """Copy the devsecops package to the installation directory."""
    py_src = get_source_dir() / "lib" / "python" / PACKAGE

    if py_src.exists():
        for pyfile in sorted(py_src.glob("*.py")):
            files.put(
                name=f"Copy {pyfile.name}",
                src=str(pyfile),
                dest=str(INSTALL_DIR / "lib" / "python" / PACKAGE / pyfile.name),
                mode="644",
            )


@deploy("Copy config files")
def copy_configs() -> None:
    """Copy configuration files to installation directory."""
    configs_src = get_source_dir() / "configs"

    if not configs_src.exists():
        return

    for config in sorted(configs_src.iterdir()):
        if config.is_file():
            files.put(
                name=f"Copy config {config.name}",
                src=str(config),
                dest=str(INSTALL_DIR / "configs" / config.name),
                mode="644",
            )


@deploy("Create CLI symlink")
def create_symlink() -> None:
    """Link ~/.local/bin/devsecops-setup to the installed launcher."""
    src = INSTALL_DIR / LAUNCHER
    if not src.exists():
        server.shell(
            name=f"Warn: {LAUNCHER} not found",
            commands=[f"echo 'Warning: {src} not found, skipping symlink'"],
        )
        return

    files.link(
        name=f"Symlink {COMMAND}",
        path=str(BIN_DIR / COMMAND),
        target=str(src),
        symbolic=True,
        force=True,
    )


@deploy("Uninstall DevSecOps setup")
def uninstall() -> None:
    """Remove the DevSecOps setup installation."""
    files.file(
        name=f"Remove symlink {COMMAND}",
        path=str(BIN_DIR / COMMAND),
        present=False,
    )

    files.directory(
        name="Remove installation directory",
        path=str(INSTALL_DIR),
        present=False,
    )


@deploy("Install core DevSecOps setup")
def install_core(*, force: bool = False) -> None:
    """Install the setup tool and its prerequisites.

    Args:
        force: If True, remove existing installation first.

    """
    if force and INSTALL_DIR.exists():
        files.directory(
            name="Remove existing installation",
            path=str(INSTALL_DIR),
            present=False,
        )

    install_rsync()
    install_precommit()

    create_directories()

    copy_launcher()
    copy_python_lib()
    copy_configs()

    create_symlink()
