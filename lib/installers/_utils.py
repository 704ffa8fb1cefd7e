"""Shared utility functions for installer modules."""

from __future__ import annotations

from pyinfra import host
from pyinfra.facts.server import Which
from pyinfra.operations import apk, apt, brew, dnf, pacman, server, yum

_SUDO_OPERATIONS = {
    "pacman": pacman.packages,
    "apt": apt.packages,
    "dnf": dnf.packages,
    "yum": yum.packages,
    "apk": apk.packages,
}


def get_package_manager() -> str | None:
    """Detect the available package manager on the system.

    Checks for package managers in order of preference:
    pacman > apt > dnf > yum > apk > brew

    Returns:
        Package manager name (without -get suffix) or None if not found.

    """
    managers = ["pacman", "apt-get", "dnf", "yum", "apk", "brew"]
    for pm in managers:
        if host.get_fact(Which, command=pm):
            return pm.replace("-get", "")
    return None


def install_system_packages(label: str, packages: dict[str, list[str]]) -> bool:
    """Install ``packages[pm]`` with the detected package manager.

    Args:
        label: Human-readable name used in operation names.
        packages: Package names keyed by package manager.

    Returns:
        False if no supported package manager (or no package for it) was found.

    """
    pm = get_package_manager()
    names = packages.get(pm or "")
    if not pm or not names:
        server.shell(
            name=f"Warn: cannot install {label}",
            commands=[f"echo 'No supported package manager found for {label}'"],
        )
        return False

    if pm == "brew":
        brew.packages(name=f"Install {label} via brew", packages=names)
    else:
        _SUDO_OPERATIONS[pm](name=f"Install {label} via {pm}", packages=names, _sudo=True)
    return True


def verify_tools(tools: list[str]) -> None:
    """Emit a presence check for each tool."""
    for tool in tools:
        server.shell(
            name=f"Verify {tool} installation",
            commands=[f"command -v {tool} && echo '{tool}: OK' || echo '{tool}: NOT FOUND'"],
        )
