"""Node.js toolchain installer deploy.

Installs: node, npm
"""

from __future__ import annotations

from pyinfra import host
from pyinfra.api.deploy import deploy
from pyinfra.facts.server import Which
from pyinfra.operations import server

from lib.installers._utils import install_system_packages, verify_tools

TOOLS = ["node", "npm"]

PACKAGES = {
    "pacman": ["nodejs", "npm"],
    "apt": ["nodejs", "npm"],
    "dnf": ["nodejs", "npm"],
    "yum": ["nodejs", "npm"],
    "apk": ["nodejs", "npm"],
    "brew": ["node"],
}


@deploy("Install Node.js toolchain")
def install_node_tools() -> None:
    """Install node and npm via the system package manager."""
    if all(host.get_fact(Which, command=tool) for tool in TOOLS):
        server.shell(
            name="Node.js already installed",
            commands=["echo 'node and npm found, skipping'"],
        )
        return

    if not install_system_packages("Node.js", PACKAGES):
        server.shell(
            name="Note Node.js download",
            commands=["echo 'Install Node.js manually: https://nodejs.org/'"],
        )

    verify_tools(TOOLS)
