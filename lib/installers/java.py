"""Java toolchain installer deploy.

Installs: a JDK providing java
"""

from __future__ import annotations

from pyinfra import host
from pyinfra.api.deploy import deploy
from pyinfra.facts.server import Which
from pyinfra.operations import server

from lib.installers._utils import install_system_packages, verify_tools

TOOLS = ["java"]

PACKAGES = {
    "pacman": ["jdk-openjdk"],
    "apt": ["default-jdk"],
    "dnf": ["java-17-openjdk-devel"],
    "yum": ["java-17-openjdk-devel"],
    "apk": ["openjdk17"],
    "brew": ["openjdk"],
}


@deploy("Install Java toolchain")
def install_java_tools() -> None:
    """Install a JDK via the system package manager."""
    if host.get_fact(Which, command="java"):
        server.shell(name="Java already installed", commands=["echo 'java found, skipping'"])
        return

    if not install_system_packages("Java", PACKAGES):
        server.shell(
            name="Note JDK download",
            commands=["echo 'Install a JDK manually: https://adoptium.net/'"],
        )

    verify_tools(TOOLS)
