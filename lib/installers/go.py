"""Go toolchain installer deploy.

Installs: go
"""

from __future__ import annotations

from pyinfra import host
from pyinfra.api.deploy import deploy
from pyinfra.facts.server import Which
from pyinfra.operations import server

from lib.installers._utils import install_system_packages, verify_tools

TOOLS = ["go"]

PACKAGES = {
    "pacman": ["go"],
    "apt": ["golang-go"],
    "dnf": ["golang"],
    "yum": ["golang"],
    "apk": ["go"],
    "brew": ["go"],
}


@deploy("Install Go toolchain")
def install_go_tools() -> None:
    """Install the Go toolchain (gofmt and goimports hooks need it)."""
    if host.get_fact(Which, command="go"):
        server.shell(name="Go already installed", commands=["echo 'go found, skipping'"])
        return

    if not install_system_packages("Go", PACKAGES):
        server.shell(
            name="Note Go download",
            commands=["echo 'Install Go manually: https://go.dev/doc/install'"],
        )

    # Note about GOBIN PATH
    server.shell(
        name="Note GOBIN path",
        commands=[
            'GOBIN="${GOBIN:-${GOPATH:-$HOME/go}/bin}"',
            'echo "Note: Ensure $GOBIN is in PATH"',
        ],
    )

    verify_tools(TOOLS)
