"""Terraform tools installer deploy.

Installs: terraform, tflint
"""

from __future__ import annotations

from pyinfra import host
from pyinfra.api.deploy import deploy
from pyinfra.facts.server import Which
from pyinfra.operations import brew, server

from lib.installers._utils import get_package_manager, verify_tools

TOOLS = ["terraform", "tflint"]

TFLINT_INSTALL_SCRIPT = (
    "https://raw.githubusercontent.com/terraform-linters/tflint/master/install_linux.sh"
)


@deploy("Install Terraform tools")
def install_terraform_tools() -> None:
    """Install terraform and tflint.

    Homebrew installs both.  Elsewhere tflint uses its upstream install
    script and terraform must be downloaded from HashiCorp.
    """
    missing = [tool for tool in TOOLS if not host.get_fact(Which, command=tool)]
    if not missing:
        server.shell(
            name="Terraform tools already installed",
            commands=["echo 'terraform and tflint found, skipping'"],
        )
        return

    if get_package_manager() == "brew":
        if "terraform" in missing:
            brew.tap(name="Tap hashicorp/tap", src="hashicorp/tap")
            brew.packages(
                name="Install terraform via brew",
                packages=["hashicorp/tap/terraform"],
            )
        if "tflint" in missing:
            brew.packages(name="Install tflint via brew", packages=["tflint"])
    else:
        if "tflint" in missing:
            server.shell(
                name="Install tflint via install script",
                commands=[f"curl -sSfL {TFLINT_INSTALL_SCRIPT} | bash"],
            )
        if "terraform" in missing:
            server.shell(
                name="Note terraform download",
                commands=["echo 'Install terraform manually: https://terraform.io/downloads'"],
            )

    verify_tools(TOOLS)
