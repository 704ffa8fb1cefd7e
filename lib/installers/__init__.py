"""DevSecOps setup installer modules using pyinfra.

This package provides modular deploy functions for installing the setup
tool itself and the toolchains each project type needs.
"""

from __future__ import annotations

from lib.installers.core import install_core
from lib.installers.go import install_go_tools
from lib.installers.java import install_java_tools
from lib.installers.node import install_node_tools
from lib.installers.terraform import install_terraform_tools

__all__ = [
    "install_core",
    "install_go_tools",
    "install_java_tools",
    "install_node_tools",
    "install_terraform_tools",
]
