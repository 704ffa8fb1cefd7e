#!/usr/bin/env python3
"""DevSecOps Setup Installer - pyinfra-based.

Usage:
    python3 install.py              # Install core only (rsync, pre-commit, CLI)
    python3 install.py --all        # Also install every project toolchain
    python3 install.py --terraform  # Also install terraform and tflint
    python3 install.py --uninstall  # Uninstall
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

# Add lib to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from pyinfra.api import Config, Inventory, State
from pyinfra.api.connect import connect_all
from pyinfra.api.operations import run_ops

from lib.installers import (
    install_core,
    install_go_tools,
    install_java_tools,
    install_node_tools,
    install_terraform_tools,
)
from lib.installers.core import uninstall

if TYPE_CHECKING:
    from collections.abc import Callable

# Queue of pending deploy functions to execute within pyinfra state context
_pending_deploys: list[tuple[Callable[..., object], tuple[object, ...], dict[str, object]]] = []

# ANSI colors
RED = "\033[0;31m"
GREEN = "\033[0;32m"
YELLOW = "\033[1;33m"
BLUE = "\033[0;34m"
NC = "\033[0m"

# flag name -> (label, deploy function)
TOOLCHAINS: dict[str, tuple[str, Callable[..., object]]] = {
    "terraform": ("Terraform tools (terraform, tflint)", install_terraform_tools),
    "node": ("Node.js toolchain (node, npm)", install_node_tools),
    "go": ("Go toolchain", install_go_tools),
    "java": ("Java toolchain (JDK)", install_java_tools),
}


def print_color(color: str, message: str) -> None:
    """Print a message with color."""
    print(f"{color}{message}{NC}")


def add_deploy(
    deploy_func: Callable[..., object],
    *args: object,
    **kwargs: object,
) -> None:
    """Queue a deploy function to execute within pyinfra state context.

    Deploy functions (decorated with @deploy) must be called after pyinfra
    state is initialized via connect_all(). This function queues them for
    execution at the right time.

    Args:
        deploy_func: A pyinfra @deploy decorated function.
        *args: Positional arguments to pass to the deploy function.
        **kwargs: Keyword arguments to pass to the deploy function.

    """
    _pending_deploys.append((deploy_func, args, kwargs))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="DevSecOps Setup Installer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Installation locations:
  ~/.devsecops-setup/   Main installation directory
  ~/.local/bin/         CLI symlink (devsecops-setup)

Prerequisites:
  - Python 3.11+
  - git

Notes:
  - rsync and pre-commit are always installed (required by devsecops-setup)
  - System package manager (pacman/apt/dnf/yum/apk/brew) used where applicable
""",
    )

    parser.add_argument(
        "--uninstall",
        action="store_true",
        help="Remove DevSecOps setup installation",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Force reinstall (overwrite existing)",
    )
    parser.add_argument(
        "--all",
        action="store_true",
        help="Install every project toolchain",
    )
    for name, (label, _) in TOOLCHAINS.items():
        parser.add_argument(f"--{name}", action="store_true", help=f"Install {label}")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without making changes",
    )

    return parser.parse_args(argv)


def run_pyinfra(*, dry_run: bool = False) -> bool:
    """Run queued deploy functions and return success status.

    Args:
        dry_run: If True, show what would be done without making changes.

    Returns:
        True if all operations succeeded, False otherwise.

    """
    global _pending_deploys

    # Create inventory for @local (execute on localhost via subprocess)
    inventory = Inventory((["@local"], {}))

    config = Config()
    if dry_run:
        config.DRYRUN = True

    state = State(inventory=inventory, config=config)
    connect_all(state)

    # This is when @deploy functions register their operations
    for deploy_func, args, kwargs in _pending_deploys:
        deploy_func(*args, **kwargs)

    _pending_deploys = []

    return run_ops(state)


def selected_toolchains(args: argparse.Namespace) -> list[str]:
    """Return the toolchain flags requested on the command line."""
    return [name for name in TOOLCHAINS if args.all or getattr(args, name)]


def main(argv: list[str] | None = None) -> int:
    """Run the DevSecOps setup installer."""
    args = parse_args(argv)

    print_color(BLUE, "DevSecOps Setup Installer (pyinfra)")
    print()

    if args.uninstall:
        print_color(BLUE, "Uninstalling DevSecOps setup...")
        add_deploy(uninstall)
        if run_pyinfra(dry_run=args.dry_run):
            print_color(GREEN, "DevSecOps setup uninstalled successfully!")
            return 0
        print_color(RED, "Uninstallation failed")
        return 1

    if sys.version_info < (3, 11):
        print_color(RED, f"Error: Python 3.11+ required (you have {sys.version})")
        return 1

    print(f"  Python {sys.version_info.major}.{sys.version_info.minor}")

    install_dir = Path.home() / ".devsecops-setup"
    if install_dir.exists() and not args.force:
        print_color(YELLOW, f"DevSecOps setup is already installed at {install_dir}")
        print("Use --force to reinstall")
        return 1

    print()
    print_color(GREEN, "Installing core components...")
    add_deploy(install_core, force=args.force)

    toolchains = selected_toolchains(args)
    if toolchains:
        print()
        print_color(GREEN, "Installing project toolchains...")
        for name in toolchains:
            label, deploy_func = TOOLCHAINS[name]
            print()
            print_color(BLUE, f"{label}...")
            add_deploy(deploy_func)

    print()
    if args.dry_run:
        print_color(YELLOW, "Dry run - no changes made")
    success = run_pyinfra(dry_run=args.dry_run)

    if success:
        print()
        print_color(GREEN, "DevSecOps setup installed successfully!")
        print()
        print("Installation summary:")
        print(f"  Main directory: {install_dir}")
        print("  CLI command: devsecops-setup")
        print()
        print("Quick start:")
        print("  1. cd /path/to/your/project")
        print("  2. devsecops-setup")
        print()

        bin_dir = Path.home() / ".local" / "bin"
        if str(bin_dir) not in os.environ.get("PATH", ""):
            print_color(YELLOW, f"Note: Add {bin_dir} to your PATH:")
            print('  export PATH="$HOME/.local/bin:$PATH"')

        return 0

    print_color(RED, "Installation completed with errors")
    return 1


if __name__ == "__main__":
    sys.exit(main())
