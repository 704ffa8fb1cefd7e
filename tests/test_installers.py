"""Unit tests for pyinfra installer modules.

Tests use mocked pyinfra facts and operations to avoid actual system changes.
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

# Add lib to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from lib.installers.core import (
    BIN_DIR,
    COMMAND,
    INSTALL_DIR,
    LAUNCHER,
    RSYNC_PACKAGES,
    get_source_dir,
)


class TestCoreModule:
    """Tests for lib/installers/core.py."""

    def test_install_dir_is_in_home(self) -> None:
        """Verify INSTALL_DIR is under home directory."""
        assert str(INSTALL_DIR).startswith(str(Path.home()))
        assert ".devsecops-setup" in str(INSTALL_DIR)

    def test_bin_dir_is_local_bin(self) -> None:
        """Verify BIN_DIR is ~/.local/bin."""
        assert str(BIN_DIR).endswith(".local/bin")

    def test_get_source_dir_returns_project_root(self) -> None:
        """Verify get_source_dir returns the project root."""
        source_dir = get_source_dir()
        assert (source_dir / "install.py").exists()
        assert (source_dir / LAUNCHER).exists()

    def test_command_name(self) -> None:
        assert COMMAND == "devsecops-setup"

    def test_rsync_available_for_every_manager(self) -> None:
        """rsync has the same package name everywhere."""
        assert set(RSYNC_PACKAGES) == {"pacman", "apt", "dnf", "yum", "apk", "brew"}
        assert all(names == ["rsync"] for names in RSYNC_PACKAGES.values())


class TestToolchainModules:
    """Each toolchain installer covers the tools the hooks probe for."""

    def test_terraform_tools(self) -> None:
        from lib.installers.terraform import TFLINT_INSTALL_SCRIPT, TOOLS

        assert TOOLS == ["terraform", "tflint"]
        assert TFLINT_INSTALL_SCRIPT.startswith("https://")

    def test_node_tools(self) -> None:
        from lib.installers.node import PACKAGES, TOOLS

        assert TOOLS == ["node", "npm"]
        assert PACKAGES["brew"] == ["node"]

    def test_go_tools(self) -> None:
        from lib.installers.go import PACKAGES, TOOLS

        assert TOOLS == ["go"]
        assert PACKAGES["apt"] == ["golang-go"]

    def test_java_tools(self) -> None:
        from lib.installers.java import PACKAGES, TOOLS

        assert TOOLS == ["java"]
        assert PACKAGES["brew"] == ["openjdk"]

    @pytest.mark.parametrize("module", ["node", "go", "java"])
    def test_packages_cover_every_manager(self, module: str) -> None:
        import importlib

        packages = importlib.import_module(f"lib.installers.{module}").PACKAGES
        assert set(packages) == {"pacman", "apt", "dnf", "yum", "apk", "brew"}


class TestInstallSystemPackages:
    """Tests for lib/installers/_utils.install_system_packages."""

    def test_uses_sudo_for_system_managers(self) -> None:
        from lib.installers import _utils

        apt_packages = MagicMock()
        with (
            patch("lib.installers._utils.get_package_manager", return_value="apt"),
            patch.dict(_utils._SUDO_OPERATIONS, {"apt": apt_packages}),
        ):
            assert _utils.install_system_packages("Go", {"apt": ["golang-go"]}) is True
        kwargs = apt_packages.call_args[1]
        assert kwargs["packages"] == ["golang-go"]
        assert kwargs["_sudo"] is True

    def test_brew_runs_without_sudo(self) -> None:
        from lib.installers import _utils

        with (
            patch("lib.installers._utils.get_package_manager", return_value="brew"),
            patch("lib.installers._utils.brew") as mock_brew,
        ):
            assert _utils.install_system_packages("Go", {"brew": ["go"]}) is True
        kwargs = mock_brew.packages.call_args[1]
        assert kwargs["packages"] == ["go"]
        assert "_sudo" not in kwargs

    def test_no_package_manager_warns(self) -> None:
        from lib.installers import _utils

        with (
            patch("lib.installers._utils.get_package_manager", return_value=None),
            patch("lib.installers._utils.server") as mock_server,
        ):
            assert _utils.install_system_packages("Go", {"apt": ["golang-go"]}) is False
        assert "Go" in mock_server.shell.call_args[1]["name"]

    def test_manager_without_package_warns(self) -> None:
        from lib.installers import _utils

        with (
            patch("lib.installers._utils.get_package_manager", return_value="apk"),
            patch("lib.installers._utils.server") as mock_server,
        ):
            assert _utils.install_system_packages("Go", {"apt": ["golang-go"]}) is False
        mock_server.shell.assert_called_once()


class TestInstallPyMain:
    """Tests for install.py main module."""

    def test_parse_args_defaults(self) -> None:
        """Test argument parsing with defaults."""
        from install import parse_args

        args = parse_args([])
        assert not args.uninstall
        assert not args.force
        assert not args.all
        assert not args.terraform
        assert not args.node

    def test_parse_args_toolchain_flags(self) -> None:
        """Test toolchain flag parsing."""
        from install import parse_args

        args = parse_args(["--terraform", "--java"])
        assert args.terraform
        assert args.java
        assert not args.node
        assert not args.go

    @pytest.mark.parametrize("flag", ["--force", "--uninstall", "--dry-run", "--all"])
    def test_parse_args_boolean_flags(self, flag: str) -> None:
        from install import parse_args

        args = parse_args([flag])
        assert getattr(args, flag.lstrip("-").replace("-", "_"))

    def test_selected_toolchains(self) -> None:
        from install import parse_args, selected_toolchains

        assert selected_toolchains(parse_args([])) == []
        assert selected_toolchains(parse_args(["--go", "--terraform"])) == ["terraform", "go"]
        assert selected_toolchains(parse_args(["--all"])) == ["terraform", "node", "go", "java"]

    def test_toolchains_match_registry(self, registry: dict) -> None:
        """Every project type in the registry has a bootstrap flag."""
        from install import TOOLCHAINS

        assert set(TOOLCHAINS) == set(registry)

    def test_add_deploy_queues_function(self) -> None:
        """Test that add_deploy queues functions for later execution."""
        import install
        from install import add_deploy

        # Clear any existing pending deploys
        install._pending_deploys = []

        def dummy_deploy() -> None:
            pass

        add_deploy(dummy_deploy)
        assert len(install._pending_deploys) == 1
        assert install._pending_deploys[0][0] is dummy_deploy

        # Cleanup
        install._pending_deploys = []

    def test_add_deploy_preserves_args(self) -> None:
        """Test that add_deploy preserves positional and keyword arguments."""
        import install
        from install import add_deploy

        install._pending_deploys = []

        def dummy_deploy(a: int, b: str, *, force: bool = False) -> None:
            pass

        add_deploy(dummy_deploy, 1, "test", force=True)
        func, args, kwargs = install._pending_deploys[0]
        assert func is dummy_deploy
        assert args == (1, "test")
        assert kwargs == {"force": True}

        install._pending_deploys = []

    def test_main_queues_selected_toolchains(self, tmp_path: Path) -> None:
        """main() queues core plus each requested toolchain."""
        import install

        install._pending_deploys = []
        with (
            patch("install.Path.home", return_value=tmp_path),
            patch("install.run_pyinfra", return_value=True) as mock_run,
        ):
            assert install.main(["--node"]) == 0
            queued = [func for func, _, _ in install._pending_deploys]
        assert queued == [install.install_core, install.install_node_tools]
        mock_run.assert_called_once_with(dry_run=False)
        install._pending_deploys = []

    def test_main_refuses_existing_install(self, tmp_path: Path) -> None:
        import install

        (tmp_path / ".devsecops-setup").mkdir()
        with patch("install.Path.home", return_value=tmp_path):
            assert install.main([]) == 1


class TestPackageManagerDetection:
    """Tests for package manager detection."""

    @pytest.mark.parametrize(
        ("pm_command", "expected_result"),
        [
            ("pacman", "pacman"),
            ("apt-get", "apt"),
            ("dnf", "dnf"),
            ("yum", "yum"),
            ("apk", "apk"),
            ("brew", "brew"),
        ],
    )
    def test_utils_pm_detection(self, pm_command: str, expected_result: str) -> None:
        """Test package manager detection via shared utility."""
        from lib.installers._utils import get_package_manager

        with patch("lib.installers._utils.host") as mock_host:
            mock_host.get_fact.side_effect = lambda _w, command=None: command == pm_command
            assert get_package_manager() == expected_result

    def test_no_package_manager(self) -> None:
        from lib.installers._utils import get_package_manager

        with patch("lib.installers._utils.host") as mock_host:
            mock_host.get_fact.return_value = None
            assert get_package_manager() is None

    def test_pm_detection_precedence_when_multiple_available(self) -> None:
        """Test that pacman takes precedence when multiple PMs are available."""
        from lib.installers._utils import get_package_manager

        available_pms = {"pacman", "apt-get", "brew"}

        with patch("lib.installers._utils.host") as mock_host:
            mock_host.get_fact.side_effect = lambda _w, command=None: command in available_pms
            assert get_package_manager() == "pacman"


class TestModuleExports:
    """Tests for lib/installers/__init__.py exports."""

    def test_all_exports_are_callables(self) -> None:
        """Verify all exported functions are callable."""
        from lib.installers import (
            install_core,
            install_go_tools,
            install_java_tools,
            install_node_tools,
            install_terraform_tools,
        )

        assert callable(install_core)
        assert callable(install_go_tools)
        assert callable(install_java_tools)
        assert callable(install_node_tools)
        assert callable(install_terraform_tools)

    def test_all_list_contains_all_exports(self) -> None:
        """Verify __all__ contains all expected exports."""
        from lib.installers import __all__

        assert sorted(__all__) == [
            "install_core",
            "install_go_tools",
            "install_java_tools",
            "install_node_tools",
            "install_terraform_tools",
        ]
