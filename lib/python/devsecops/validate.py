"""Prerequisite and per-project-type dependency validation.

Missing tools are accumulated rather than reported one at a time, so the
operator sees every gap before re-running.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from devsecops.console import print_fail, print_info, print_ok, print_warn
from devsecops.constants import NC, YELLOW
from devsecops.detect import ProjectProfile, ProjectType, ToolRequirement
from devsecops.errors import DependencyError, PrerequisiteError, SetupAborted

if TYPE_CHECKING:
    from devsecops.probe import ToolProbe
    from devsecops.prompts import Prompter

_log = logging.getLogger(__name__)

PREREQUISITES: tuple[ToolRequirement, ...] = (
    ToolRequirement(
        name="git",
        label="git",
        hints={
            "macos": "xcode-select --install (or brew install git)",
            "linux": "apt-get install git (or your distribution's package manager)",
            "windows": "Download from https://git-scm.com/download/win",
        },
    ),
    ToolRequirement(
        name="rsync",
        label="rsync",
        hints={
            "macos": "brew install rsync",
            "linux": "apt-get install rsync",
            "windows": "Use WSL and install rsync inside it",
        },
    ),
)

HOOK_MANAGER = ToolRequirement(
    name="pre-commit",
    label="pre-commit",
    hints={"macos": "pip install pre-commit", "linux": "pip install pre-commit"},
)

_PLATFORM_LABELS = {"macos": "macOS", "linux": "Linux", "windows": "Windows"}


@dataclass(frozen=True)
class MissingDependency:
    """A required tool that was not found."""

    label: str
    project_type: str | None = None
    hints: dict[str, str] = field(default_factory=dict)


def _missing(tool: ToolRequirement, project_type: str | None = None) -> MissingDependency:
    return MissingDependency(label=tool.label, project_type=project_type, hints=dict(tool.hints))


def print_missing(missing: list[MissingDependency]) -> None:
    """Print each missing tool with its per-platform install hints."""
    for dep in missing:
        print(f"  • {YELLOW}{dep.label}{NC}")
        for platform, hint in dep.hints.items():
            print(f"    {_PLATFORM_LABELS.get(platform, platform)}: {hint}")
        if dep.project_type:
            print(f"    Or run: python3 install.py --{dep.project_type}")
        print()


def check_prerequisites(probe: ToolProbe) -> None:
    """Ensure git and rsync are installed.

    Raises:
        PrerequisiteError: Listing every missing prerequisite.

    """
    print("Checking prerequisites...")
    missing: list[MissingDependency] = []
    for tool in PREREQUISITES:
        result = probe.probe(tool.name, tool.version_args)
        if result.present:
            _log.debug("%s found at %s (%s)", tool.name, result.path, result.version)
        else:
            print_fail(f"{tool.label} is not installed")
            missing.append(_missing(tool))

    if missing:
        print()
        print_missing(missing)
        names = ", ".join(dep.label for dep in missing)
        msg = f"Missing prerequisites: {names}"
        raise PrerequisiteError(msg, ["Install the missing tools and re-run devsecops-setup."])


def check_hook_manager(probe: ToolProbe, prompter: Prompter) -> bool:
    """Check for pre-commit; ask whether to continue when it is missing.

    Returns:
        True if pre-commit is installed.

    Raises:
        SetupAborted: If the operator does not confirm continuing.

    """
    if probe.probe(HOOK_MANAGER.name, HOOK_MANAGER.version_args).present:
        print_ok("All prerequisites installed")
        return True

    print_warn("pre-commit is not installed")
    print("    Install with: pip install pre-commit")
    print()
    if not prompter.confirm("Continue anyway?"):
        msg = "Setup aborted: pre-commit is not installed"
        raise SetupAborted(msg, ["pip install pre-commit", "Re-run devsecops-setup."])
    return False


def check_dependencies(
    profile: ProjectProfile,
    registry: dict[str, ProjectType],
    probe: ToolProbe,
) -> list[MissingDependency]:
    """Probe the tools of every detected project type.

    Returns:
        All missing tools, in registry order.

    """
    missing: list[MissingDependency] = []
    for key, project_type in registry.items():
        if not profile.is_detected(key):
            continue
        print(f"Checking {project_type.label} dependencies...")
        for tool in project_type.tools:
            result = probe.probe(tool.name, tool.version_args)
            if result.present:
                version = f" ({result.version})" if result.version else ""
                print_ok(f"{tool.label} found{version}")
            else:
                print_fail(f"{tool.label} is not installed")
                missing.append(_missing(tool, key))
    return missing


def validate_dependencies(
    profile: ProjectProfile,
    registry: dict[str, ProjectType],
    probe: ToolProbe,
) -> None:
    """Fail with the complete list of missing project dependencies.

    Raises:
        DependencyError: If any tool for a detected project type is missing.

    """
    if not profile.detected:
        print_info("No Terraform, Node.js, Go or Java project files detected")
        return

    missing = check_dependencies(profile, registry, probe)
    if missing:
        print()
        print_fail("Missing project dependencies")
        print()
        print("The following tools are required but are not installed:")
        print_missing(missing)
        raise DependencyError(missing)

    print_ok("All project dependencies found")
