"""The devsecops-setup run.

Each step takes a :class:`RunContext` and returns an updated copy, or
raises a :class:`~devsecops.errors.SetupError` that ends the run with exit
status 1.  Steps up to the template fetch only read the filesystem; later
steps write into the project one guarded file at a time, so a failed run can
leave a partially configured project that a re-run completes safely.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from devsecops import __version__
from devsecops._paths import find_project_types
from devsecops.cleanup import remove_launcher
from devsecops.console import RULE, print_fail, print_info, print_ok, print_section, print_warn
from devsecops.constants import (
    AZURE_PIPELINES,
    BLUE,
    CONFIG_DIR,
    DEFAULT_REPO_URL,
    GITHUB_WORKFLOW,
    GITIGNORE,
    GITLAB_CI,
    GREEN,
    HOOK_CONFIG,
    LICENSE_POLICY,
    NC,
    RED,
    REPO_URL_ENV,
    YELLOW,
)
from devsecops.detect import ProjectProfile, ProjectType, detect_project, load_registry
from devsecops.errors import SetupError
from devsecops.fetch import fetch_template, staging_dir
from devsecops.files import (
    ConflictPolicy,
    InstallOutcome,
    InstallTarget,
    confirm_replace,
    copy_required,
    install_file,
    sync_directory,
)
from devsecops.gitignore import merge_ignore_entries
from devsecops.probe import SystemToolProbe
from devsecops.prompts import (
    CIPlatformSelection,
    ConfigProfile,
    Prompter,
    select_ci_platforms,
    select_config_profile,
)
from devsecops.validate import check_hook_manager, check_prerequisites, validate_dependencies

if TYPE_CHECKING:
    from devsecops.probe import ToolProbe

_log = logging.getLogger(__name__)

_CI_LABELS = {
    GITHUB_WORKFLOW: "GitHub Actions workflow",
    GITLAB_CI: "GitLab CI pipeline",
    AZURE_PIPELINES: "Azure Pipelines definition",
}


@dataclass(frozen=True)
class RunContext:
    """State threaded through the setup steps."""

    project_dir: Path
    repo_url: str = DEFAULT_REPO_URL
    profile: ProjectProfile = field(default_factory=ProjectProfile)
    hook_manager: bool = False
    staging: Path | None = None
    ci: CIPlatformSelection | None = None
    config_profile: ConfigProfile | None = None
    outcomes: tuple[tuple[str, InstallOutcome], ...] = ()

    def record(self, name: str, outcome: InstallOutcome) -> RunContext:
        return replace(self, outcomes=(*self.outcomes, (name, outcome)))

    def template(self, relative: str) -> Path:
        if self.staging is None:
            msg = "Template has not been fetched"
            raise RuntimeError(msg)
        return self.staging / relative


def resolve_repo_url() -> str:
    """Return the template URL, honouring the environment override."""
    return os.environ.get(REPO_URL_ENV) or DEFAULT_REPO_URL


# ---------------------------------------------------------------------------
# Validation steps
# ---------------------------------------------------------------------------


def step_prerequisites(ctx: RunContext, probe: ToolProbe, prompter: Prompter) -> RunContext:
    check_prerequisites(probe)
    return replace(ctx, hook_manager=check_hook_manager(probe, prompter))


def step_detect(ctx: RunContext, registry: dict[str, ProjectType]) -> RunContext:
    print_section("Project Type Detection")
    profile = detect_project(ctx.project_dir, registry)
    for key in profile.detected:
        print_info(f"Detected {registry[key].label} ({profile.markers[key]})")
    return replace(ctx, profile=profile)


def step_dependencies(
    ctx: RunContext,
    registry: dict[str, ProjectType],
    probe: ToolProbe,
) -> RunContext:
    validate_dependencies(ctx.profile, registry, probe)
    return ctx


# ---------------------------------------------------------------------------
# Template steps
# ---------------------------------------------------------------------------


def step_fetch(ctx: RunContext, staging: Path) -> RunContext:
    print()
    print("Cloning DevSecOps repository...")
    fetch_template(ctx.repo_url, staging)
    print_ok("Repository cloned")
    return replace(ctx, staging=staging)


def step_install_config_dir(ctx: RunContext) -> RunContext:
    print("Copying DevSecOps configuration directory...")
    sync_directory(ctx.template(CONFIG_DIR), ctx.project_dir / CONFIG_DIR)
    print_ok(f"{CONFIG_DIR}/ directory copied")
    return ctx.record(f"{CONFIG_DIR}/", InstallOutcome.INSTALLED)


def step_install_license(ctx: RunContext) -> RunContext:
    print(f"Copying {LICENSE_POLICY}...")
    copy_required(ctx.template(LICENSE_POLICY), ctx.project_dir / LICENSE_POLICY)
    print_ok(f"{LICENSE_POLICY} copied")
    return ctx.record(LICENSE_POLICY, InstallOutcome.INSTALLED)


def step_select_ci(ctx: RunContext, prompter: Prompter) -> RunContext:
    print_section("CI/CD Platform Selection")
    return replace(ctx, ci=select_ci_platforms(prompter))


def step_install_ci(ctx: RunContext, prompter: Prompter) -> RunContext:
    """Install the selected CI platform files; failures are warnings."""
    selection = ctx.ci or CIPlatformSelection()
    for relative in selection.files:
        print()
        print(f"Installing {_CI_LABELS[relative]}...")
        target = InstallTarget(
            source=ctx.template(relative),
            destination=ctx.project_dir / relative,
            policy=ConflictPolicy.BACKUP_THEN_REPLACE,
            label=relative,
        )
        outcome = install_file(target, prompter)
        if outcome is InstallOutcome.FAILED:
            print_warn(f"Could not install {relative} (continuing)")
        ctx = ctx.record(relative, outcome)
    return ctx


def check_hook_config(path: Path) -> None:
    """Ensure a pre-commit template parses to a mapping with ``repos``.

    Raises:
        ValueError: If the template is not usable.

    """
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        msg = f"invalid YAML: {e}"
        raise ValueError(msg) from e
    if not isinstance(data, dict) or "repos" not in data:
        msg = "expected a mapping with a 'repos' key"
        raise ValueError(msg)


def step_install_hook_config(ctx: RunContext, prompter: Prompter) -> RunContext:
    """Resolve the hook-config conflict, then ask for the profile and install it.

    The profile prompt is skipped when the operator keeps an existing file.
    """
    destination = ctx.project_dir / HOOK_CONFIG
    if not confirm_replace(destination, prompter):
        return ctx.record(HOOK_CONFIG, InstallOutcome.SKIPPED)

    print_section("Pre-commit Configuration Selection")
    profile = select_config_profile(prompter)
    ctx = replace(ctx, config_profile=profile)

    source = ctx.template(profile.template)
    if not source.is_file():
        print_fail(f"Configuration file {profile.template} not found in repository")
        print("  Using default configuration from repository...")
        source = ctx.template(HOOK_CONFIG)

    print("Installing selected pre-commit configuration...")
    target = InstallTarget(
        source=source,
        destination=destination,
        policy=ConflictPolicy.BACKUP_THEN_REPLACE,
        label=HOOK_CONFIG,
    )
    outcome = install_file(target, prompter, confirmed=True, validate=check_hook_config)
    if outcome is not InstallOutcome.FAILED:
        if ctx.profile.terraform:
            print_info("Terraform hooks will run automatically when .tf files are present")
        else:
            print_info("Terraform hooks are included but will only run if .tf files are added later")
    return ctx.record(HOOK_CONFIG, outcome)


# ---------------------------------------------------------------------------
# Post-install steps
# ---------------------------------------------------------------------------


def step_gitignore(ctx: RunContext) -> RunContext:
    print()
    print(f"Updating {GITIGNORE}...")
    path = ctx.project_dir / GITIGNORE
    created = not path.exists()
    try:
        merged = merge_ignore_entries(path)
    except OSError:
        _log.debug("Could not update %s", path, exc_info=True)
        print_warn(f"Could not update {GITIGNORE} (continuing)")
        return ctx

    if merged:
        if created:
            print_ok(f"Created {GITIGNORE}")
        print_ok(f"Added DevSecOps generated file entries to {GITIGNORE}")
        print(f"  {YELLOW}Note: {CONFIG_DIR}/ was NOT added to {GITIGNORE}{NC}")
        print("    Commit it to share the configuration with your team")
    else:
        print_ok(f"{GITIGNORE} already contains DevSecOps entries")
    return ctx


def refresh_hooks(project_dir: Path, *, hook_manager: bool) -> bool:
    """Run ``pre-commit autoupdate``; failures are reported, not raised.

    Returns:
        True if the hooks were updated.

    """
    if not hook_manager:
        return False

    print()
    print("Updating pre-commit hooks to latest versions...")
    try:
        result = subprocess.run(
            ["pre-commit", "autoupdate"],
            capture_output=True,
            text=True,
            cwd=project_dir,
            check=False,
        )
    except OSError:
        _log.debug("pre-commit autoupdate could not start", exc_info=True)
        print_warn("Could not update hooks (continuing)")
        return False

    if result.returncode != 0:
        _log.debug("pre-commit autoupdate exited %d: %s", result.returncode, result.stderr)
        print_warn("Could not update hooks (continuing)")
        return False

    print_ok("Hooks updated successfully")
    return True


def step_refresh_hooks(ctx: RunContext) -> RunContext:
    refresh_hooks(ctx.project_dir, hook_manager=ctx.hook_manager)
    return ctx


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


def print_banner() -> None:
    print(RULE)
    print(f"{BLUE}  DevSecOps Setup v{__version__}{NC}")
    print(RULE)
    print()


def print_summary(ctx: RunContext) -> None:
    print()
    print(RULE)
    print(f"{GREEN}✓ Setup Complete!{NC}")
    print(RULE)
    print()
    print("Files added/updated in your repository:")
    for name, outcome in ctx.outcomes:
        detail = ""
        if name == HOOK_CONFIG and ctx.config_profile is not None:
            detail = f", {ctx.config_profile.value} configuration"
        print(f"  • {name} ({outcome.value}{detail})")
    print(f"  • {GITIGNORE} (DevSecOps entries)")
    print()

    steps = [f"Review changes: {YELLOW}git status{NC}"]
    if not ctx.hook_manager:
        steps.append(f"Install pre-commit: {YELLOW}pip install pre-commit{NC}")
    steps.append(f"Install hooks: {YELLOW}GIT_CONFIG_NOSYSTEM=1 pre-commit install{NC}")
    steps.append(f"Test hooks: {YELLOW}pre-commit run --all-files{NC}")

    print(f"{BLUE}Next steps:{NC}")
    for number, step in enumerate(steps, start=1):
        print(f"  {number}. {step}")


def report_error(error: SetupError) -> None:
    """Print a fatal error with its remediation steps."""
    print()
    print(f"{RED}✗ {error.message}{NC}")
    if error.remediation:
        print()
        print("  Steps to resolve:")
        for number, step in enumerate(error.remediation, start=1):
            print(f"  {number}. {step}")
    print()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def run_setup(
    *,
    project_dir: Path | None = None,
    repo_url: str | None = None,
    probe: ToolProbe | None = None,
    prompter: Prompter | None = None,
    registry: dict[str, ProjectType] | None = None,
    script_path: str | None = None,
) -> int:
    """Run the full setup workflow.

    Args:
        project_dir: Target project (defaults to the current directory).
        repo_url: Template repository (defaults to ``DEVSECOPS_REPO_URL`` or
            the public template).
        probe: Tool presence checker.
        prompter: Source of interactive answers.
        registry: Project-type registry (defaults to ``configs/project_types.yaml``).
        script_path: Path of the invoking launcher, removed on success when
            it was fetched transiently.

    Returns:
        Exit code (0 for success).

    """
    project_dir = project_dir or Path.cwd()
    probe = probe or SystemToolProbe()
    prompter = prompter or Prompter()

    if registry is None:
        try:
            registry = load_registry(find_project_types())
        except (FileNotFoundError, TypeError, yaml.YAMLError) as e:
            print(f"{RED}Error: {e}{NC}", file=sys.stderr)
            return 1

    print_banner()
    ctx = RunContext(project_dir=project_dir, repo_url=repo_url or resolve_repo_url())

    try:
        ctx = step_prerequisites(ctx, probe, prompter)
        ctx = step_detect(ctx, registry)
        ctx = step_dependencies(ctx, registry, probe)

        with staging_dir() as staging:
            ctx = step_fetch(ctx, staging)
            ctx = step_install_config_dir(ctx)
            ctx = step_install_license(ctx)
            ctx = step_select_ci(ctx, prompter)
            ctx = step_install_ci(ctx, prompter)
            ctx = step_install_hook_config(ctx, prompter)
        ctx = replace(ctx, staging=None)

        ctx = step_gitignore(ctx)
        ctx = step_refresh_hooks(ctx)
    except SetupError as e:
        report_error(e)
        return 1

    print_summary(ctx)

    if remove_launcher(script_path, project_dir):
        print()
        print(f"{YELLOW}Cleaning up...{NC}")
        print_ok("Setup script removed")

    return 0

