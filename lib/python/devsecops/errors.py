"""Error types raised by the setup steps.

Every error carries a human-readable cause and a list of remediation steps.
``run_setup`` prints both and exits with status 1; no traceback is shown.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from devsecops.validate import MissingDependency


class SetupError(Exception):
    """Base class for fatal setup errors."""

    def __init__(self, message: str, remediation: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.remediation = remediation or []


class PrerequisiteError(SetupError):
    """A hard prerequisite (git, rsync) is missing."""


class DependencyError(SetupError):
    """Tools required by the detected project types are missing."""

    def __init__(self, missing: list[MissingDependency]) -> None:
        names = ", ".join(dep.label for dep in missing)
        super().__init__(
            f"Missing project dependencies: {names}",
            ["Install the missing dependencies and re-run devsecops-setup."],
        )
        self.missing = missing


class FetchError(SetupError):
    """The template repository could not be cloned."""


class InstallError(SetupError):
    """A mandatory file could not be installed."""


class SetupAborted(SetupError):
    """The operator chose to stop the run."""


class NonInteractiveError(SetupError):
    """Standard input is not available for prompts."""

    def __init__(self) -> None:
        super().__init__(
            "Non-interactive mode is not supported",
            ["Run devsecops-setup from an interactive terminal."],
        )
