"""Interactive selection flows.

Both flows ask on every run and keep no memory of earlier answers.  They
block until a valid answer arrives; end of input raises
:class:`~devsecops.errors.NonInteractiveError`.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from devsecops.constants import AZURE_PIPELINES, GITHUB_WORKFLOW, GITLAB_CI, GREEN, NC, RED, YELLOW
from devsecops.errors import NonInteractiveError

_AFFIRMATIVE = {"y", "yes"}


class Prompter:
    """Read answers from a text stream and write prompts to another.

    Streams default to ``sys.stdin``/``sys.stdout`` looked up at call time.
    """

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self._stdin = stdin
        self._stdout = stdout

    @property
    def stdin(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def say(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def ask(self, question: str) -> str:
        """Show ``question`` and return the stripped answer."""
        self.stdout.write(f"{question} ")
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise NonInteractiveError
        return line.strip()

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question; anything but y/yes is a no."""
        return self.ask(f"{question} (y/n)").lower() in _AFFIRMATIVE


# ---------------------------------------------------------------------------
# CI platform selection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CIPlatformSelection:
    """Which CI platform files to install."""

    github: bool = False
    gitlab: bool = False
    azure: bool = False

    @property
    def files(self) -> list[str]:
        """Template paths of the selected platforms."""
        chosen = [
            (self.github, GITHUB_WORKFLOW),
            (self.gitlab, GITLAB_CI),
            (self.azure, AZURE_PIPELINES),
        ]
        return [path for selected, path in chosen if selected]


_CI_CHOICES: dict[str, tuple[str, CIPlatformSelection]] = {
    "1": ("GitHub Actions only", CIPlatformSelection(github=True)),
    "2": ("GitLab CI only", CIPlatformSelection(gitlab=True)),
    "3": ("Azure Pipelines only", CIPlatformSelection(azure=True)),
    "4": ("All three platforms", CIPlatformSelection(github=True, gitlab=True, azure=True)),
    "5": ("None", CIPlatformSelection()),
}


def select_ci_platforms(prompter: Prompter) -> CIPlatformSelection:
    """Ask which CI platform files to install."""
    prompter.say("Choose the CI/CD platform files to install:")
    prompter.say()
    for key, (label, _) in _CI_CHOICES.items():
        prompter.say(f"{key}) {label}")
    prompter.say()

    while True:
        answer = prompter.ask(f"Select option (1-{len(_CI_CHOICES)}):")
        if answer in _CI_CHOICES:
            label, selection = _CI_CHOICES[answer]
            prompter.say(f"{GREEN}✓ Selected: {label}{NC}")
            return selection
        prompter.say(f"Invalid selection. Please choose 1-{len(_CI_CHOICES)}.")


# ---------------------------------------------------------------------------
# Pre-commit profile selection
# ---------------------------------------------------------------------------


class ConfigProfile(Enum):
    """Mutually exclusive pre-commit configuration variants."""

    SECURITY = "security"
    SECURITY_LINTING = "security-linting"

    @property
    def template(self) -> str:
        return f".pre-commit-config-{self.value}.yaml"

    @property
    def label(self) -> str:
        return "Security Only" if self is ConfigProfile.SECURITY else "Security + Linting"


class ProfileState(Enum):
    """States of the profile selection flow."""

    CHOOSE = "choose"
    CONFIRM_LINTING = "confirm_linting"
    SECURITY = "security"
    SECURITY_LINTING = "security_linting"


_PROFILE_TRANSITIONS: dict[tuple[ProfileState, str], ProfileState] = {
    (ProfileState.CHOOSE, "1"): ProfileState.SECURITY,
    (ProfileState.CHOOSE, "2"): ProfileState.CONFIRM_LINTING,
    (ProfileState.CONFIRM_LINTING, "yes"): ProfileState.SECURITY_LINTING,
    (ProfileState.CONFIRM_LINTING, "no"): ProfileState.CHOOSE,
}

_TERMINAL_STATES: dict[ProfileState, ConfigProfile] = {
    ProfileState.SECURITY: ConfigProfile.SECURITY,
    ProfileState.SECURITY_LINTING: ConfigProfile.SECURITY_LINTING,
}

_PROFILE_MENU = f"""Choose your pre-commit configuration:

1) Security Only - Basic security checks without code formatting
   • Security scanning (ASH, Ferret)
   • License compliance
   • Basic code quality checks
   • No automatic code formatting

2) Security + Linting - Complete code quality and security
   • All security checks from option 1
   • Automatic code formatting (Black, Prettier, etc.)
   • Language-specific linting (ESLint, Go fmt, etc.)
   {RED}⚠️  WARNING: This option will automatically modify your code files{NC}
"""

_LINTING_WARNING = f"""{YELLOW}⚠️  WARNING: The selected configuration will automatically format and modify your code files during commits.{NC}
   This includes:
   • Python: Black formatting
   • JavaScript/TypeScript: ESLint fixes + Prettier formatting
   • Go: gofmt + goimports formatting
   • Java: Pretty formatting
"""


def next_profile_state(state: ProfileState, answer: str) -> ProfileState:
    """Apply one answer to the profile flow.

    In ``CONFIRM_LINTING`` any non-affirmative answer counts as ``"no"``.
    Unknown input leaves the state unchanged.
    """
    if state is ProfileState.CONFIRM_LINTING:
        answer = "yes" if answer.lower() in _AFFIRMATIVE else "no"
    return _PROFILE_TRANSITIONS.get((state, answer), state)


def select_config_profile(prompter: Prompter) -> ConfigProfile:
    """Run the profile flow until a terminal state is reached."""
    prompter.say(_PROFILE_MENU)

    state = ProfileState.CHOOSE
    while state not in _TERMINAL_STATES:
        if state is ProfileState.CHOOSE:
            answer = prompter.ask("Select option (1 or 2):")
            state = next_profile_state(state, answer)
            if state is ProfileState.CHOOSE:
                prompter.say("Invalid selection. Please choose 1 or 2.")
            elif state is ProfileState.CONFIRM_LINTING:
                prompter.say(_LINTING_WARNING)
        else:
            answer = prompter.ask("Continue with auto-formatting configuration? (y/n)")
            state = next_profile_state(state, answer)
            if state is ProfileState.CHOOSE:
                prompter.say("Please select again:")

    profile = _TERMINAL_STATES[state]
    prompter.say(f"{GREEN}✓ Selected: {profile.label} configuration{NC}")
    return profile
