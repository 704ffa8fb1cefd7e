"""Tests for devsecops.prompts -- interactive selection flows.

Answers are fed from a scripted stream; no real terminal is involved.
"""

from __future__ import annotations

import io
from collections.abc import Callable

import pytest
from devsecops.errors import NonInteractiveError
from devsecops.prompts import (
    CIPlatformSelection,
    ConfigProfile,
    ProfileState,
    Prompter,
    next_profile_state,
    select_ci_platforms,
    select_config_profile,
)


class TestPrompter:
    def test_ask_strips_answer(self, make_prompter: Callable[..., Prompter]) -> None:
        assert make_prompter("  2  ").ask("Pick:") == "2"

    def test_ask_raises_on_end_of_input(self) -> None:
        prompter = Prompter(stdin=io.StringIO(""), stdout=io.StringIO())
        with pytest.raises(NonInteractiveError):
            prompter.ask("Pick:")

    @pytest.mark.parametrize(("answer", "expected"), [("y", True), ("YES", True), ("n", False), ("", False)])
    def test_confirm(
        self, make_prompter: Callable[..., Prompter], answer: str, expected: bool
    ) -> None:
        assert make_prompter(answer).confirm("Continue?") is expected

    def test_question_written_to_output(self, make_prompter: Callable[..., Prompter]) -> None:
        prompter = make_prompter("y")
        prompter.confirm("Continue?")
        assert "Continue? (y/n)" in prompter.stdout.getvalue()


class TestSelectCIPlatforms:
    @pytest.mark.parametrize(
        ("answer", "expected"),
        [
            ("1", CIPlatformSelection(github=True)),
            ("2", CIPlatformSelection(gitlab=True)),
            ("3", CIPlatformSelection(azure=True)),
            ("4", CIPlatformSelection(github=True, gitlab=True, azure=True)),
            ("5", CIPlatformSelection()),
        ],
    )
    def test_choices(
        self,
        make_prompter: Callable[..., Prompter],
        answer: str,
        expected: CIPlatformSelection,
    ) -> None:
        assert select_ci_platforms(make_prompter(answer)) == expected

    def test_invalid_input_reprompts(self, make_prompter: Callable[..., Prompter]) -> None:
        prompter = make_prompter("github", "9", "", "2")
        assert select_ci_platforms(prompter) == CIPlatformSelection(gitlab=True)
        assert prompter.stdout.getvalue().count("Invalid selection") == 3

    def test_selection_files(self) -> None:
        selection = CIPlatformSelection(github=True, azure=True)
        assert selection.files == [
            ".github/workflows/security-compliance.yml",
            "azure-pipelines.yml",
        ]
        assert CIPlatformSelection().files == []


class TestProfileTransitions:
    """The profile flow's transition table."""

    @pytest.mark.parametrize(
        ("state", "answer", "expected"),
        [
            (ProfileState.CHOOSE, "1", ProfileState.SECURITY),
            (ProfileState.CHOOSE, "2", ProfileState.CONFIRM_LINTING),
            (ProfileState.CHOOSE, "3", ProfileState.CHOOSE),
            (ProfileState.CHOOSE, "y", ProfileState.CHOOSE),
            (ProfileState.CONFIRM_LINTING, "y", ProfileState.SECURITY_LINTING),
            (ProfileState.CONFIRM_LINTING, "Yes", ProfileState.SECURITY_LINTING),
            (ProfileState.CONFIRM_LINTING, "n", ProfileState.CHOOSE),
            (ProfileState.CONFIRM_LINTING, "whatever", ProfileState.CHOOSE),
        ],
    )
    def test_next_state(self, state: ProfileState, answer: str, expected: ProfileState) -> None:
        assert next_profile_state(state, answer) is expected


class TestSelectConfigProfile:
    def test_security(self, make_prompter: Callable[..., Prompter]) -> None:
        assert select_config_profile(make_prompter("1")) is ConfigProfile.SECURITY

    def test_linting_confirmed(self, make_prompter: Callable[..., Prompter]) -> None:
        prompter = make_prompter("2", "y")
        assert select_config_profile(prompter) is ConfigProfile.SECURITY_LINTING
        assert "automatically format and modify" in prompter.stdout.getvalue()

    def test_declined_linting_returns_to_choice(
        self, make_prompter: Callable[..., Prompter]
    ) -> None:
        prompter = make_prompter("2", "n", "1")
        assert select_config_profile(prompter) is ConfigProfile.SECURITY
        assert "Please select again" in prompter.stdout.getvalue()

    def test_invalid_then_valid(self, make_prompter: Callable[..., Prompter]) -> None:
        assert select_config_profile(make_prompter("x", "2", "y")) is ConfigProfile.SECURITY_LINTING

    def test_exhausted_input_is_non_interactive(
        self, make_prompter: Callable[..., Prompter]
    ) -> None:
        with pytest.raises(NonInteractiveError):
            select_config_profile(make_prompter("2", "n"))


def test_profiles_use_distinct_templates() -> None:
    """Each profile maps to its own template file."""
    assert ConfigProfile.SECURITY.template == ".pre-commit-config-security.yaml"
    assert ConfigProfile.SECURITY_LINTING.template == ".pre-commit-config-security-linting.yaml"
