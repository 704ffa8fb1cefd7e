"""Pytest configuration for devsecops-setup tests.

Adds lib/python to sys.path for imports and provides fakes for the
interactive and tool-probing seams.
"""

from __future__ import annotations

import io
import sys
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

lib_path = Path(__file__).parent.parent / "lib" / "python"
if str(lib_path) not in sys.path:
    sys.path.insert(0, str(lib_path))

from devsecops.detect import ProjectType, load_registry  # noqa: E402
from devsecops.probe import ProbeResult  # noqa: E402
from devsecops.prompts import Prompter  # noqa: E402

REPO_ROOT = Path(__file__).parent.parent


class FakeProbe:
    """Tool probe that reports a fixed set of tools as installed."""

    def __init__(self, present: Iterable[str]) -> None:
        self.present = set(present)
        self.calls: list[str] = []

    def probe(self, name: str, version_args: tuple[str, ...] = ("--version",)) -> ProbeResult:
        self.calls.append(name)
        if name in self.present:
            return ProbeResult(name, f"/usr/bin/{name}", f"{name} 1.0.0")
        return ProbeResult(name)


@pytest.fixture
def make_probe() -> Callable[..., FakeProbe]:
    """Build a FakeProbe with the given tools present."""

    def _make(*present: str) -> FakeProbe:
        return FakeProbe(present)

    return _make


@pytest.fixture
def make_prompter() -> Callable[..., Prompter]:
    """Build a Prompter that answers from a script and records its output."""

    def _make(*answers: str) -> Prompter:
        script = "".join(f"{answer}\n" for answer in answers)
        return Prompter(stdin=io.StringIO(script), stdout=io.StringIO())

    return _make


@pytest.fixture
def registry() -> dict[str, ProjectType]:
    """Load the real project-type registry from configs/project_types.yaml."""
    return load_registry(REPO_ROOT / "configs" / "project_types.yaml")


@pytest.fixture
def template_repo(tmp_path: Path) -> Path:
    """Create a directory shaped like the fetched template repository."""
    repo = tmp_path / "template"
    (repo / ".devsecops").mkdir(parents=True)
    (repo / ".devsecops" / "eslintrc.json").write_text("{}\n")
    (repo / ".devsecops" / "eslintignore").write_text("node_modules/\n")
    (repo / ".github" / "workflows").mkdir(parents=True)
    (repo / ".github" / "workflows" / "security-compliance.yml").write_text("name: security\n")
    (repo / ".gitlab-ci.yml").write_text("stages: [scan]\n")
    (repo / "azure-pipelines.yml").write_text("trigger: [main]\n")
    (repo / "licensecheck.toml").write_text("[licensecheck]\n")
    (repo / ".pre-commit-config-security.yaml").write_text("repos:\n  - repo: security\n")
    (repo / ".pre-commit-config-security-linting.yaml").write_text("repos:\n  - repo: linting\n")
    (repo / ".pre-commit-config.yaml").write_text("repos:\n  - repo: default\n")
    return repo
