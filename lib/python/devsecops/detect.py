"""Project-type detection.

Reads the project-type registry (``configs/project_types.yaml``) and scans
the target project for marker files.  Detection is advisory: it only selects
which dependency groups are validated and never fails a run.
"""

from __future__ import annotations

import fnmatch
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

_log = logging.getLogger(__name__)

# Files deeper than this (a/b/file is depth 3) are not considered
MAX_DEPTH = 3

PROFILE_KEYS = ("terraform", "node", "go", "java")

_PLATFORMS = ("macos", "linux", "windows")


@dataclass(frozen=True)
class ToolRequirement:
    """An external tool needed by a project type."""

    name: str
    label: str
    version_args: tuple[str, ...] = ("--version",)
    hints: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ProjectType:
    """Detection rules and tool requirements for one project type."""

    key: str
    label: str
    files: tuple[str, ...] = ()
    patterns: tuple[str, ...] = ()
    tools: tuple[ToolRequirement, ...] = ()


@dataclass(frozen=True)
class ProjectProfile:
    """Project types detected in the target directory."""

    terraform: bool = False
    node: bool = False
    go: bool = False
    java: bool = False
    markers: dict[str, str] = field(default_factory=dict, compare=False)

    def is_detected(self, key: str) -> bool:
        return bool(getattr(self, key, False))

    @property
    def detected(self) -> list[str]:
        """Keys of the detected project types, in registry order."""
        return [key for key in PROFILE_KEYS if self.is_detected(key)]


def load_registry(registry_path: Path) -> dict[str, ProjectType]:
    """Load the project-type registry from YAML.

    Args:
        registry_path: Path to project_types.yaml

    Returns:
        Mapping of project-type key to its rules, in file order.

    Raises:
        FileNotFoundError: If registry file doesn't exist
        yaml.YAMLError: If registry file is invalid YAML
        TypeError: If registry is not a dict

    """
    with registry_path.open() as f:
        raw = yaml.safe_load(f)
    if not isinstance(raw, dict):
        msg = f"Registry must be a dict, got {type(raw).__name__}"
        raise TypeError(msg)
    return {key: _parse_project_type(key, value or {}) for key, value in raw.items()}


def _parse_project_type(key: str, config: dict[str, Any]) -> ProjectType:
    rules = config.get("detect", {}) or {}
    tools = tuple(
        ToolRequirement(
            name=tool["name"],
            label=tool.get("label", tool["name"]),
            version_args=tuple(tool.get("version_args", ["--version"])),
            hints={p: tool["hints"][p] for p in _PLATFORMS if p in tool.get("hints", {})},
        )
        for tool in config.get("tools", []) or []
    )
    return ProjectType(
        key=key,
        label=config.get("label", key),
        files=tuple(rules.get("files", []) or []),
        patterns=tuple(rules.get("patterns", []) or []),
        tools=tools,
    )


def scan_files(project_dir: Path, max_depth: int = MAX_DEPTH) -> list[Path]:
    """List files under ``project_dir`` down to ``max_depth``, relative and sorted.

    ``.git`` is never descended into.
    """
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(project_dir):
        rel_dir = Path(dirpath).relative_to(project_dir)
        depth = len(rel_dir.parts)
        dirnames[:] = sorted(d for d in dirnames if d != ".git") if depth < max_depth - 1 else []
        found.extend(rel_dir / name for name in filenames)
    return sorted(found)


def _find_marker(files: list[Path], project_type: ProjectType) -> Path | None:
    """Return the first marker for ``project_type``; exact names win over patterns."""
    for name in project_type.files:
        for path in files:
            if path.name == name:
                return path
    for pattern in project_type.patterns:
        for path in files:
            if fnmatch.fnmatch(path.name, pattern):
                return path
    return None


def detect_project(project_dir: Path, registry: dict[str, ProjectType]) -> ProjectProfile:
    """Detect project types present in ``project_dir``.

    Args:
        project_dir: Path to the target project
        registry: Project-type registry from :func:`load_registry`

    Returns:
        The detected :class:`ProjectProfile`.

    """
    files = scan_files(project_dir)
    flags: dict[str, bool] = {}
    markers: dict[str, str] = {}

    for key, project_type in registry.items():
        if key not in PROFILE_KEYS:
            _log.debug("Ignoring unknown project type %r in registry", key)
            continue
        marker = _find_marker(files, project_type)
        flags[key] = marker is not None
        if marker is not None:
            markers[key] = marker.as_posix()
            _log.debug("Detected %s via %s", key, marker)

    return ProjectProfile(**flags, markers=markers)
