"""Presence checks for external tools.

All lookups of external commands go through a :class:`ToolProbe` so tests
can substitute a fake one.  Version strings are display-only.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from typing import Protocol

_log = logging.getLogger(__name__)

_VERSION_TIMEOUT = 10


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of probing a single tool."""

    name: str
    path: str | None = None
    version: str | None = None

    @property
    def present(self) -> bool:
        return self.path is not None


class ToolProbe(Protocol):
    """Capability to check whether an external tool is installed."""

    def probe(self, name: str, version_args: tuple[str, ...] = ("--version",)) -> ProbeResult:
        """Return the probe result for ``name``."""
        ...


class SystemToolProbe:
    """Probe tools on ``PATH`` and read their version banner."""

    def probe(self, name: str, version_args: tuple[str, ...] = ("--version",)) -> ProbeResult:
        path = shutil.which(name)
        if path is None:
            _log.debug("%s not found on PATH", name)
            return ProbeResult(name)
        return ProbeResult(name, path, _read_version(path, version_args))


def _read_version(path: str, version_args: tuple[str, ...]) -> str | None:
    """Return the first non-empty line of the tool's version output."""
    try:
        result = subprocess.run(
            [path, *version_args],
            capture_output=True,
            text=True,
            timeout=_VERSION_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired):
        _log.debug("Could not read version of %s", path, exc_info=True)
        return None

    # java -version writes to stderr
    for line in (result.stdout + "\n" + result.stderr).splitlines():
        if line.strip():
            return line.strip()
    return None
