"""Template fetch into a private staging directory."""

from __future__ import annotations

import logging
import signal
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from devsecops.constants import REPO_URL_ENV, STAGING_NAME
from devsecops.errors import FetchError

_log = logging.getLogger(__name__)

_TERMINATION_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


def _raise_exit(signum: int, _frame: object) -> None:
    raise SystemExit(128 + signum)


@contextmanager
def staging_dir() -> Iterator[Path]:
    """Yield a fresh staging path inside a private temporary directory.

    The temporary directory is removed when the block exits, whether by
    return, exception, Ctrl-C, or SIGTERM/SIGHUP (converted to SystemExit
    while the block runs).
    """
    previous = {sig: signal.signal(sig, _raise_exit) for sig in _TERMINATION_SIGNALS}
    try:
        with tempfile.TemporaryDirectory(prefix="devsecops-") as tmp:
            _log.debug("Created staging directory %s", tmp)
            yield Path(tmp) / STAGING_NAME
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def fetch_template(repo_url: str, dest: Path) -> Path:
    """Shallow-clone the template repository into ``dest``.

    Raises:
        FetchError: If git is missing or the clone fails.

    """
    cmd = ["git", "clone", "--depth", "1", "--single-branch", repo_url, str(dest)]
    _log.debug("Running %s", cmd)
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as e:
        _log.debug("git clone could not start", exc_info=True)
        msg = f"Failed to clone repository: {e}"
        raise FetchError(msg, _fetch_remediation()) from e

    if result.returncode != 0:
        _log.debug("git clone exited %d: %s", result.returncode, result.stderr.strip())
        msg = "Failed to clone repository"
        raise FetchError(msg, _fetch_remediation())

    return dest


def _fetch_remediation() -> list[str]:
    return [
        "Verify the repository URL is correct",
        "Ensure you have proper authentication (SSH keys or credentials)",
        f"Set {REPO_URL_ENV} environment variable if using a custom URL",
        "Re-run devsecops-setup",
    ]
