"""Guarded installation of template files into the target project.

Files that may carry user customisation go through the conflict protocol:
an existing destination is only replaced after the operator confirms, the
old copy is kept as ``<name>.bak``, and a failed copy restores that backup
so the destination is never left missing.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from devsecops.console import print_fail, print_ok, print_warn
from devsecops.constants import BACKUP_SUFFIX
from devsecops.errors import InstallError

if TYPE_CHECKING:
    from collections.abc import Callable

    from devsecops.prompts import Prompter

_log = logging.getLogger(__name__)


class ConflictPolicy(Enum):
    """What to do when the destination already exists."""

    OVERWRITE_SILENTLY = "overwrite-silently"
    BACKUP_THEN_REPLACE = "backup-then-replace"
    SKIP_IF_PRESENT_UNLESS_CONFIRMED = "skip-if-present-unless-confirmed"


class InstallOutcome(Enum):
    """Result of installing one file."""

    INSTALLED = "installed"
    BACKED_UP_AND_REPLACED = "backed up and replaced"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class InstallTarget:
    """A template file and where it goes in the project."""

    source: Path
    destination: Path
    policy: ConflictPolicy = ConflictPolicy.BACKUP_THEN_REPLACE
    label: str = ""

    @property
    def name(self) -> str:
        return self.label or self.destination.name


def backup_path(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


# ---------------------------------------------------------------------------
# Unconditional copies
# ---------------------------------------------------------------------------


def sync_directory(src: Path, dst: Path) -> None:
    """Merge-copy ``src`` into ``dst`` with rsync, overwriting same-path files.

    Raises:
        InstallError: If the source is missing or rsync fails.

    """
    if not src.is_dir():
        msg = f"{src.name}/ directory not found in template"
        raise InstallError(msg, ["Check that the template repository is complete."])

    cmd = ["rsync", "-a", f"{src}/", f"{dst}/"]
    _log.debug("Running %s", cmd)
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as e:
        msg = f"Failed to copy {dst.name}/ directory: {e}"
        raise InstallError(msg, ["Ensure rsync is installed and re-run devsecops-setup."]) from e

    if result.returncode != 0:
        _log.debug("rsync exited %d: %s", result.returncode, result.stderr.strip())
        msg = f"Failed to copy {dst.name}/ directory"
        raise InstallError(msg, [f"Check write permissions for {dst} and re-run devsecops-setup."])


def copy_required(src: Path, dst: Path) -> None:
    """Copy a file the rest of the run depends on.

    Raises:
        InstallError: If the copy fails for any reason.

    """
    try:
        shutil.copy2(src, dst)
    except OSError as e:
        _log.debug("Copy of %s failed", src, exc_info=True)
        msg = f"Failed to copy {dst.name}"
        raise InstallError(msg, [f"Check that {src.name} exists in the template repository."]) from e


# ---------------------------------------------------------------------------
# Conflict protocol
# ---------------------------------------------------------------------------


def confirm_replace(destination: Path, prompter: Prompter) -> bool:
    """Decide whether ``destination`` may be written.

    Returns True when the file does not exist yet.  For an existing file the
    operator is asked.
    """
    if not destination.exists():
        return True

    print()
    print_warn(f"{destination.name} already exists in this repository")
    if prompter.confirm(f"Do you want to replace it with DevSecOps {destination.name}?"):
        return True

    print(f"  Keeping existing {destination.name}")
    print_warn("Note: You may need to manually merge the DevSecOps changes into it")
    return False


def replace_file(source: Path, destination: Path, *, backup: bool = True) -> InstallOutcome:
    """Copy ``source`` over ``destination``, keeping a ``.bak`` when asked.

    If the copy fails after a backup was taken the backup is moved back.
    """
    saved: Path | None = None
    if backup and destination.exists():
        saved = backup_path(destination)
        try:
            os.replace(destination, saved)
        except OSError:
            _log.debug("Could not back up %s", destination, exc_info=True)
            print_fail(f"Could not back up {destination.name}")
            return InstallOutcome.FAILED
        print(f"  Backed up existing {destination.name} to {saved.name}")

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)
    except OSError:
        _log.debug("Copy of %s to %s failed", source, destination, exc_info=True)
        if saved is not None:
            try:
                os.replace(saved, destination)
            except OSError:
                _log.debug("Could not restore %s", saved, exc_info=True)
                print_fail(f"Could not copy {destination.name}; the original is kept at {saved}")
            else:
                print_fail(f"Could not copy {destination.name} (original restored)")
        else:
            print_fail(f"Could not copy {destination.name}")
        return InstallOutcome.FAILED

    if saved is not None:
        print_ok(f"{destination.name} replaced (backup saved as {saved.name})")
        return InstallOutcome.BACKED_UP_AND_REPLACED

    print_ok(f"{destination.name} copied")
    return InstallOutcome.INSTALLED


def install_file(
    target: InstallTarget,
    prompter: Prompter,
    *,
    confirmed: bool = False,
    validate: Callable[[Path], None] | None = None,
) -> InstallOutcome:
    """Install one template file according to its conflict policy.

    Args:
        target: Source, destination and policy.
        prompter: Used to confirm replacing an existing destination.
        confirmed: The operator already agreed to replace the destination,
            so no question is asked.
        validate: Called with the source before the destination is touched;
            raising ``ValueError`` marks the install as failed.

    """
    if not target.source.is_file():
        print_warn(f"{target.name} not found in template (skipping)")
        return InstallOutcome.FAILED

    if validate is not None:
        try:
            validate(target.source)
        except (OSError, ValueError) as e:
            print_fail(f"{target.name} template is invalid: {e}")
            return InstallOutcome.FAILED

    existed = target.destination.exists()
    if target.policy is ConflictPolicy.OVERWRITE_SILENTLY:
        return replace_file(target.source, target.destination, backup=False)

    if not confirmed and not confirm_replace(target.destination, prompter):
        return InstallOutcome.SKIPPED

    backup = existed and target.policy is ConflictPolicy.BACKUP_THEN_REPLACE
    return replace_file(target.source, target.destination, backup=backup)
