"""Idempotent .gitignore augmentation."""

from __future__ import annotations

from pathlib import Path

from devsecops.constants import IGNORE_BLOCK, IGNORE_SENTINEL


def merge_ignore_entries(
    path: Path,
    block: str = IGNORE_BLOCK,
    sentinel: str = IGNORE_SENTINEL,
) -> bool:
    """Append ``block`` to the ignore file unless ``sentinel`` is already there.

    Creates the file when missing.  Existing content is never rewritten, and
    is compared as bytes so files in any encoding are accepted.

    Returns:
        True if the block was appended.

    """
    if not path.exists():
        path.touch()

    existing = path.read_bytes()
    if sentinel.encode() in existing:
        return False

    # Ensure we start on a new line if the file doesn't end with a newline
    prefix = b"\n" if existing and not existing.endswith(b"\n") else b""
    with path.open("ab") as f:
        f.write(prefix + block.encode())
    return True
