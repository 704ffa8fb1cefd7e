"""Coloured status lines shared by the setup steps."""

from __future__ import annotations

from devsecops.constants import BLUE, GREEN, NC, RED, YELLOW

RULE = "=" * 48


def print_ok(msg: str) -> None:
    print(f"  {GREEN}✓{NC} {msg}")


def print_skip(msg: str) -> None:
    print(f"  {YELLOW}⊘ {msg}{NC}")


def print_warn(msg: str) -> None:
    print(f"  {YELLOW}⚠ {msg}{NC}")


def print_fail(msg: str) -> None:
    print(f"  {RED}✗ {msg}{NC}")


def print_info(msg: str) -> None:
    print(f"  {BLUE}ℹ {msg}{NC}")


def print_section(title: str) -> None:
    """Print a blank line followed by a blue section title."""
    print()
    print(f"{BLUE}{title}{NC}")
