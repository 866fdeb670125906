"""Shared utilities for Blitz CLI commands."""

from rich.console import Console

console = Console()


def mask_secret(value: str | None, visible: int = 4) -> str:
    """Show only the last ``visible`` characters of a secret."""
    if not value:
        return "(not set)"
    if len(value) <= visible:
        return "*" * len(value)
    return "*" * (len(value) - visible) + value[-visible:]
