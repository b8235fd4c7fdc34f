"""Text formatting utilities shared by the TUI and the CLI."""

from __future__ import annotations

from rich.markup import escape as escape_markup


def truncate_text(text: str, max_len: int, suffix: str = "...") -> str:
    """Truncate text to max_len characters, adding suffix if truncated.

    Args:
        text: The text to truncate.
        max_len: Maximum length before truncation (not including suffix).
        suffix: String to append when truncated.

    Returns:
        Original text if within limit, otherwise truncated with suffix.
    """
    if len(text) <= max_len:
        return text
    return text[:max_len] + suffix


def escape_rich_text(text: str) -> str:
    """Escape text for safe Rich markup rendering."""
    return escape_markup(text) if text else ""


def pluralize(count: int, noun: str) -> str:
    """Return ``"1 paper"`` / ``"3 papers"`` style counts."""
    return f"{count} {noun}{'' if count == 1 else 's'}"


__all__ = [
    "escape_rich_text",
    "pluralize",
    "truncate_text",
]
