"""UI-facing copy builders for errors and notifications."""

from __future__ import annotations

from paper_network.datastore import DOCUMENT_LABELS, DataLoadError


def _ensure_sentence(text: str) -> str:
    """Return text with terminal sentence punctuation."""
    cleaned = text.strip()
    if not cleaned:
        return ""
    if cleaned.endswith((".", "!", "?")):
        return cleaned
    return f"{cleaned}."


def build_next_step_hint(next_step: str) -> str:
    """Build a canonical next-step guidance line."""
    return f"Next step: {_ensure_sentence(next_step)}"


def build_actionable_error(
    action: str,
    *,
    next_step: str,
    why: str | None = None,
) -> str:
    """Build a 2-3 line actionable error message."""
    lines = [f"Could not {action.strip()}."]
    if why:
        lines.append(f"Why: {_ensure_sentence(why)}")
    lines.append(build_next_step_hint(next_step))
    return "\n".join(lines)


def build_load_failure_message(error: DataLoadError, *, interactive: bool) -> str:
    """Build the message shown when the paper data could not be loaded."""
    why = ", ".join(
        f"{DOCUMENT_LABELS.get(name, name)} ({reason})" for name, reason in error.failures.items()
    )
    if interactive:
        next_step = "check the data location and press ctrl+r to retry"
    else:
        next_step = "check --data/--titles/--edges/--search-index and retry"
    return build_actionable_error(
        "load paper data",
        why=f"failed documents: {why}",
        next_step=next_step,
    )


def build_loaded_notification(paper_count: int, search_count: int) -> str:
    """Build notification text for a successful data load."""
    return (
        f"Loaded {paper_count} paper title{'s' if paper_count != 1 else ''} "
        f"and {search_count} search entr{'ies' if search_count != 1 else 'y'}."
    )


__all__ = [
    "build_actionable_error",
    "build_load_failure_message",
    "build_loaded_notification",
    "build_next_step_hint",
]
