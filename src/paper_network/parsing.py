"""Validation and parsing of the three static input documents.

Each parser accepts the already-decoded JSON value. A document with the wrong
top-level shape raises ``DocumentFormatError``; individual malformed entries
are skipped and logged so one bad record never hides the rest of the graph.
"""

from __future__ import annotations

import logging
from typing import Any

from paper_network.models import SearchEntry

logger = logging.getLogger(__name__)


class DocumentFormatError(ValueError):
    """Raised when a document does not have the expected top-level shape."""


def parse_paper_id(raw: Any) -> int | None:
    """Coerce a string- or int-encoded paper id. Returns None if invalid."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None


def parse_title_index(data: Any) -> dict[int, str]:
    """Parse ``{"<id>": {"title": str}}`` into ``{id: title}``."""
    if not isinstance(data, dict):
        raise DocumentFormatError(f"title index must be a JSON object, got {type(data).__name__}")
    result: dict[int, str] = {}
    skipped = 0
    for key, value in data.items():
        paper_id = parse_paper_id(key)
        if paper_id is None or not isinstance(value, dict):
            skipped += 1
            continue
        title = value.get("title")
        if not isinstance(title, str) or not title:
            # Leave the id out; the graph falls back to the default label
            skipped += 1
            continue
        result[paper_id] = title
    if skipped:
        logger.warning("Skipped %d malformed title index entries", skipped)
    return result


def parse_adjacency(data: Any) -> dict[int, tuple[int, ...]]:
    """Parse ``{"<id>": [neighbor, ...]}`` into ``{id: (neighbor, ...)}``.

    Neighbor order is preserved. Neighbor ids may be ints or numeric strings.
    """
    if not isinstance(data, dict):
        raise DocumentFormatError(
            f"adjacency document must be a JSON object, got {type(data).__name__}"
        )
    result: dict[int, tuple[int, ...]] = {}
    skipped = 0
    for key, value in data.items():
        paper_id = parse_paper_id(key)
        if paper_id is None or not isinstance(value, list):
            skipped += 1
            continue
        neighbors: list[int] = []
        for raw_neighbor in value:
            neighbor_id = parse_paper_id(raw_neighbor)
            if neighbor_id is None:
                skipped += 1
                continue
            neighbors.append(neighbor_id)
        result[paper_id] = tuple(neighbors)
    if skipped:
        logger.warning("Skipped %d malformed adjacency entries", skipped)
    return result


def parse_search_index(data: Any) -> list[SearchEntry]:
    """Parse ``[{"int_id": int, "title": str}, ...]`` keeping document order."""
    if not isinstance(data, list):
        raise DocumentFormatError(f"search index must be a JSON array, got {type(data).__name__}")
    entries: list[SearchEntry] = []
    skipped = 0
    for item in data:
        if not isinstance(item, dict):
            skipped += 1
            continue
        paper_id = parse_paper_id(item.get("int_id"))
        if paper_id is None:
            skipped += 1
            continue
        title = item.get("title")
        entries.append(SearchEntry(id=paper_id, title=title if isinstance(title, str) else ""))
    if skipped:
        logger.warning("Skipped %d malformed search index entries", skipped)
    return entries


__all__ = [
    "DocumentFormatError",
    "parse_adjacency",
    "parse_paper_id",
    "parse_search_index",
    "parse_title_index",
]
