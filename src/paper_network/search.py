"""Literal substring search over the flattened search index."""

from __future__ import annotations

from collections.abc import Iterable
from itertools import islice

from paper_network.models import SEARCH_RESULT_LIMIT, SearchEntry


def filter_entries(
    term: str,
    entries: Iterable[SearchEntry],
    limit: int = SEARCH_RESULT_LIMIT,
) -> tuple[SearchEntry, ...]:
    """Return entries whose title contains ``term``, ignoring case.

    Results keep the index order and are cut at ``limit``. A blank term
    matches nothing. There is no fuzzy matching and no scoring: the first
    ``limit`` literal matches are the answer.
    """
    if not term.strip() or limit <= 0:
        return ()
    needle = term.casefold()
    matches = (entry for entry in entries if entry.title and needle in entry.title.casefold())
    return tuple(islice(matches, limit))


__all__ = ["filter_entries"]
