"""Internal document service for fetching JSON documents by URL or path."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import httpx

_HTTP_SCHEMES = ("http://", "https://")


def is_remote_location(location: str) -> bool:
    """Return True when ``location`` must be fetched over HTTP."""
    return location.lower().startswith(_HTTP_SCHEMES)


def _read_json_file(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


async def fetch_json_document(
    *,
    client: httpx.AsyncClient | None,
    location: str,
    timeout_seconds: float,
) -> Any:
    """Fetch and decode one JSON document.

    Raises ``httpx.HTTPError`` for transport/status failures, ``OSError`` for
    unreadable files and ``ValueError`` for invalid JSON.
    """
    if not is_remote_location(location):
        return await asyncio.to_thread(_read_json_file, Path(location))

    if client is not None:
        response = await client.get(location, timeout=timeout_seconds)
    else:
        async with httpx.AsyncClient() as tmp_client:
            response = await tmp_client.get(location, timeout=timeout_seconds)

    response.raise_for_status()
    return response.json()


__all__ = [
    "fetch_json_document",
    "is_remote_location",
]
