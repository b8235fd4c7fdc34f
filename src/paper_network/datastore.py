"""One-time concurrent loading of the lookup tables.

The store fetches the title index, the adjacency document and the search
index at the same time, waits for all three, and either publishes a single
immutable ``DataSnapshot`` or raises ``DataLoadError``. Consumers never see a
partially loaded set of tables.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from paper_network.models import (
    ADJACENCY_FILENAME,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    SEARCH_INDEX_FILENAME,
    TITLE_INDEX_FILENAME,
    DataSnapshot,
    LoadStatus,
)
from paper_network.parsing import (
    DocumentFormatError,
    parse_adjacency,
    parse_search_index,
    parse_title_index,
)
from paper_network.services.document_service import is_remote_location
from paper_network.services.interfaces import AppServices, build_default_app_services

logger = logging.getLogger(__name__)

DOCUMENT_LABELS: dict[str, str] = {
    "title_index": "title index",
    "adjacency": "citation edges",
    "search_index": "search index",
}

_PARSERS: dict[str, Callable[[Any], Any]] = {
    "title_index": parse_title_index,
    "adjacency": parse_adjacency,
    "search_index": parse_search_index,
}

SnapshotListener = Callable[[DataSnapshot], None]


class DataLoadError(Exception):
    """Raised when one or more required documents fail to fetch or parse."""

    def __init__(self, failures: dict[str, str]) -> None:
        self.failures = dict(failures)
        detail = "; ".join(
            f"{DOCUMENT_LABELS.get(name, name)}: {reason}" for name, reason in self.failures.items()
        )
        super().__init__(f"Could not load paper data ({detail})")


@dataclass(frozen=True, slots=True)
class DataSources:
    """Where each of the three documents lives (URL or filesystem path)."""

    title_index: str
    adjacency: str
    search_index: str

    @classmethod
    def from_base(cls, base: str) -> DataSources:
        """Resolve the default document names against a base URL or directory."""
        if is_remote_location(base):
            root = base.rstrip("/")
            return cls(
                title_index=f"{root}/{TITLE_INDEX_FILENAME}",
                adjacency=f"{root}/{ADJACENCY_FILENAME}",
                search_index=f"{root}/{SEARCH_INDEX_FILENAME}",
            )
        root_dir = Path(base or ".").expanduser()
        return cls(
            title_index=str(root_dir / TITLE_INDEX_FILENAME),
            adjacency=str(root_dir / ADJACENCY_FILENAME),
            search_index=str(root_dir / SEARCH_INDEX_FILENAME),
        )

    def items(self) -> list[tuple[str, str]]:
        return [
            ("title_index", self.title_index),
            ("adjacency", self.adjacency),
            ("search_index", self.search_index),
        ]

    @property
    def needs_http(self) -> bool:
        return any(is_remote_location(location) for _, location in self.items())


def describe_load_failure(exc: BaseException) -> str:
    """Turn a fetch/parse exception into a short human-readable reason."""
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    if isinstance(exc, httpx.TimeoutException):
        return "request timed out"
    if isinstance(exc, httpx.HTTPError):
        return f"network error ({exc.__class__.__name__})"
    if isinstance(exc, FileNotFoundError):
        return "file not found"
    if isinstance(exc, OSError):
        return exc.strerror or str(exc)
    if isinstance(exc, DocumentFormatError):
        return str(exc)
    if isinstance(exc, json.JSONDecodeError):
        return f"invalid JSON at line {exc.lineno}"
    if isinstance(exc, RecursionError):
        return "document is nested too deeply"
    return str(exc) or exc.__class__.__name__


class DataStore:
    """Holds the published snapshot and its load status."""

    def __init__(
        self,
        sources: DataSources,
        *,
        services: AppServices | None = None,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.sources = sources
        self._services = services or build_default_app_services()
        self._client = client
        self._timeout_seconds = timeout_seconds
        self._status = LoadStatus.IDLE
        self._snapshot: DataSnapshot | None = None
        self._error: DataLoadError | None = None
        self._pending: asyncio.Task[DataSnapshot] | None = None
        self._listeners: list[SnapshotListener] = []

    @property
    def status(self) -> LoadStatus:
        return self._status

    @property
    def snapshot(self) -> DataSnapshot | None:
        return self._snapshot

    @property
    def error(self) -> DataLoadError | None:
        return self._error

    def subscribe(self, listener: SnapshotListener) -> None:
        """Register a callback for the published snapshot.

        Subscribing after publication calls the listener right away.
        """
        self._listeners.append(listener)
        if self._snapshot is not None:
            listener(self._snapshot)

    async def load(self) -> DataSnapshot:
        """Load all documents once and publish the snapshot.

        Concurrent callers share one in-flight load. After a successful load
        the published snapshot is returned without refetching. A failed load
        raises ``DataLoadError`` and leaves no snapshot; calling ``load`` again
        is an explicit retry.
        """
        if self._snapshot is not None:
            return self._snapshot
        if self._pending is not None:
            return await self._pending
        self._pending = asyncio.create_task(self._fetch_and_publish())
        try:
            return await self._pending
        finally:
            self._pending = None

    async def _fetch_document(
        self, client: httpx.AsyncClient | None, name: str, location: str
    ) -> Any:
        logger.debug("Fetching %s from %s", name, location)
        data = await self._services.documents.fetch_json(
            client=client,
            location=location,
            timeout_seconds=self._timeout_seconds,
        )
        return _PARSERS[name](data)

    async def _gather_documents(self, client: httpx.AsyncClient | None) -> list[Any]:
        return await asyncio.gather(
            *(
                self._fetch_document(client, name, location)
                for name, location in self.sources.items()
            ),
            return_exceptions=True,
        )

    async def _fetch_and_publish(self) -> DataSnapshot:
        self._status = LoadStatus.LOADING
        self._error = None

        if self._client is None and self.sources.needs_http:
            async with httpx.AsyncClient() as client:
                results = await self._gather_documents(client)
        else:
            results = await self._gather_documents(self._client)

        failures: dict[str, str] = {}
        parsed: dict[str, Any] = {}
        for (name, location), result in zip(self.sources.items(), results, strict=True):
            if isinstance(result, Exception):
                logger.warning("Failed to load %s from %s: %s", name, location, result)
                failures[name] = describe_load_failure(result)
            elif isinstance(result, BaseException):
                self._status = LoadStatus.IDLE
                raise result
            else:
                parsed[name] = result

        if failures:
            self._status = LoadStatus.UNAVAILABLE
            self._error = DataLoadError(failures)
            raise self._error

        snapshot = DataSnapshot.freeze(
            parsed["title_index"],
            parsed["adjacency"],
            parsed["search_index"],
        )
        self._snapshot = snapshot
        self._status = LoadStatus.READY
        logger.info(
            "Published snapshot: %d titles, %d adjacency rows, %d search entries",
            len(snapshot.title_index),
            len(snapshot.adjacency),
            len(snapshot.search_entries),
        )
        for listener in list(self._listeners):
            listener(snapshot)
        return snapshot


__all__ = [
    "DOCUMENT_LABELS",
    "DataLoadError",
    "DataSources",
    "DataStore",
    "describe_load_failure",
]
