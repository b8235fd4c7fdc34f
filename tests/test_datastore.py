"""Tests for the one-time concurrent data load."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from paper_network.config import UserConfig
from paper_network.datastore import (
    DataLoadError,
    DataSources,
    DataStore,
    describe_load_failure,
)
from paper_network.models import DEFAULT_REQUEST_TIMEOUT_SECONDS, LoadStatus
from paper_network.parsing import DocumentFormatError
from paper_network.services.interfaces import AppServices


class FakeDocuments:
    """Document service returning canned values keyed by location."""

    def __init__(self, documents: dict[str, Any], delay: float = 0.0) -> None:
        self.documents = documents
        self.delay = delay
        self.calls: list[str] = []
        self.timeouts: list[float] = []

    async def fetch_json(self, *, client, location, timeout_seconds):
        self.calls.append(location)
        self.timeouts.append(timeout_seconds)
        if self.delay:
            await asyncio.sleep(self.delay)
        value = self.documents[location]
        if isinstance(value, BaseException):
            raise value
        return value


SOURCES = DataSources(title_index="t.json", adjacency="a.json", search_index="s.json")


def _documents(**overrides: Any) -> dict[str, Any]:
    documents: dict[str, Any] = {
        "t.json": {"1": {"title": "Deep Learning"}, "2": {"title": "Neural Nets"}},
        "a.json": {"1": [2]},
        "s.json": [{"int_id": 1, "title": "Deep Learning"}],
    }
    documents.update(overrides)
    return documents


def _store(documents: dict[str, Any], delay: float = 0.0) -> tuple[DataStore, FakeDocuments]:
    fake = FakeDocuments(documents, delay)
    return DataStore(SOURCES, services=AppServices(documents=fake)), fake


class TestDataSources:
    def test_from_directory(self, tmp_path):
        sources = DataSources.from_base(str(tmp_path))
        assert Path(sources.title_index) == tmp_path / "papers.json"
        assert Path(sources.adjacency) == tmp_path / "citation_edges.json"
        assert Path(sources.search_index) == tmp_path / "search_index.json"
        assert not sources.needs_http

    def test_from_url(self):
        sources = DataSources.from_base("https://data.test/ai/")
        assert sources.title_index == "https://data.test/ai/papers.json"
        assert sources.adjacency == "https://data.test/ai/citation_edges.json"
        assert sources.search_index == "https://data.test/ai/search_index.json"
        assert sources.needs_http

    def test_empty_base_is_current_directory(self):
        assert Path(DataSources.from_base("").title_index) == Path("papers.json")


class TestDataStoreLoad:
    @pytest.mark.asyncio
    async def test_publishes_snapshot(self):
        store, _ = _store(_documents())
        assert store.status is LoadStatus.IDLE

        snapshot = await store.load()

        assert store.status is LoadStatus.READY
        assert store.snapshot is snapshot
        assert dict(snapshot.title_index) == {1: "Deep Learning", 2: "Neural Nets"}
        assert dict(snapshot.adjacency) == {1: (2,)}
        assert [entry.id for entry in snapshot.search_entries] == [1]

    @pytest.mark.asyncio
    async def test_snapshot_is_read_only(self):
        store, _ = _store(_documents())
        snapshot = await store.load()
        with pytest.raises(TypeError):
            snapshot.title_index[3] = "Injected"  # type: ignore[index]

    @pytest.mark.asyncio
    async def test_loads_once(self):
        store, fake = _store(_documents())
        first = await store.load()
        second = await store.load()
        assert first is second
        assert len(fake.calls) == 3

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_load(self):
        store, fake = _store(_documents(), delay=0.01)
        first, second = await asyncio.gather(store.load(), store.load())
        assert first is second
        assert sorted(fake.calls) == ["a.json", "s.json", "t.json"]

    @pytest.mark.asyncio
    async def test_default_timeout_matches_config_default(self):
        store, fake = _store(_documents())
        await store.load()
        assert fake.timeouts == [DEFAULT_REQUEST_TIMEOUT_SECONDS] * 3
        assert UserConfig().request_timeout_seconds == DEFAULT_REQUEST_TIMEOUT_SECONDS

    @pytest.mark.asyncio
    async def test_any_failure_publishes_nothing(self):
        store, _ = _store(_documents(**{"a.json": OSError("disk on fire")}))

        with pytest.raises(DataLoadError) as excinfo:
            await store.load()

        assert store.snapshot is None
        assert store.status is LoadStatus.UNAVAILABLE
        assert store.error is excinfo.value
        assert set(excinfo.value.failures) == {"adjacency"}
        assert "citation edges" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_collects_every_failure(self):
        store, _ = _store(
            _documents(**{"t.json": [], "s.json": httpx.ConnectError("refused")})
        )
        with pytest.raises(DataLoadError) as excinfo:
            await store.load()
        assert set(excinfo.value.failures) == {"title_index", "search_index"}

    @pytest.mark.asyncio
    async def test_retry_after_failure(self):
        documents = _documents(**{"s.json": OSError("gone")})
        store, _ = _store(documents)
        with pytest.raises(DataLoadError):
            await store.load()

        documents["s.json"] = [{"int_id": 2, "title": "Neural Nets"}]
        snapshot = await store.load()

        assert store.status is LoadStatus.READY
        assert store.error is None
        assert snapshot.search_entries[0].id == 2

    @pytest.mark.asyncio
    async def test_unexpected_error_is_a_load_failure(self):
        store, _ = _store(_documents(**{"t.json": RuntimeError("bug")}))
        with pytest.raises(DataLoadError) as excinfo:
            await store.load()
        assert excinfo.value.failures == {"title_index": "bug"}
        assert store.status is LoadStatus.UNAVAILABLE
        assert store.snapshot is None

    @pytest.mark.asyncio
    async def test_deeply_nested_document_is_a_load_failure(self, data_dir):
        (data_dir / "papers.json").write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
        store = DataStore(DataSources.from_base(str(data_dir)))

        with pytest.raises(DataLoadError) as excinfo:
            await store.load()

        assert set(excinfo.value.failures) == {"title_index"}
        assert store.status is LoadStatus.UNAVAILABLE
        assert store.snapshot is None

    @pytest.mark.asyncio
    async def test_subscribers_notified_once_published(self):
        store, _ = _store(_documents())
        received = []
        store.subscribe(received.append)
        assert received == []

        snapshot = await store.load()

        assert received == [snapshot]
        late = []
        store.subscribe(late.append)
        assert late == [snapshot]

    @pytest.mark.asyncio
    async def test_loads_local_files(self, data_dir):
        store = DataStore(DataSources.from_base(str(data_dir)))
        snapshot = await store.load()
        assert snapshot.title_index[1] == "Attention Is All You Need"
        assert snapshot.adjacency[1] == (2, 3, 99)
        assert len(snapshot.search_entries) == 4

    @pytest.mark.asyncio
    async def test_loads_over_http(self, data_dir):
        def handler(request: httpx.Request) -> httpx.Response:
            name = request.url.path.rsplit("/", 1)[-1]
            return httpx.Response(200, content=(data_dir / name).read_bytes())

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            store = DataStore(DataSources.from_base("https://data.test"), client=client)
            snapshot = await store.load()

        assert snapshot.adjacency[2] == (1,)

    @pytest.mark.asyncio
    async def test_http_error_status_is_a_load_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("papers.json"):
                return httpx.Response(503)
            return httpx.Response(200, json={} if "edges" in request.url.path else [])

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            store = DataStore(DataSources.from_base("https://data.test"), client=client)
            with pytest.raises(DataLoadError) as excinfo:
                await store.load()

        assert excinfo.value.failures == {"title_index": "HTTP 503"}


class TestDescribeLoadFailure:
    def test_file_not_found(self):
        assert describe_load_failure(FileNotFoundError(2, "No such file")) == "file not found"

    def test_invalid_json(self):
        try:
            json.loads("{")
        except json.JSONDecodeError as exc:
            assert describe_load_failure(exc) == "invalid JSON at line 1"

    def test_format_error(self):
        exc = DocumentFormatError("search index must be a JSON array, got dict")
        assert describe_load_failure(exc) == "search index must be a JSON array, got dict"

    def test_timeout(self):
        assert describe_load_failure(httpx.ReadTimeout("slow")) == "request timed out"

    def test_recursion_error(self):
        exc = RecursionError("maximum recursion depth exceeded")
        assert describe_load_failure(exc) == "document is nested too deeply"
