"""Shared test fixtures for paper network tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from paper_network.config import UserConfig
from paper_network.models import DataSnapshot, SearchEntry
from paper_network.themes import DEFAULT_THEME, THEME_COLORS

# ── Module-level dict isolation ──────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _reset_theme_colors():
    """Restore THEME_COLORS after each test.

    PaperNetworkApp.__init__ and theme cycling swap the active palette in
    place; without this fixture one test's theme leaks into the next.
    """
    yield
    THEME_COLORS.clear()
    THEME_COLORS.update(DEFAULT_THEME)


# ── Sample corpus ────────────────────────────────────────────────────────────

SAMPLE_TITLES: dict[str, dict[str, str]] = {
    "1": {"title": "Attention Is All You Need"},
    "2": {"title": "BERT: Pre-training of Deep Bidirectional Transformers"},
    "3": {"title": "Deep Residual Learning for Image Recognition"},
    "4": {"title": "Generative Adversarial Networks"},
}

SAMPLE_EDGES: dict[str, list[Any]] = {
    "1": [2, 3, 99],
    "2": ["1"],
    "3": [],
}

SAMPLE_SEARCH_INDEX: list[dict[str, Any]] = [
    {"int_id": 1, "title": "Attention Is All You Need"},
    {"int_id": 2, "title": "BERT: Pre-training of Deep Bidirectional Transformers"},
    {"int_id": 3, "title": "Deep Residual Learning for Image Recognition"},
    {"int_id": 4, "title": "Generative Adversarial Networks"},
]


# ── Factories ────────────────────────────────────────────────────────────────


@pytest.fixture
def make_entry():
    """Factory fixture for SearchEntry instances."""

    def _make(paper_id: int = 1, title: str = "Test Paper") -> SearchEntry:
        return SearchEntry(id=paper_id, title=title)

    return _make


@pytest.fixture
def sample_snapshot() -> DataSnapshot:
    """Snapshot built from the sample corpus.

    Paper 1 cites 2, 3 and 99 (99 has no title), paper 2 links back to 1,
    paper 3 has no neighbors and paper 4 is missing from the adjacency.
    """
    return DataSnapshot.freeze(
        {int(key): value["title"] for key, value in SAMPLE_TITLES.items()},
        {int(key): tuple(int(n) for n in value) for key, value in SAMPLE_EDGES.items()},
        [SearchEntry(id=item["int_id"], title=item["title"]) for item in SAMPLE_SEARCH_INDEX],
    )


@pytest.fixture
def sample_config():
    """Factory fixture for creating UserConfig with optional overrides."""

    def _make(**kwargs: Any) -> UserConfig:
        return UserConfig(**kwargs)

    return _make


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Write the sample corpus as the three JSON documents into tmp_path."""
    (tmp_path / "papers.json").write_text(json.dumps(SAMPLE_TITLES), encoding="utf-8")
    (tmp_path / "citation_edges.json").write_text(json.dumps(SAMPLE_EDGES), encoding="utf-8")
    (tmp_path / "search_index.json").write_text(
        json.dumps(SAMPLE_SEARCH_INDEX), encoding="utf-8"
    )
    return tmp_path
