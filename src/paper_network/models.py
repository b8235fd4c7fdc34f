"""Data models and constants for the paper network explorer."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

# Application identity used for platformdirs config paths
CONFIG_APP_NAME = "paper-network"

# Search dropdown and popular-papers picker sizes
SEARCH_RESULT_LIMIT = 10
POPULAR_PAPER_COUNT = 10

# Node sizes handed to the renderer
CENTER_NODE_SIZE = 10
NEIGHBOR_NODE_SIZE = 5

DEFAULT_FALLBACK_TITLE = "Unknown paper"

DEFAULT_REQUEST_TIMEOUT_SECONDS = 30

# Default document names, resolved against a base URL or directory
TITLE_INDEX_FILENAME = "papers.json"
ADJACENCY_FILENAME = "citation_edges.json"
SEARCH_INDEX_FILENAME = "search_index.json"


@dataclass(frozen=True, slots=True)
class Paper:
    """A paper as known to the title index."""

    id: int
    title: str


@dataclass(frozen=True, slots=True)
class SearchEntry:
    """One row of the flattened search index."""

    id: int
    title: str  # Empty string when the document carried no title

    @property
    def display_title(self) -> str:
        return self.title or f"Untitled ({self.id})"


class NodeRole(str, Enum):
    """Role of a node inside an ego-graph."""

    CENTER = "center"
    NEIGHBOR = "neighbor"


@dataclass(frozen=True, slots=True)
class GraphNode:
    """A node of the ego-graph view-model."""

    id: int
    label: str
    role: NodeRole
    size: int


@dataclass(frozen=True, slots=True)
class GraphLink:
    """A link of the ego-graph view-model.

    Links always run from the center to a neighbor. This is a drawing
    convention only: it does not say which paper cites which.
    """

    source: int
    target: int


@dataclass(frozen=True, slots=True)
class GraphViewModel:
    """Center paper plus its direct neighbors, ready for rendering."""

    nodes: tuple[GraphNode, ...] = ()
    links: tuple[GraphLink, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def center(self) -> GraphNode | None:
        for node in self.nodes:
            if node.role is NodeRole.CENTER:
                return node
        return None

    def node_by_id(self, node_id: int) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


EMPTY_GRAPH = GraphViewModel()


@dataclass(frozen=True, slots=True)
class GraphPolicy:
    """Knobs shared by every ego-graph derivation."""

    fallback_title: str = DEFAULT_FALLBACK_TITLE
    allow_recenter_on_node_click: bool = True


@dataclass(frozen=True, slots=True)
class DataSnapshot:
    """Immutable lookup tables published by the data store in one step."""

    title_index: Mapping[int, str]
    adjacency: Mapping[int, tuple[int, ...]]
    search_entries: tuple[SearchEntry, ...]

    @classmethod
    def freeze(
        cls,
        title_index: dict[int, str],
        adjacency: dict[int, tuple[int, ...]],
        search_entries: list[SearchEntry] | tuple[SearchEntry, ...],
    ) -> DataSnapshot:
        """Wrap freshly parsed tables in read-only views."""
        return cls(
            title_index=MappingProxyType(dict(title_index)),
            adjacency=MappingProxyType(dict(adjacency)),
            search_entries=tuple(search_entries),
        )

    def get_paper(self, paper_id: int) -> Paper | None:
        """Return the titled paper for ``paper_id``, or None on a lookup miss."""
        title = self.title_index.get(paper_id)
        if title is None:
            return None
        return Paper(id=paper_id, title=title)

    @property
    def popular_papers(self) -> tuple[SearchEntry, ...]:
        """Shortcut list shown in the popular-papers picker."""
        return self.search_entries[:POPULAR_PAPER_COUNT]


@dataclass(frozen=True, slots=True)
class SelectionState:
    """Everything the search box and the graph pane display."""

    selected_id: int | None = None
    search_term: str = ""
    filtered_results: tuple[SearchEntry, ...] = ()
    dropdown_visible: bool = False
    hovered_id: int | None = None
    graph: GraphViewModel = field(default=EMPTY_GRAPH)

    @property
    def is_viewing(self) -> bool:
        return self.selected_id is not None

    @property
    def hovered_node(self) -> GraphNode | None:
        if self.hovered_id is None:
            return None
        return self.graph.node_by_id(self.hovered_id)


class LoadStatus(str, Enum):
    """Lifecycle of the one-time data load."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"


__all__ = [
    "ADJACENCY_FILENAME",
    "CENTER_NODE_SIZE",
    "CONFIG_APP_NAME",
    "DEFAULT_FALLBACK_TITLE",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
    "EMPTY_GRAPH",
    "NEIGHBOR_NODE_SIZE",
    "POPULAR_PAPER_COUNT",
    "SEARCH_INDEX_FILENAME",
    "SEARCH_RESULT_LIMIT",
    "TITLE_INDEX_FILENAME",
    "DataSnapshot",
    "GraphLink",
    "GraphNode",
    "GraphPolicy",
    "GraphViewModel",
    "LoadStatus",
    "NodeRole",
    "Paper",
    "SearchEntry",
    "SelectionState",
]
