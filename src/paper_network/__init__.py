"""Search a paper corpus by title and explore each paper's citation neighborhood."""

from paper_network.datastore import DataLoadError, DataSources, DataStore
from paper_network.graph import build_ego_graph, build_for_selection
from paper_network.models import (
    DataSnapshot,
    GraphLink,
    GraphNode,
    GraphPolicy,
    GraphViewModel,
    LoadStatus,
    NodeRole,
    Paper,
    SearchEntry,
    SelectionState,
)
from paper_network.search import filter_entries
from paper_network.selection import SelectionController, reduce

__version__ = "0.1.0"

__all__ = [
    "DataLoadError",
    "DataSnapshot",
    "DataSources",
    "DataStore",
    "GraphLink",
    "GraphNode",
    "GraphPolicy",
    "GraphViewModel",
    "LoadStatus",
    "NodeRole",
    "Paper",
    "SearchEntry",
    "SelectionController",
    "SelectionState",
    "__version__",
    "build_ego_graph",
    "build_for_selection",
    "filter_entries",
    "reduce",
]
