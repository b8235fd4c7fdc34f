"""Ego-graph derivation: one center paper and its direct neighbors."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from paper_network.models import (
    CENTER_NODE_SIZE,
    DEFAULT_FALLBACK_TITLE,
    EMPTY_GRAPH,
    NEIGHBOR_NODE_SIZE,
    DataSnapshot,
    GraphLink,
    GraphNode,
    GraphPolicy,
    GraphViewModel,
    NodeRole,
)

logger = logging.getLogger(__name__)


def _label_for(paper_id: int, title_index: Mapping[int, str], fallback_title: str) -> str:
    title = title_index.get(paper_id)
    if title is None:
        logger.debug("No title for paper %d, using fallback label", paper_id)
        return fallback_title
    return title


def build_ego_graph(
    center_id: int,
    title_index: Mapping[int, str],
    adjacency: Mapping[int, Sequence[int]],
    *,
    fallback_title: str = DEFAULT_FALLBACK_TITLE,
) -> GraphViewModel:
    """Build the view-model for ``center_id`` and its direct neighbors.

    A center missing from ``adjacency`` yields a single-node graph. Titles
    missing from ``title_index`` are replaced with ``fallback_title``.

    Every link points from the center to a neighbor. Callers must not read
    this as citation direction; the adjacency document does not record it.
    """
    neighbors = adjacency.get(center_id, ())
    nodes = [
        GraphNode(
            id=center_id,
            label=_label_for(center_id, title_index, fallback_title),
            role=NodeRole.CENTER,
            size=CENTER_NODE_SIZE,
        )
    ]
    nodes.extend(
        GraphNode(
            id=neighbor_id,
            label=_label_for(neighbor_id, title_index, fallback_title),
            role=NodeRole.NEIGHBOR,
            size=NEIGHBOR_NODE_SIZE,
        )
        for neighbor_id in neighbors
    )
    links = tuple(GraphLink(source=center_id, target=neighbor_id) for neighbor_id in neighbors)
    return GraphViewModel(nodes=tuple(nodes), links=links)


def build_for_selection(
    selected_id: int | None,
    snapshot: DataSnapshot | None,
    policy: GraphPolicy,
) -> GraphViewModel:
    """Build the graph for a selection, or the empty graph when idle."""
    if selected_id is None or snapshot is None:
        return EMPTY_GRAPH
    return build_ego_graph(
        selected_id,
        snapshot.title_index,
        snapshot.adjacency,
        fallback_title=policy.fallback_title,
    )


@runtime_checkable
class GraphRenderer(Protocol):
    """Anything that can draw an ego-graph view-model.

    Renderers report interaction back through the controller's
    ``on_node_hover`` and ``on_node_click`` hooks.
    """

    def render_graph(self, graph: GraphViewModel) -> None: ...


__all__ = [
    "GraphRenderer",
    "build_ego_graph",
    "build_for_selection",
]
