"""Plain-text and JSON renderings of search results and ego-graphs."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping

from paper_network.models import GraphViewModel, NodeRole, SearchEntry

DEFAULT_FORCE_GRAPH_COLORS: dict[NodeRole, str] = {
    NodeRole.CENTER: "#1f77b4",
    NodeRole.NEIGHBOR: "#ff7f0e",
}

LINK_DIRECTION_NOTE = "links run center -> neighbor; they do not show who cites whom"


def format_results_as_text(entries: Iterable[SearchEntry]) -> str:
    """One ``<id>\\t<title>`` line per search result."""
    return "\n".join(f"{entry.id}\t{entry.display_title}" for entry in entries)


def format_results_as_json(entries: Iterable[SearchEntry]) -> str:
    """Serialize search results as a JSON array of ``{id, title}`` objects."""
    return json.dumps(
        [{"id": entry.id, "title": entry.title} for entry in entries],
        indent=2,
        ensure_ascii=False,
    )


def format_graph_as_text(graph: GraphViewModel) -> str:
    """Render the ego-graph as an indented outline.

    The center comes first, followed by one line per neighbor in adjacency
    order. An empty graph renders as an empty string.
    """
    center = graph.center
    if center is None:
        return ""
    lines = [f"{center.label} [{center.id}]"]
    neighbors = [node for node in graph.nodes if node.role is NodeRole.NEIGHBOR]
    for index, node in enumerate(neighbors):
        branch = "└─" if index == len(neighbors) - 1 else "├─"
        lines.append(f"  {branch} {node.label} [{node.id}]")
    if not neighbors:
        lines.append("  (no known neighbors)")
    return "\n".join(lines)


def graph_to_force_data(
    graph: GraphViewModel,
    colors: Mapping[NodeRole, str] | None = None,
) -> dict[str, list[dict[str, object]]]:
    """Convert the view-model to the ``{nodes, links}`` shape of force-graph renderers."""
    palette = colors or DEFAULT_FORCE_GRAPH_COLORS
    return {
        "nodes": [
            {
                "id": node.id,
                "label": node.label,
                "role": node.role.value,
                "val": node.size,
                "color": palette[node.role],
            }
            for node in graph.nodes
        ],
        "links": [{"source": link.source, "target": link.target} for link in graph.links],
    }


def format_graph_as_force_json(
    graph: GraphViewModel,
    colors: Mapping[NodeRole, str] | None = None,
) -> str:
    """Serialize :func:`graph_to_force_data` as pretty-printed JSON."""
    return json.dumps(graph_to_force_data(graph, colors), indent=2, ensure_ascii=False)


__all__ = [
    "DEFAULT_FORCE_GRAPH_COLORS",
    "LINK_DIRECTION_NOTE",
    "format_graph_as_force_json",
    "format_graph_as_text",
    "format_results_as_json",
    "format_results_as_text",
    "graph_to_force_data",
]
