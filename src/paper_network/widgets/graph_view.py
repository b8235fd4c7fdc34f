"""Terminal rendering of the ego-graph view-model."""

from __future__ import annotations

from textual import on
from textual.message import Message
from textual.widgets import OptionList
from textual.widgets.option_list import Option

from paper_network.formatting import escape_rich_text, truncate_text
from paper_network.models import EMPTY_GRAPH, GraphNode, GraphViewModel, NodeRole
from paper_network.themes import THEME_COLORS, role_color

NODE_LABEL_MAX_LEN = 90

_ROLE_GLYPHS = {
    NodeRole.CENTER: "●",
    NodeRole.NEIGHBOR: "○",
}


def render_node_option(node: GraphNode, *, is_last: bool = False) -> str:
    """Build the markup line for one node of the graph list."""
    color = role_color(node.role)
    glyph = _ROLE_GLYPHS[node.role]
    label = escape_rich_text(truncate_text(node.label, NODE_LABEL_MAX_LEN))
    if node.role is NodeRole.CENTER:
        return f"[bold {color}]{glyph}[/] [bold]{label}[/] [{THEME_COLORS['muted']}]#{node.id}[/]"
    branch = "└─" if is_last else "├─"
    return (
        f"[{THEME_COLORS['muted']}]{branch}[/] [{color}]{glyph}[/] {label} "
        f"[{THEME_COLORS['muted']}]#{node.id}[/]"
    )


class EgoGraphView(OptionList):
    """Lists the center paper and its neighbors as a navigable tree.

    Moving the highlight acts as hovering a node; pressing enter or clicking
    a row acts as clicking the node.
    """

    class NodeHovered(Message):
        """The hovered node changed (``None`` when the pointer left the graph)."""

        def __init__(self, node: GraphNode | None) -> None:
            super().__init__()
            self.node = node

    class NodeClicked(Message):
        """A node was activated."""

        def __init__(self, node: GraphNode) -> None:
            super().__init__()
            self.node = node

    DEFAULT_CSS = """
    EgoGraphView {
        height: 1fr;
        background: $th-panel;
        border: none;
    }

    EgoGraphView > .option-list--option-highlighted {
        background: $th-highlight;
    }

    EgoGraphView:focus > .option-list--option-highlighted {
        background: $th-highlight-focus;
    }
    """

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__(id=id)
        self._graph: GraphViewModel = EMPTY_GRAPH

    @property
    def graph(self) -> GraphViewModel:
        return self._graph

    def render_graph(self, graph: GraphViewModel) -> None:
        """Replace the displayed rows with ``graph``."""
        self._graph = graph
        self.clear_options()
        last_index = len(graph.nodes) - 1
        # Row ids are positional: adjacency lists may repeat a neighbor
        self.add_options(
            [
                Option(render_node_option(node, is_last=index == last_index), id=f"node-{index}")
                for index, node in enumerate(graph.nodes)
            ]
        )
        if graph.nodes:
            self.highlighted = None

    def _node_for_option(self, option: Option) -> GraphNode | None:
        option_id = option.id or ""
        if not option_id.startswith("node-"):
            return None
        index = int(option_id.removeprefix("node-"))
        if 0 <= index < len(self._graph.nodes):
            return self._graph.nodes[index]
        return None

    @on(OptionList.OptionHighlighted)
    def _on_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        event.stop()
        self.post_message(self.NodeHovered(self._node_for_option(event.option)))

    @on(OptionList.OptionSelected)
    def _on_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        node = self._node_for_option(event.option)
        if node is not None:
            self.post_message(self.NodeClicked(node))

    def on_blur(self) -> None:
        self.post_message(self.NodeHovered(None))


__all__ = [
    "NODE_LABEL_MAX_LEN",
    "EgoGraphView",
    "render_node_option",
]
