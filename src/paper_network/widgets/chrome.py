"""Widget chrome: hover tooltip, status line, key hints and attribution."""

from __future__ import annotations

from textual.widgets import Label, Static

from paper_network.formatting import escape_rich_text, pluralize
from paper_network.models import GraphNode, LoadStatus, SelectionState
from paper_network.themes import THEME_COLORS

ATTRIBUTION_TEXT = (
    "Data sourced from OpenAlex (https://openalex.org) Artificial Intelligence dataset, "
    "last updated 5 August 2025. "
    "This app complies with OpenAlex's data use and attribution guidelines."
)


class HoverTooltip(Label):
    """Shows the full title of the hovered node."""

    DEFAULT_CSS = """
    HoverTooltip {
        height: auto;
        padding: 0 1;
        background: $th-panel-alt;
        color: $th-text;
        display: none;
    }

    HoverTooltip.visible {
        display: block;
    }
    """

    def show_node(self, node: GraphNode | None) -> None:
        if node is None:
            self.update("")
            self.remove_class("visible")
            return
        self.update(escape_rich_text(node.label))
        self.add_class("visible")


def build_status_text(status: LoadStatus, state: SelectionState) -> str:
    """Build the status line for the current load status and selection."""
    muted = THEME_COLORS["muted"]
    if status is LoadStatus.UNAVAILABLE:
        return (
            f"[{THEME_COLORS['pink']}]Paper data unavailable.[/] "
            f"[{muted}]Press ctrl+r to retry.[/]"
        )
    if status is not LoadStatus.READY:
        return f"[{muted}]Loading graph data...[/]"
    if state.selected_id is None:
        return f"[{muted}]Select a paper to see the graph.[/]"
    neighbor_count = len(state.graph.links)
    return (
        f"[{THEME_COLORS['accent']}]#{state.selected_id}[/] "
        f"[{muted}]{pluralize(neighbor_count, 'direct neighbor')}[/]"
    )


class ContextFooter(Static):
    """Footer showing the relevant keybindings."""

    DEFAULT_CSS = """
    ContextFooter {
        dock: bottom;
        height: 1;
        background: $th-background;
        color: $th-muted;
        padding: 0 1;
    }
    """

    def render_bindings(self, bindings: list[tuple[str, str]]) -> None:
        """Update the footer with a list of (key, label) binding hints."""
        accent = THEME_COLORS["accent"]
        muted = THEME_COLORS["muted"]
        parts = [
            f"[bold {accent}]{escape_rich_text(key)}[/] [{muted}]{label}[/]"
            for key, label in bindings
        ]
        self.update("  ".join(parts))


class AttributionFooter(Static):
    """Data source attribution."""

    DEFAULT_CSS = """
    AttributionFooter {
        height: auto;
        padding: 0 1;
        color: $th-muted;
        text-style: italic;
    }
    """

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__(escape_rich_text(ATTRIBUTION_TEXT), id=id)


__all__ = [
    "ATTRIBUTION_TEXT",
    "AttributionFooter",
    "ContextFooter",
    "HoverTooltip",
    "build_status_text",
]
