"""Widget classes for the paper network TUI."""

from paper_network.widgets.chrome import (
    ATTRIBUTION_TEXT,
    AttributionFooter,
    ContextFooter,
    HoverTooltip,
    build_status_text,
)
from paper_network.widgets.graph_view import NODE_LABEL_MAX_LEN, EgoGraphView, render_node_option
from paper_network.widgets.search import (
    POPULAR_PROMPT,
    POPULAR_TITLE_MAX_LEN,
    SEARCH_HINT_TEXT,
    PopularPapersSelect,
    SearchDropdown,
    build_popular_options,
)

__all__ = [
    "ATTRIBUTION_TEXT",
    "NODE_LABEL_MAX_LEN",
    "POPULAR_PROMPT",
    "POPULAR_TITLE_MAX_LEN",
    "SEARCH_HINT_TEXT",
    "AttributionFooter",
    "ContextFooter",
    "EgoGraphView",
    "HoverTooltip",
    "PopularPapersSelect",
    "SearchDropdown",
    "build_popular_options",
    "build_status_text",
    "render_node_option",
]
