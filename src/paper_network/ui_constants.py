"""Internal UI constants for the PaperNetwork app."""

from __future__ import annotations

from textual.binding import Binding, BindingType

APP_CSS = """
Screen {
    background: $th-background;
}

Header {
    background: $th-panel-alt;
    color: $th-text;
}

#main-container {
    height: 1fr;
}

#left-pane {
    width: 2fr;
    min-width: 40;
    max-width: 90;
    height: 100%;
    border: tall $th-highlight;
    background: $th-panel;
}

#left-pane:focus-within {
    border: tall $th-accent;
}

#right-pane {
    width: 3fr;
    height: 100%;
    border: tall $th-highlight;
    background: $th-panel;
}

#right-pane:focus-within {
    border: tall $th-accent;
}

#search-header {
    padding: 0 1;
    background: $th-panel;
    color: $th-accent;
    text-style: bold;
}

#graph-header {
    padding: 0 1;
    background: $th-panel;
    color: $th-accent-alt;
    text-style: bold;
}

#search-container {
    height: auto;
    padding: 0 1;
    background: $th-panel;
}

#search-input {
    width: 100%;
    border: tall $th-accent;
    background: $th-background;
}

#search-input:focus {
    border: tall $th-accent-alt;
}

#search-hint {
    padding: 0 1;
    color: $th-muted;
}

#popular-select {
    margin: 1 1 0 1;
}

#graph-placeholder {
    padding: 1 2;
    color: $th-muted;
}

#graph-placeholder.hidden {
    display: none;
}

#status-bar {
    padding: 0 1;
    color: $th-muted;
}
"""

APP_BINDINGS: list[BindingType] = [
    Binding("q", "quit", "Quit", show=False),
    Binding("slash", "focus_search", "Search", show=False),
    Binding("escape", "dismiss_dropdown", "Close results", show=False),
    # Reload after a failed data load
    Binding("ctrl+r", "retry_load", "Retry", show=False),
    # Theme cycling
    Binding("ctrl+t", "cycle_theme", "Theme", show=False),
]

FOOTER_BINDINGS: list[tuple[str, str]] = [
    ("/", "search"),
    ("enter", "open"),
    ("esc", "close results"),
    ("ctrl+t", "theme"),
    ("q", "quit"),
]

# Seconds between focus leaving the search box and the dropdown closing
BLUR_CLOSE_DELAY_SECONDS = 0.2

__all__ = [
    "APP_BINDINGS",
    "APP_CSS",
    "BLUR_CLOSE_DELAY_SECONDS",
    "FOOTER_BINDINGS",
]
