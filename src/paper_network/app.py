"""Textual front end for exploring a paper's citation neighborhood."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from textual import events, on
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.timer import Timer
from textual.widget import Widget
from textual.widgets import Header, Input, Label, Select, Static

from paper_network.action_messages import build_load_failure_message, build_loaded_notification
from paper_network.config import UserConfig, save_config
from paper_network.datastore import DataLoadError, DataSources, DataStore
from paper_network.export import LINK_DIRECTION_NOTE
from paper_network.models import GraphPolicy, LoadStatus, SelectionState
from paper_network.selection import (
    BlurAfterDelay,
    ClickOutside,
    Focus,
    ItemActivated,
    PickFromList,
    SearchInput,
    SelectionController,
    SubmitSearch,
)
from paper_network.services.interfaces import AppServices, build_default_app_services
from paper_network.themes import TEXTUAL_THEMES, apply_theme_colors, next_theme_name
from paper_network.ui_constants import (
    APP_BINDINGS,
    APP_CSS,
    BLUR_CLOSE_DELAY_SECONDS,
    FOOTER_BINDINGS,
)
from paper_network.widgets import (
    SEARCH_HINT_TEXT,
    AttributionFooter,
    ContextFooter,
    EgoGraphView,
    HoverTooltip,
    PopularPapersSelect,
    SearchDropdown,
    build_status_text,
)

logger = logging.getLogger(__name__)

GRAPH_LOADING_MESSAGE = "Loading graph data..."
GRAPH_EMPTY_MESSAGE = "Select a paper to see the graph."
GRAPH_UNAVAILABLE_MESSAGE = "Paper data is unavailable. Press ctrl+r to retry."

_SEARCH_WIDGET_IDS = frozenset({"search-input", "search-dropdown"})


def graph_placeholder_text(status: LoadStatus) -> str:
    """Message shown in the graph pane while no paper is selected."""
    if status is LoadStatus.UNAVAILABLE:
        return GRAPH_UNAVAILABLE_MESSAGE
    if status is LoadStatus.READY:
        return GRAPH_EMPTY_MESSAGE
    return GRAPH_LOADING_MESSAGE


class PaperNetworkApp(App):
    """Search papers by title and browse each one's direct citation neighbors."""

    TITLE = "Paper Network Explorer"

    CSS = APP_CSS

    BINDINGS = APP_BINDINGS

    def __init__(
        self,
        sources: DataSources,
        config: UserConfig | None = None,
        services: AppServices | None = None,
        policy: GraphPolicy | None = None,
    ) -> None:
        super().__init__()
        # Register all Textual themes so $th-* CSS variables resolve before compose()
        for textual_theme in TEXTUAL_THEMES.values():
            self.register_theme(textual_theme)
        self._config = config or UserConfig()
        self._config.theme_name = apply_theme_colors(self._config.theme_name)
        self.theme = self._config.theme_name
        self._sources = sources
        self._services: AppServices = services or build_default_app_services()
        self._policy = policy or self._config.graph_policy()
        self._background_tasks: set[asyncio.Task[None]] = set()
        self._http_client: httpx.AsyncClient | None = None
        self._blur_timer: Timer | None = None
        self._store: DataStore | None = None
        self._controller: SelectionController | None = None

    @property
    def store(self) -> DataStore:
        if self._store is None:
            raise RuntimeError("PaperNetworkApp is not mounted")
        return self._store

    @property
    def controller(self) -> SelectionController:
        if self._controller is None:
            raise RuntimeError("PaperNetworkApp is not mounted")
        return self._controller

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-container"):
            with Vertical(id="left-pane"):
                yield Label(" Find a paper", id="search-header")
                with Vertical(id="search-container"):
                    yield Input(placeholder=" Search papers by title...", id="search-input")
                    yield Label(SEARCH_HINT_TEXT, id="search-hint")
                    yield SearchDropdown(id="search-dropdown")
                yield PopularPapersSelect(id="popular-select")
                yield Label("", id="status-bar")
            with Vertical(id="right-pane"):
                yield Label(" Citation network", id="graph-header")
                yield Static(GRAPH_LOADING_MESSAGE, id="graph-placeholder")
                yield EgoGraphView(id="graph-view")
                yield HoverTooltip(id="hover-tooltip")
                yield AttributionFooter(id="attribution")
        yield ContextFooter()

    def on_mount(self) -> None:
        """Create the shared client and data store, then start loading."""
        self._http_client = httpx.AsyncClient()
        self._store = DataStore(
            self._sources,
            services=self._services,
            client=self._http_client,
            timeout_seconds=self._config.request_timeout_seconds,
        )
        self._controller = SelectionController(self._store, self._policy)
        self._controller.add_listener(self._render_state)

        if self._config.config_defaulted:
            self.notify(
                "Config file could not be read. Using defaults.",
                severity="warning",
                timeout=8,
            )

        self.query_one(ContextFooter).render_bindings(FOOTER_BINDINGS)
        self._render_state(self._controller.state)
        self._track_task(self._load_data())
        self.query_one("#search-input", Input).focus()
        logger.debug("App mounted: sources=%s", self._sources.items())

    async def on_unmount(self) -> None:
        """Stop timers, cancel background work and close the HTTP client."""
        timer = self._blur_timer
        self._blur_timer = None
        if timer is not None:
            timer.stop()
        for task in list(self._background_tasks):
            task.cancel()
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
        client = self._http_client
        self._http_client = None
        if client is not None:
            await client.aclose()

    # ========================================================================
    # Background tasks
    # ========================================================================

    def _track_task(self, coro: Any) -> asyncio.Task[None]:
        """Create an asyncio task and track it to prevent garbage collection."""
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @staticmethod
    def _on_task_done(task: asyncio.Task[None]) -> None:
        """Log unhandled exceptions from background tasks."""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled exception in background task: %s", exc, exc_info=exc)

    async def _load_data(self) -> None:
        """Load the lookup tables and fill the popular-papers picker."""
        store = self.store
        self._update_status_bar(self.controller.state)
        try:
            snapshot = await store.load()
        except DataLoadError as exc:
            self.controller.discard_pending()
            self.notify(
                build_load_failure_message(exc, interactive=True),
                title="Paper data",
                severity="error",
                timeout=10,
            )
            self._render_state(self.controller.state)
            return

        self.query_one(PopularPapersSelect).load_entries(snapshot.popular_papers)
        self.sub_title = f"{len(snapshot.title_index)} papers loaded"
        self.notify(
            build_loaded_notification(len(snapshot.title_index), len(snapshot.search_entries)),
            timeout=3,
        )
        self._render_state(self.controller.state)

    # ========================================================================
    # Rendering
    # ========================================================================

    def _update_status_bar(self, state: SelectionState) -> None:
        try:
            status_bar = self.query_one("#status-bar", Label)
        except NoMatches:
            return
        status_bar.update(build_status_text(self.store.status, state))

    def _render_state(self, state: SelectionState) -> None:
        """Bring every widget in line with ``state``."""
        search_input = self.query_one("#search-input", Input)
        if search_input.value != state.search_term:
            with search_input.prevent(Input.Changed):
                search_input.value = state.search_term

        dropdown = self.query_one(SearchDropdown)
        dropdown.show_results(state.filtered_results, state.dropdown_visible)
        self.query_one("#search-hint", Label).display = dropdown.has_class("visible")
        self.query_one(PopularPapersSelect).show_selected(state.selected_id)

        graph_view = self.query_one(EgoGraphView)
        if graph_view.graph != state.graph:
            graph_view.render_graph(state.graph)
        graph_view.display = not state.graph.is_empty
        self.query_one(HoverTooltip).show_node(state.hovered_node)

        placeholder = self.query_one("#graph-placeholder", Static)
        placeholder.update(graph_placeholder_text(self.store.status))
        placeholder.set_class(not state.graph.is_empty, "hidden")

        header = self.query_one("#graph-header", Label)
        if state.graph.is_empty:
            header.update(" Citation network")
        else:
            header.update(f" Citation network [dim]({LINK_DIRECTION_NOTE})[/]")
        self._update_status_bar(state)

    # ========================================================================
    # Input events
    # ========================================================================

    @on(Input.Changed, "#search-input")
    def on_search_changed(self, event: Input.Changed) -> None:
        self.controller.dispatch(SearchInput(event.value))

    @on(Input.Submitted, "#search-input")
    def on_search_submitted(self, event: Input.Submitted) -> None:
        self.controller.dispatch(SubmitSearch())

    @on(SearchDropdown.ResultChosen)
    def on_result_chosen(self, event: SearchDropdown.ResultChosen) -> None:
        self.controller.dispatch(ItemActivated(event.entry.id))

    @on(Select.Changed, "#popular-select")
    def on_popular_changed(self, event: Select.Changed) -> None:
        if isinstance(event.value, int):
            self.controller.dispatch(PickFromList(event.value))

    @on(EgoGraphView.NodeHovered)
    def on_node_hovered(self, event: EgoGraphView.NodeHovered) -> None:
        self.controller.on_node_hover(event.node)

    @on(EgoGraphView.NodeClicked)
    def on_node_clicked(self, event: EgoGraphView.NodeClicked) -> None:
        self.controller.on_node_click(event.node)

    @on(events.DescendantFocus)
    def on_search_focus(self, event: events.DescendantFocus) -> None:
        if event.widget.id != "search-input":
            return
        self._cancel_blur_timer()
        self.controller.dispatch(Focus())

    @on(events.DescendantBlur)
    def on_search_blur(self, event: events.DescendantBlur) -> None:
        if event.widget.id not in _SEARCH_WIDGET_IDS:
            return
        self._cancel_blur_timer()
        self._blur_timer = self.set_timer(BLUR_CLOSE_DELAY_SECONDS, self._close_after_blur)

    def _cancel_blur_timer(self) -> None:
        timer = self._blur_timer
        self._blur_timer = None
        if timer is not None:
            timer.stop()

    def _close_after_blur(self) -> None:
        self._blur_timer = None
        focused = self.focused
        if focused is not None and focused.id in _SEARCH_WIDGET_IDS:
            return
        self.controller.dispatch(BlurAfterDelay())

    def on_click(self, event: events.Click) -> None:
        widget = event.widget
        if widget is None or _is_inside_search(widget):
            return
        self.controller.dispatch(ClickOutside())

    # ========================================================================
    # Actions
    # ========================================================================

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def action_dismiss_dropdown(self) -> None:
        self.controller.dispatch(ClickOutside())

    def action_retry_load(self) -> None:
        if self.store.status is not LoadStatus.UNAVAILABLE:
            self.notify("Paper data is already loaded or loading.", timeout=3)
            return
        logger.info("Retrying paper data load")
        self._track_task(self._load_data())

    def action_cycle_theme(self) -> None:
        self._config.theme_name = apply_theme_colors(next_theme_name(self._config.theme_name))
        self.theme = self._config.theme_name
        # Node markup bakes in the palette; redraw it
        graph_view = self.query_one(EgoGraphView)
        graph_view.render_graph(graph_view.graph)
        self.query_one(ContextFooter).render_bindings(FOOTER_BINDINGS)
        self._update_status_bar(self.controller.state)
        if not save_config(self._config):
            self.notify("Could not save theme preference.", severity="warning", timeout=4)
        self.notify(f"Theme: {self._config.theme_name}", timeout=2)


def _is_inside_search(widget: Widget) -> bool:
    return any(node.id == "search-container" for node in widget.ancestors_with_self)


__all__ = [
    "GRAPH_EMPTY_MESSAGE",
    "GRAPH_LOADING_MESSAGE",
    "GRAPH_UNAVAILABLE_MESSAGE",
    "PaperNetworkApp",
    "graph_placeholder_text",
]
