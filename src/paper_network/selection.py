"""Selection and search state machine.

User interaction is expressed as small event objects. ``reduce`` is a pure
function from ``(state, event)`` to the next state; ``SelectionController``
owns the current state, waits for the data store to publish, and tells its
listeners whenever the state changes.

States are ``Idle`` (nothing selected) and ``Viewing(id)``. The search
dropdown has its own visibility flag, driven by explicit focus, blur,
activation and click-outside events.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, replace

from paper_network.datastore import DataStore
from paper_network.graph import build_for_selection
from paper_network.models import (
    SEARCH_RESULT_LIMIT,
    DataSnapshot,
    GraphNode,
    GraphPolicy,
    LoadStatus,
    SelectionState,
)
from paper_network.search import filter_entries

logger = logging.getLogger(__name__)

# ============================================================================
# Events
# ============================================================================


@dataclass(frozen=True, slots=True)
class Select:
    """Center the graph on ``paper_id``."""

    paper_id: int


@dataclass(frozen=True, slots=True)
class SearchInput:
    """The search box text changed."""

    term: str


@dataclass(frozen=True, slots=True)
class SubmitSearch:
    """Enter pressed or search button used: select the first result."""


@dataclass(frozen=True, slots=True)
class PickFromList:
    """A paper was picked from the popular-papers list."""

    paper_id: int


@dataclass(frozen=True, slots=True)
class ClickOutside:
    """The pointer went down outside the search box."""


@dataclass(frozen=True, slots=True)
class Focus:
    """The search box gained focus."""


@dataclass(frozen=True, slots=True)
class BlurAfterDelay:
    """The search box lost focus and the activation grace period is over."""


@dataclass(frozen=True, slots=True)
class ItemActivated:
    """A row of the search dropdown was chosen."""

    paper_id: int


@dataclass(frozen=True, slots=True)
class NodeClick:
    """A rendered graph node was clicked."""

    paper_id: int


@dataclass(frozen=True, slots=True)
class NodeHover:
    """The pointer moved onto a node, or off all nodes (``None``)."""

    paper_id: int | None


SelectionEvent = (
    Select
    | SearchInput
    | SubmitSearch
    | PickFromList
    | ClickOutside
    | Focus
    | BlurAfterDelay
    | ItemActivated
    | NodeClick
    | NodeHover
)

# ============================================================================
# Reducer
# ============================================================================


def _select(paper_id: int, snapshot: DataSnapshot, policy: GraphPolicy) -> SelectionState:
    return SelectionState(
        selected_id=paper_id,
        search_term="",
        filtered_results=(),
        dropdown_visible=False,
        hovered_id=None,
        graph=build_for_selection(paper_id, snapshot, policy),
    )


def reduce(
    state: SelectionState,
    event: SelectionEvent,
    snapshot: DataSnapshot,
    policy: GraphPolicy,
) -> SelectionState:
    """Return the state that follows ``state`` after ``event``.

    Pure: the input state is never modified and the graph is rebuilt from
    ``snapshot`` whenever the selection changes.
    """
    match event:
        case Select(paper_id) | PickFromList(paper_id) | ItemActivated(paper_id):
            return _select(paper_id, snapshot, policy)
        case NodeClick(paper_id):
            if not policy.allow_recenter_on_node_click:
                return state
            return _select(paper_id, snapshot, policy)
        case SearchInput(term):
            results = filter_entries(term, snapshot.search_entries, SEARCH_RESULT_LIMIT)
            return replace(
                state,
                search_term=term,
                filtered_results=results,
                dropdown_visible=bool(results),
            )
        case SubmitSearch():
            if not state.filtered_results:
                return state
            return _select(state.filtered_results[0].id, snapshot, policy)
        case Focus():
            return replace(state, dropdown_visible=bool(state.filtered_results))
        case ClickOutside() | BlurAfterDelay():
            return replace(state, dropdown_visible=False)
        case NodeHover(paper_id):
            if paper_id is not None and state.graph.node_by_id(paper_id) is None:
                paper_id = None
            return replace(state, hovered_id=paper_id)
    raise TypeError(f"Unknown selection event: {event!r}")


# ============================================================================
# Controller
# ============================================================================

StateListener = Callable[[SelectionState], None]


class SelectionController:
    """Owns the current ``SelectionState`` and applies events to it.

    Events that arrive before the data store has published are queued and
    replayed in order once the snapshot is available. If the load fails the
    queue is dropped and further events are ignored.
    """

    def __init__(self, store: DataStore, policy: GraphPolicy | None = None) -> None:
        self._store = store
        self.policy = policy or GraphPolicy()
        self._state = SelectionState()
        self._pending: deque[SelectionEvent] = deque()
        self._listeners: list[StateListener] = []
        store.subscribe(self._on_snapshot_published)

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def dispatch(self, event: SelectionEvent) -> SelectionState:
        """Apply ``event`` now, or queue it while data is still loading."""
        snapshot = self._store.snapshot
        if snapshot is None:
            if self._store.status is LoadStatus.UNAVAILABLE:
                logger.debug("Ignoring %r: paper data is unavailable", event)
                self._pending.clear()
            else:
                logger.debug("Queueing %r until paper data is published", event)
                self._pending.append(event)
            return self._state
        self._apply(event, snapshot)
        return self._state

    def discard_pending(self) -> int:
        """Drop queued events (the load failed). Returns how many were dropped."""
        dropped = len(self._pending)
        self._pending.clear()
        if dropped:
            logger.info("Discarded %d queued events after failed data load", dropped)
        return dropped

    def _apply(self, event: SelectionEvent, snapshot: DataSnapshot) -> None:
        previous = self._state
        self._state = reduce(previous, event, snapshot, self.policy)
        if self._state.selected_id != previous.selected_id:
            logger.debug(
                "Selection %s -> %s (%d nodes)",
                previous.selected_id,
                self._state.selected_id,
                len(self._state.graph.nodes),
            )
        if self._state != previous:
            for listener in list(self._listeners):
                listener(self._state)

    def _on_snapshot_published(self, snapshot: DataSnapshot) -> None:
        while self._pending:
            self._apply(self._pending.popleft(), snapshot)

    # Renderer hooks

    def on_node_hover(self, node: GraphNode | None) -> SelectionState:
        return self.dispatch(NodeHover(node.id if node is not None else None))

    def on_node_click(self, node: GraphNode) -> SelectionState:
        return self.dispatch(NodeClick(node.id))


__all__ = [
    "BlurAfterDelay",
    "ClickOutside",
    "Focus",
    "ItemActivated",
    "NodeClick",
    "NodeHover",
    "PickFromList",
    "SearchInput",
    "Select",
    "SelectionController",
    "SelectionEvent",
    "SubmitSearch",
    "reduce",
]
