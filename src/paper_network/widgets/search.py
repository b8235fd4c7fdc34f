"""Search dropdown and popular-papers picker."""

from __future__ import annotations

from textual import on
from textual.message import Message
from textual.widgets import OptionList, Select
from textual.widgets.option_list import Option

from paper_network.formatting import escape_rich_text, truncate_text
from paper_network.models import SearchEntry

POPULAR_TITLE_MAX_LEN = 80
SEARCH_HINT_TEXT = "Top 10 results shown below — select one to explore."
POPULAR_PROMPT = "Or select a popular paper..."


class SearchDropdown(OptionList):
    """Result rows under the search box; hidden unless ``visible`` is set."""

    class ResultChosen(Message):
        """A result row was activated."""

        def __init__(self, entry: SearchEntry) -> None:
            super().__init__()
            self.entry = entry

    DEFAULT_CSS = """
    SearchDropdown {
        height: auto;
        max-height: 12;
        background: $th-background;
        border: tall $th-panel-alt;
        display: none;
    }

    SearchDropdown.visible {
        display: block;
    }

    SearchDropdown > .option-list--option-highlighted {
        background: $th-highlight;
    }
    """

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__(id=id)
        self._entries: tuple[SearchEntry, ...] = ()

    @property
    def entries(self) -> tuple[SearchEntry, ...]:
        return self._entries

    def show_results(self, entries: tuple[SearchEntry, ...], visible: bool) -> None:
        """Sync rows and visibility with the selection state."""
        if entries != self._entries:
            self._entries = entries
            self.clear_options()
            self.add_options(
                [
                    Option(escape_rich_text(entry.display_title), id=f"result-{index}")
                    for index, entry in enumerate(entries)
                ]
            )
        self.set_class(visible and bool(entries), "visible")

    @on(OptionList.OptionSelected)
    def _on_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        option_id = event.option.id or ""
        if not option_id.startswith("result-"):
            return
        index = int(option_id.removeprefix("result-"))
        if 0 <= index < len(self._entries):
            self.post_message(self.ResultChosen(self._entries[index]))


def build_popular_options(entries: tuple[SearchEntry, ...]) -> list[tuple[str, int]]:
    """Build ``(label, paper_id)`` pairs for the popular-papers picker."""
    return [
        (escape_rich_text(truncate_text(entry.display_title, POPULAR_TITLE_MAX_LEN, "")), entry.id)
        for entry in entries
    ]


class PopularPapersSelect(Select[int]):
    """Fixed shortcut list of the first papers in the search index."""

    def __init__(self, *, id: str | None = None) -> None:
        super().__init__([], prompt=POPULAR_PROMPT, allow_blank=True, id=id)
        self._paper_ids: frozenset[int] = frozenset()

    def load_entries(self, entries: tuple[SearchEntry, ...]) -> None:
        self._paper_ids = frozenset(entry.id for entry in entries)
        self.set_options(build_popular_options(entries))

    def show_selected(self, paper_id: int | None) -> None:
        """Show ``paper_id`` when it is listed, otherwise fall back to the prompt."""
        with self.prevent(Select.Changed):
            if paper_id is not None and paper_id in self._paper_ids:
                if self.value != paper_id:
                    self.value = paper_id
            elif not self.is_blank():
                self.clear()


__all__ = [
    "POPULAR_PROMPT",
    "POPULAR_TITLE_MAX_LEN",
    "SEARCH_HINT_TEXT",
    "PopularPapersSelect",
    "SearchDropdown",
    "build_popular_options",
]
