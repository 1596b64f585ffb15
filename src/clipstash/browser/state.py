# region Docstring
"""
clipstash.browser.state
In-memory view state and key/mouse state machine of the history browser.
Overview:
- BrowserViewState is a disposable projection of a HistoryStore snapshot. It never
    writes back; the app acts on the BrowserAction values it returns.
- Two modes:
    - NORMAL: navigate (j/k, arrows, page keys, g/G), refresh (r), filter (/),
        commit (enter), quit (q/escape, which first clears an active filter).
    - FILTERING: printable keys edit the filter, backspace/delete erase, escape
        clears and leaves, enter leaves and keeps the filtered view.
- Filtering is literal, case-insensitive substring containment.
Invariants (restored after every operation):
- selected_index is None iff the filtered view is empty, else in [0, count-1].
- scroll_offset <= selected_index <= scroll_offset + viewport_height - 1.
- Scrolling moves by exactly enough to keep the selection visible.
"""
# endregion
# region Imports
from enum import Enum
from typing import Iterable, Optional

from clipstash.models import ClipboardEntry

# endregion
# region Enums


class Mode(str, Enum):
    NORMAL = "normal"
    FILTERING = "filtering"


class BrowserAction(str, Enum):
    """What the app must do after a key or mouse event."""

    NONE = "none"
    EXIT = "exit"
    COMMIT = "commit"
    REFRESH = "refresh"


class ClickResult(str, Enum):
    IGNORED = "ignored"
    SELECTED = "selected"
    ACTIVATED = "activated"


# endregion
# region Click debounce


class ClickDebounce:
    """
    Double-click detection for list rows.

    Attributes:
        double_click_window (float): Max seconds between two clicks on one row to activate it.
        lock_window (float): Clicks closer than this to the previous one are dropped.
        last_time (Optional[float]): Time of the last accepted single click.
        last_index (Optional[int]): Filtered index of the last accepted single click.
        locked_until (float): Clicks before this time are ignored.
    """

    def __init__(self, double_click_window: float = 0.4, lock_window: float = 0.05):
        self.double_click_window = double_click_window
        self.lock_window = lock_window
        self.last_time: Optional[float] = None
        self.last_index: Optional[int] = None
        self.locked_until: float = float("-inf")

    def register(self, index: int, now: float) -> ClickResult:
        if now < self.locked_until:
            return ClickResult.IGNORED
        self.locked_until = now + self.lock_window

        if (
            self.last_time is not None
            and self.last_index == index
            and now - self.last_time < self.double_click_window
        ):
            self.reset()
            return ClickResult.ACTIVATED

        self.last_time = now
        self.last_index = index
        return ClickResult.SELECTED

    def reset(self) -> None:
        self.last_time = None
        self.last_index = None


# endregion
# region Filtering


def matches(content: str, filter_text: str) -> bool:
    """Case-insensitive substring containment; an empty filter matches everything."""
    if not filter_text:
        return True
    return filter_text.lower() in content.lower()


def filter_entries(
    entries: Iterable[ClipboardEntry], filter_text: str
) -> list[ClipboardEntry]:
    """Entries whose content matches `filter_text`, in their original order."""
    return [e for e in entries if matches(e.content, filter_text)]


# endregion
# region View state


class BrowserViewState:
    """
    Navigation, filtering and selection over a loaded history snapshot.

    Attributes:
        entries (list[ClipboardEntry]): Snapshot, most recently copied first.
        filter_text (str): Active filter; empty means no filter.
        mode (Mode): NORMAL or FILTERING.
        scroll_offset (int): First visible index of the filtered view.
        viewport_height (int): Number of list rows rendered (at least 1).
        message (Optional[str]): Transient acknowledgement for the status bar.
        debounce (ClickDebounce): Mouse double-click state.
    """

    def __init__(
        self,
        entries: Iterable[ClipboardEntry] = (),
        viewport_height: int = 10,
        debounce: Optional[ClickDebounce] = None,
    ):
        self.entries: list[ClipboardEntry] = list(entries)
        self.filter_text: str = ""
        self.mode: Mode = Mode.NORMAL
        self.scroll_offset: int = 0
        self.viewport_height: int = max(1, viewport_height)
        self.message: Optional[str] = None
        self.debounce = debounce or ClickDebounce()
        self._selected: int = 0
        self._filtered: list[ClipboardEntry] = list(self.entries)

    # region Derived view

    @property
    def filtered(self) -> list[ClipboardEntry]:
        return self._filtered

    @property
    def filtered_count(self) -> int:
        return len(self._filtered)

    @property
    def selected_index(self) -> Optional[int]:
        return self._selected if self._filtered else None

    @property
    def current_entry(self) -> Optional[ClipboardEntry]:
        if not self._filtered:
            return None
        return self._filtered[self._selected]

    @property
    def is_filtering(self) -> bool:
        return self.mode is Mode.FILTERING

    @property
    def visible_entries(self) -> list[tuple[int, ClipboardEntry]]:
        """(filtered index, entry) pairs inside the viewport."""
        end = min(self.scroll_offset + self.viewport_height, len(self._filtered))
        return [(i, self._filtered[i]) for i in range(self.scroll_offset, end)]

    def count_info(self) -> str:
        if not self.filter_text:
            return f"{self.filtered_count} entries"
        return f"{len(self.entries)} entries, {self.filtered_count} matches"

    # endregion
    # region Navigation

    def _ensure_visible(self) -> None:
        count = len(self._filtered)
        if count == 0:
            self._selected = 0
            self.scroll_offset = 0
            return

        self._selected = min(max(self._selected, 0), count - 1)
        if self._selected < self.scroll_offset:
            self.scroll_offset = self._selected
        elif self._selected >= self.scroll_offset + self.viewport_height:
            self.scroll_offset = self._selected - self.viewport_height + 1
        self.scroll_offset = max(0, min(self.scroll_offset, count - self.viewport_height))

    def move_to(self, index: int) -> None:
        self._selected = index
        self._ensure_visible()

    def move_by(self, delta: int) -> None:
        self.move_to(self._selected + delta)

    def move_down(self) -> None:
        self.move_by(1)

    def move_up(self) -> None:
        self.move_by(-1)

    def page_down(self) -> None:
        self.move_by(self.viewport_height)

    def page_up(self) -> None:
        self.move_by(-self.viewport_height)

    def move_first(self) -> None:
        self.move_to(0)

    def move_last(self) -> None:
        self.move_to(len(self._filtered) - 1)

    def set_viewport_height(self, height: int) -> None:
        self.viewport_height = max(1, height)
        self._ensure_visible()

    def _reset_position(self) -> None:
        self._selected = 0
        self.scroll_offset = 0

    # endregion
    # region Filtering

    def _refilter(self) -> None:
        self._filtered = filter_entries(self.entries, self.filter_text)
        self._reset_position()

    def begin_filter(self) -> None:
        self.mode = Mode.FILTERING

    def filter_push(self, text: str) -> None:
        self.filter_text += text
        self._refilter()

    def filter_pop(self) -> None:
        if self.filter_text:
            self.filter_text = self.filter_text[:-1]
        self._refilter()

    def confirm_filter(self) -> None:
        self.mode = Mode.NORMAL

    def clear_filter(self) -> None:
        self.mode = Mode.NORMAL
        self.filter_text = ""
        self._refilter()

    cancel_filter = clear_filter

    # endregion
    # region Reload / messages

    def reload(self, entries: Iterable[ClipboardEntry], message: str = "Refreshed") -> None:
        """Swap in a fresh snapshot; the filter is kept, the position goes back to the top."""
        self.entries = list(entries)
        self._refilter()
        self.message = message

    def show_message(self, message: str) -> None:
        self.message = message

    def clear_message(self) -> None:
        self.message = None

    # endregion
    # region Input

    def handle_key(self, key: str, character: Optional[str] = None) -> BrowserAction:
        """
        Apply one key press.

        Args:
            key (str): Key name ("down", "enter", "escape", "backspace", "ctrl+c", "j", ...).
            character (Optional[str]): The printable character produced, if any.

        Returns:
            BrowserAction: What the caller must do next.
        """
        if key == "ctrl+c":
            return BrowserAction.EXIT
        if self.mode is Mode.FILTERING:
            return self._handle_filter_key(key, character)
        return self._handle_normal_key(key, character)

    def _handle_normal_key(self, key: str, character: Optional[str]) -> BrowserAction:
        char = character if _is_printable(key, character) else None

        if key == "down" or char == "j":
            self.move_down()
        elif key == "up" or char == "k":
            self.move_up()
        elif key == "pagedown":
            self.page_down()
        elif key == "pageup":
            self.page_up()
        elif key == "home" or char == "g":
            self.move_first()
        elif key == "end" or char == "G":
            self.move_last()
        elif key == "enter":
            if self.current_entry is not None:
                return BrowserAction.COMMIT
        elif char == "/":
            self.begin_filter()
        elif char == "r":
            return BrowserAction.REFRESH
        elif char == "q" or key == "escape":
            if self.filter_text:
                self.clear_filter()
            else:
                return BrowserAction.EXIT
        return BrowserAction.NONE

    def _handle_filter_key(self, key: str, character: Optional[str]) -> BrowserAction:
        if key == "escape":
            self.cancel_filter()
        elif key == "enter":
            self.confirm_filter()
        elif key in ("backspace", "delete"):
            self.filter_pop()
        elif _is_printable(key, character):
            self.filter_push(character)
        return BrowserAction.NONE

    def click(self, index: int, now: float) -> BrowserAction:
        """
        Apply a mouse click on filtered index `index`.

        A first click selects the row, a second click on the same row within the
        double-click window commits it.
        """
        if index < 0 or index >= len(self._filtered):
            return BrowserAction.NONE
        result = self.debounce.register(index, now)
        if result is ClickResult.IGNORED:
            return BrowserAction.NONE
        self.move_to(index)
        if result is ClickResult.ACTIVATED:
            return BrowserAction.COMMIT
        return BrowserAction.NONE

    def click_row(self, row: int, now: float) -> BrowserAction:
        """Same as click() for viewport row `row` (0 is the top visible row)."""
        if row < 0:
            return BrowserAction.NONE
        return self.click(self.scroll_offset + row, now)

    # endregion


def _is_printable(key: str, character: Optional[str]) -> bool:
    if not character or not character.isprintable():
        return False
    return not key.startswith(("ctrl+", "alt+", "meta+"))


# endregion

__all__ = [
    "BrowserAction",
    "BrowserViewState",
    "ClickDebounce",
    "ClickResult",
    "Mode",
    "filter_entries",
    "matches",
]
