# region Docstring
"""
clipstash.browser.app
Textual front-end of the history browser.
Overview:
- BrowserApp owns a BrowserViewState and a read-only HistoryStore handle. Every key
    press goes through BrowserViewState.handle_key; the returned BrowserAction decides
    whether the app refreshes, exits, or commits.
- Committing exits the app with the selected content as its return value; writing it
    to the clipboard is the caller's job, after the terminal has been restored.
Contents:
- Widgets:
    - HeaderBar, EntryList, Divider, PreviewPanel, StatusBar: render straight from
        the view state through clipstash.browser.render.
- Classes:
    - BrowserApp(App[Optional[str]])
- Functions:
    - run_browser(store, settings, db_path) -> Optional[str]
"""
# endregion
# region Imports
import logging
import time
from pathlib import Path
from typing import Optional, Union

from rich.console import RenderableType
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.timer import Timer
from textual.widget import Widget

from clipstash.browser.render import (
    format_header,
    format_list,
    format_preview,
    format_status,
)
from clipstash.browser.state import BrowserAction, BrowserViewState, ClickDebounce
from clipstash.config import BrowserSettings
from clipstash.errors import StoreError
from clipstash.models import ClipboardEntry
from clipstash.store import HistoryStore

# endregion

logger = logging.getLogger("clipstash").getChild("browser")

# region Widgets


class StatePanel(Widget):
    """A panel that renders from the owning BrowserApp's view state."""

    @property
    def view(self) -> BrowserViewState:
        return self.app.view_state  # type: ignore[attr-defined]


class HeaderBar(StatePanel):
    DEFAULT_CSS = """
    HeaderBar {
        height: 2;
    }
    """

    def render(self) -> RenderableType:
        return format_header(self.view, self.size.width)


class EntryList(StatePanel):
    """The scrolling list; its height is the viewport height."""

    DEFAULT_CSS = """
    EntryList {
        width: 1fr;
        height: 1fr;
    }
    """

    def render(self) -> RenderableType:
        return format_list(self.view, self.size.width)

    def on_resize(self, event: events.Resize) -> None:
        self.view.set_viewport_height(event.size.height)
        self.app.refresh_view()  # type: ignore[attr-defined]

    def on_click(self, event: events.Click) -> None:
        self.app.handle_click(event.y)  # type: ignore[attr-defined]


class Divider(Widget):
    DEFAULT_CSS = """
    Divider {
        width: 1;
        height: 1fr;
        color: $text-muted;
    }
    """

    def render(self) -> RenderableType:
        return Text("\n".join("│" * self.size.height))


class PreviewPanel(StatePanel):
    DEFAULT_CSS = """
    PreviewPanel {
        width: 1fr;
        height: 1fr;
        padding-left: 1;
        overflow: hidden;
    }
    """

    def render(self) -> RenderableType:
        return format_preview(self.view.current_entry, self.view.filter_text)


class StatusBar(StatePanel):
    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        dock: bottom;
    }
    """

    def render(self) -> RenderableType:
        return format_status(self.view, self.app.db_path)  # type: ignore[attr-defined]


# endregion
# region App


class BrowserApp(App[Optional[str]]):
    """
    Interactive clipboard history browser.

    Attributes:
        store (HistoryStore): Source of snapshots; never written to.
        browser_settings (BrowserSettings): Message timeout and click windows.
        db_path (Path): Shown in the status bar.
        view_state (BrowserViewState): Navigation, filter and selection state.
    """

    CSS = """
    #body {
        height: 1fr;
    }
    """

    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+c", "quit_browser", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        store: HistoryStore,
        entries: list[ClipboardEntry],
        settings: BrowserSettings,
        db_path: Union[str, Path],
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.store = store
        self.browser_settings = settings
        self.db_path = Path(db_path)
        self.view_state = BrowserViewState(
            entries,
            debounce=ClickDebounce(
                double_click_window=settings.double_click_window,
                lock_window=settings.click_lock_window,
            ),
        )
        self._message_timer: Optional[Timer] = None

    def compose(self) -> ComposeResult:
        yield HeaderBar(id="header")
        with Horizontal(id="body"):
            yield EntryList(id="list")
            yield Divider(id="divider")
            yield PreviewPanel(id="preview")
        yield StatusBar(id="status")

    def refresh_view(self) -> None:
        for panel in self.query(StatePanel):
            panel.refresh()

    # region Input

    def on_key(self, event: events.Key) -> None:
        action = self.view_state.handle_key(event.key, event.character)
        event.stop()
        self.apply_action(action)

    def handle_click(self, row: int) -> None:
        self.apply_action(self.view_state.click_row(row, time.monotonic()))

    def apply_action(self, action: BrowserAction) -> None:
        if action is BrowserAction.EXIT:
            self.exit(None)
            return
        if action is BrowserAction.COMMIT:
            entry = self.view_state.current_entry
            if entry is not None:
                self.exit(entry.content)
                return
        if action is BrowserAction.REFRESH:
            self.reload_entries()
        self.refresh_view()

    def action_quit_browser(self) -> None:
        self.exit(None)

    # endregion
    # region Refresh / messages

    def reload_entries(self) -> None:
        """Re-read the store; on failure keep the current view and report it."""
        try:
            entries = self.store.list_all()
        except StoreError as e:
            logger.error(f"Refresh failed: {e}")
            self.show_message(f"Refresh failed: {e.message}")
            return
        self.view_state.reload(entries)
        self._arm_message_timer()

    def show_message(self, message: str) -> None:
        self.view_state.show_message(message)
        self._arm_message_timer()

    def _arm_message_timer(self) -> None:
        if self._message_timer is not None:
            self._message_timer.stop()
        self._message_timer = self.set_timer(
            self.browser_settings.message_timeout, self._clear_message
        )

    def _clear_message(self) -> None:
        self._message_timer = None
        self.view_state.clear_message()
        self.refresh_view()

    # endregion


# endregion


def run_browser(
    store: HistoryStore,
    settings: BrowserSettings,
    db_path: Union[str, Path],
) -> Optional[str]:
    """
    Load a snapshot and run the browser until the user quits or commits.

    Returns:
        Optional[str]: The committed content, or None when the user quit.

    Raises:
        StoreReadError: The initial snapshot could not be read.
    """
    entries = store.list_all()
    logger.debug(f"Browser loaded {len(entries)} entries from {db_path}")
    return BrowserApp(store, entries, settings, db_path).run()


__all__ = ["BrowserApp", "run_browser"]
