"""
clipstash.browser.render

Rich renderables for the browser: list rows, the preview panel, the header and the
status bar. Everything here is a pure function of its arguments so it can be tested
without a terminal.
"""

import re
from pathlib import Path
from typing import Optional, Union

from rich.cells import cell_len, set_cell_size
from rich.text import Text

from clipstash.browser.state import BrowserViewState
from clipstash.dates import pretty_date, relative_date
from clipstash.models import ClipboardEntry

DATE_COL = 8
MARKER = ">"
ELLIPSIS = "…"
NEWLINE_GLYPH = "↵"

SELECTED_STYLE = "bold cyan"
MATCH_STYLE = "black on #d2a8ff"
DIM_STYLE = "grey50"
TITLE_STYLE = "bold cyan"

_NEWLINE_RUN = re.compile(r"[\r\n]+")
_WHITESPACE_RUN = re.compile(r"\s+")


def collapse(content: str) -> str:
    """
    Flatten `content` to a single display line.

    Example:
        >>> collapse("a\\n\\nb   c\\td")
        'a↵b c d'
    """
    return _WHITESPACE_RUN.sub(" ", _NEWLINE_RUN.sub(NEWLINE_GLYPH, content))


def pad(text: str, width: int) -> str:
    """Fit `text` to exactly `width` terminal cells, cropping or padding with spaces."""
    return set_cell_size(text, max(width, 0))


def truncate(text: str, width: int) -> str:
    """
    Fit `text` to exactly `width` terminal cells, padding or cutting with an ellipsis.

    Wide characters (CJK, most emoji) take two cells; a wide character that would
    straddle the cut is replaced by padding.
    """
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return pad(text, width)
    return set_cell_size(text, width - 1) + ELLIPSIS


def highlight(text: str, term: str, style: Optional[str] = None) -> Text:
    """
    Build a Text with every case-insensitive occurrence of `term` styled as a match.

    Args:
        text (str): Text to render.
        term (str): Literal search term; empty means no highlighting.
        style (Optional[str]): Base style for the non-matching parts.
    """
    rendered = Text(text, style=style or "")
    if not term:
        return rendered
    for match in re.finditer(re.escape(term), text, re.IGNORECASE):
        rendered.stylize(MATCH_STYLE, match.start(), match.end())
    return rendered


def format_row(
    entry: ClipboardEntry,
    selected: bool,
    width: int,
    term: str = "",
    now: Optional[float] = None,
) -> Text:
    """
    One list row: marker, collapsed content fitted to the column, recency label.

    The row is exactly `width` terminal cells and never wraps.
    """
    content_width = max(1, width - 2 - DATE_COL - 1)
    line = truncate(collapse(entry.content), content_width)
    style = SELECTED_STYLE if selected else None

    row = Text(
        f"{MARKER if selected else ' '} ", style=style or "", no_wrap=True, overflow="crop"
    )
    row.append_text(highlight(line, term, style))
    row.append(" " + pad(relative_date(entry.last_copied, now=now), DATE_COL), style=DIM_STYLE)
    return row


def format_list(state: BrowserViewState, width: int, now: Optional[float] = None) -> Text:
    """The rows of the current viewport, or a placeholder when nothing is visible."""
    if not state.filtered:
        placeholder = "No matches." if state.entries else "No clipboard history found."
        return Text(placeholder, style=DIM_STYLE)

    rows = [
        format_row(entry, index == state.selected_index, width, state.filter_text, now)
        for index, entry in state.visible_entries
    ]
    return Text("\n", no_wrap=True, overflow="crop").join(rows)


def plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def format_preview(entry: Optional[ClipboardEntry], term: str = "") -> Text:
    if entry is None:
        return Text("No entry selected", style=DIM_STYLE)

    preview = Text()
    preview.append(f"  {pretty_date(entry.last_copied)}  ", style="bold white on #161b22")
    preview.append(" ")
    preview.append(f"Copied {plural(entry.copy_count, 'time')}", style=DIM_STYLE)
    preview.append("\n")
    preview.append(
        f"{plural(entry.line_count, 'line')}, {plural(entry.char_count, 'char')}",
        style=DIM_STYLE,
    )
    preview.append("\n\n")
    preview.append_text(highlight(entry.content, term))
    return preview


def format_header(state: BrowserViewState, width: int = 80) -> Text:
    header = Text.assemble(
        ("clipstash", TITLE_STYLE),
        (" - ", DIM_STYLE),
        ("History", "bold"),
        (f" ({state.count_info()})", DIM_STYLE),
    )
    header.append("\n" + "─" * max(width, 1), style=DIM_STYLE)
    return header


def short_db_path(db_path: Union[str, Path]) -> str:
    """
    Last two components of the store path.

    Example:
        >>> short_db_path("/home/me/.local/share/clipstash/clipboard.db")
        'clipstash/clipboard.db'
    """
    parts = Path(db_path).parts
    return "/".join(parts[-2:])


def format_status(state: BrowserViewState, db_path: Union[str, Path]) -> Text:
    """Filter prompt while filtering, else the transient message, else the key hints."""
    if state.is_filtering:
        return Text.assemble(
            ("Filter: ", "yellow"),
            state.filter_text,
            ("_", DIM_STYLE),
            ("  (Enter to confirm, Esc to cancel)", DIM_STYLE),
        )

    if state.message:
        status = Text(state.message, style="bold green")
    else:
        status = Text()
        for key, description in (
            ("Enter", " copy"),
            ("/", " filter"),
            ("r", "efresh"),
            ("q", "uit"),
        ):
            status.append(key, style="bold")
            status.append(description + "  ", style=DIM_STYLE)

    status.append(f"DB: {short_db_path(db_path)}", style=DIM_STYLE)
    return status


__all__ = [
    "collapse",
    "format_header",
    "format_list",
    "format_preview",
    "format_row",
    "format_status",
    "highlight",
    "short_db_path",
    "truncate",
]
