from rich.cells import cell_len

from clipstash.browser.render import (
    MATCH_STYLE,
    collapse,
    format_header,
    format_list,
    format_preview,
    format_row,
    format_status,
    highlight,
    short_db_path,
    truncate,
)
from clipstash.browser.state import BrowserViewState

from .conftest import make_entry


def match_spans(text):
    return [(span.start, span.end) for span in text.spans if span.style == MATCH_STYLE]


def test_collapse():
    assert collapse("a\n\nb   c\td") == "a↵b c d"
    assert collapse("line one\r\nline two") == "line one↵line two"
    assert collapse("plain") == "plain"


def test_truncate_pads_or_cuts():
    assert truncate("hello", 8) == "hello   "
    assert truncate("hello world", 5) == "hell…"
    assert len(truncate("x" * 100, 20)) == 20
    assert truncate("abc", 0) == ""


def test_highlight_marks_every_match_case_insensitively():
    text = highlight("Apple and apple", "APPLE")
    assert text.plain == "Apple and apple"
    assert match_spans(text) == [(0, 5), (10, 15)]


def test_highlight_is_literal():
    assert match_spans(highlight("a.b axb", ".")) == [(1, 2)]
    assert match_spans(highlight("nothing", "")) == []


def test_format_row_fits_width():
    entry = make_entry(1, "first line\nsecond line", last_copied=1000.0)
    row = format_row(entry, selected=True, width=40, now=1000.0)
    assert row.plain.startswith("> first line↵second line")
    assert len(row.plain) == 40
    assert row.plain.rstrip().endswith("now")

    other = format_row(entry, selected=False, width=40, now=1000.0 + 3 * 3600)
    assert other.plain.startswith("  ")
    assert "3h ago" in other.plain


def test_format_row_truncates_long_content():
    entry = make_entry(1, "x" * 200, last_copied=0.0)
    row = format_row(entry, selected=False, width=30, now=0.0)
    assert "…" in row.plain
    assert len(row.plain) == 30


def test_truncate_counts_terminal_cells():
    assert truncate("漢字", 4) == "漢字"
    assert truncate("漢字", 6) == "漢字  "
    assert truncate("漢字漢字", 5) == "漢字…"
    # A wide character that would straddle the cut becomes padding.
    assert truncate("漢字漢字", 4) == "漢 …"
    assert cell_len(truncate("🙂" * 30, 11)) == 11


def test_format_row_fits_width_with_wide_characters():
    for content in ("日本語のテキスト" * 10, "emoji 🎉🙂🚀 " * 10, "mixed ascii 漢字 and more"):
        entry = make_entry(1, content, last_copied=0.0)
        for width in (20, 33, 40):
            row = format_row(entry, selected=True, width=width, now=0.0)
            assert row.cell_len == width
            assert row.no_wrap
            assert "\n" not in row.plain


def test_format_list_lines_fit_width_with_wide_characters():
    entries = [make_entry(i, "漢字" * 40, last_copied=0.0) for i in range(1, 11)]
    state = BrowserViewState(entries, viewport_height=4)
    rendered = format_list(state, 30, now=0.0)
    lines = rendered.plain.split("\n")
    assert len(lines) == 4
    assert all(cell_len(line) == 30 for line in lines)
    assert lines[0].startswith(">")
    assert rendered.no_wrap


def test_format_row_highlights_filter():
    entry = make_entry(1, "say hello", last_copied=0.0)
    row = format_row(entry, selected=False, width=40, term="hello", now=0.0)
    assert match_spans(row) == [(6, 11)]


def test_format_list_placeholders():
    assert format_list(BrowserViewState([]), 40).plain == "No clipboard history found."
    state = BrowserViewState([make_entry(1, "abc")])
    state.filter_push("zzz")
    assert format_list(state, 40).plain == "No matches."


def test_format_list_renders_only_viewport():
    entries = [make_entry(i, f"entry {i}", last_copied=0.0) for i in range(1, 11)]
    state = BrowserViewState(entries, viewport_height=3)
    lines = format_list(state, 40, now=0.0).plain.split("\n")
    assert len(lines) == 3
    assert lines[0].startswith("> entry 1")
    assert lines[1].startswith("  entry 2")


def test_format_preview():
    entry = make_entry(1, "hello\nworld", copy_count=3)
    plain = format_preview(entry).plain
    assert "Copied 3 times" in plain
    assert "2 lines, 11 chars" in plain
    assert plain.endswith("hello\nworld")

    single = make_entry(2, "x", copy_count=1)
    assert "Copied 1 time" in format_preview(single).plain
    assert "1 line, 1 char" in format_preview(single).plain
    assert format_preview(None).plain == "No entry selected"


def test_format_preview_highlights_matches():
    entry = make_entry(1, "one two one")
    preview = format_preview(entry, "one")
    offset = preview.plain.index("one two one")
    assert match_spans(preview) == [(offset, offset + 3), (offset + 8, offset + 11)]


def test_format_header_counts():
    state = BrowserViewState([make_entry(1, "apple"), make_entry(2, "pear")])
    assert "(2 entries)" in format_header(state).plain
    state.filter_push("app")
    assert "(2 entries, 1 matches)" in format_header(state).plain


def test_short_db_path():
    assert short_db_path("/home/me/.local/share/clipstash/clipboard.db") == "clipstash/clipboard.db"
    assert short_db_path("clipboard.db") == "clipboard.db"


def test_format_status_modes():
    state = BrowserViewState([make_entry(1, "apple")])
    db_path = "/data/clipstash/clipboard.db"

    normal = format_status(state, db_path).plain
    assert "Enter copy" in normal
    assert "DB: clipstash/clipboard.db" in normal

    state.show_message("Refreshed")
    assert format_status(state, db_path).plain.startswith("Refreshed")

    state.begin_filter()
    state.filter_push("ap")
    filtering = format_status(state, db_path).plain
    assert filtering.startswith("Filter: ap_")
    assert "DB:" not in filtering
