"""
clipstash.browser

Interactive terminal browser over the clipboard history.
"""

from clipstash.browser.app import BrowserApp, run_browser
from clipstash.browser.state import BrowserAction, BrowserViewState, ClickDebounce, Mode

__all__ = [
    "BrowserAction",
    "BrowserApp",
    "BrowserViewState",
    "ClickDebounce",
    "Mode",
    "run_browser",
]
