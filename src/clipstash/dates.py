"""
Date formatting helpers for the browser.
"""

import time
from datetime import datetime
from typing import Optional

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY


def relative_date(timestamp: float, now: Optional[float] = None) -> str:
    """
    Compact recency label for a row.

    Example:
        >>> relative_date(0, now=300)
        '5m ago'
        >>> relative_date(0, now=30)
        'now'
    """
    now = time.time() if now is None else now
    seconds = max(0, int(now - timestamp))

    if seconds < MINUTE:
        return "now"
    if seconds < HOUR:
        return f"{seconds // MINUTE}m ago"
    if seconds < DAY:
        return f"{seconds // HOUR}h ago"
    if seconds < WEEK:
        return f"{seconds // DAY}d ago"
    if seconds < 5 * WEEK:
        return f"{seconds // WEEK}w ago"
    return f"{seconds // (30 * DAY)}mo ago"


def ordinal(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return f"{n}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def pretty_date(timestamp: float) -> str:
    """Local time label for the preview panel, e.g. "January 1st at 14:30"."""
    local = datetime.fromtimestamp(timestamp)
    return f"{local:%B} {ordinal(local.day)} at {local:%H:%M}"
