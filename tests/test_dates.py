from datetime import datetime

import pytest

from clipstash.dates import DAY, HOUR, MINUTE, WEEK, ordinal, pretty_date, relative_date


@pytest.mark.parametrize(
    "age, expected",
    [
        (0, "now"),
        (59, "now"),
        (MINUTE, "1m ago"),
        (5 * MINUTE + 30, "5m ago"),
        (HOUR, "1h ago"),
        (23 * HOUR, "23h ago"),
        (2 * DAY, "2d ago"),
        (WEEK, "1w ago"),
        (30 * DAY, "4w ago"),
        (60 * DAY, "2mo ago"),
        (125 * DAY, "4mo ago"),
    ],
)
def test_relative_date(age, expected):
    assert relative_date(1_000_000.0 - age, now=1_000_000.0) == expected


def test_relative_date_in_the_future_is_now():
    assert relative_date(2000.0, now=1000.0) == "now"


@pytest.mark.parametrize(
    "n, expected",
    [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"),
     (13, "13th"), (21, "21st"), (22, "22nd"), (23, "23rd"), (31, "31st"), (111, "111th")],
)
def test_ordinal(n, expected):
    assert ordinal(n) == expected


def test_pretty_date_uses_local_time():
    stamp = datetime(2024, 1, 1, 14, 30).timestamp()
    assert pretty_date(stamp) == "January 1st at 14:30"
    stamp = datetime(2024, 3, 22, 9, 5).timestamp()
    assert pretty_date(stamp) == "March 22nd at 09:05"
