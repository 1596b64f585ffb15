import os
from pathlib import Path

import pytest
from pytest import fixture

from clipstash.config import MonitorSettings, get_settings
from clipstash.errors import ClipboardError
from clipstash.models import ClipboardEntry
from clipstash.store import HistoryStore, hash_content


class FakeClock:
    """Deterministic epoch-seconds source; every call moves time forward by `step`."""

    def __init__(self, start: float = 1_700_000_000.0, step: float = 1.0):
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeClipboard:
    """Stand-in for the OS clipboard read by the monitor."""

    def __init__(self, value=None):
        self.value = value
        self.reads = 0
        self.error: ClipboardError = None

    def read(self):
        self.reads += 1
        if self.error is not None:
            raise self.error
        return self.value


@fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch):
    """Point every per-user location at a temporary directory."""
    for key in list(os.environ):
        if key.startswith("CLIPSTASH_"):
            monkeypatch.delenv(key, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("CLIPSTASH_LOG_DIR", str(tmp_path / "logs"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@fixture
def clock() -> FakeClock:
    return FakeClock()


@fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "history" / "clipboard.db"


@fixture
def store(db_path: Path, clock: FakeClock):
    """A freshly created store on disk."""
    history = HistoryStore.open(db_path, clock=clock)
    try:
        yield history
    finally:
        history.close()


@fixture
def fake_clipboard() -> FakeClipboard:
    return FakeClipboard()


@fixture
def monitor_settings() -> MonitorSettings:
    return MonitorSettings(poll_interval=0.01, read_timeout=1.0, settle_delay=0.0)


def make_entry(entry_id: int, content: str, last_copied: float = None, copy_count: int = 1):
    """Build a ClipboardEntry without touching a database."""
    stamp = 1_700_000_000.0 - entry_id if last_copied is None else last_copied
    return ClipboardEntry(
        id=entry_id,
        content=content,
        content_hash=hash_content(content),
        first_copied=stamp,
        last_copied=stamp,
        copy_count=copy_count,
    )


@pytest.fixture
def entry_factory():
    return make_entry
