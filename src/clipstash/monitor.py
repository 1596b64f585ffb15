# region Docstring
"""
clipstash.monitor
Clipboard monitor daemon.
Overview:
- Polls the OS clipboard on a fixed interval and forwards genuine changes to the
    HistoryStore.
- Two levels of deduplication:
    - in memory: the fingerprint of the value seen on the previous tick. Consecutive
        identical polls cost one clipboard read and no I/O against the store.
    - in the store: the UNIQUE content_hash turns a repeat of historical content into
        an update of the existing row.
Contents:
- Classes:
    - ClipboardMonitor:
        prime(), observe(), tick(), run(), stop().
- Functions:
    - serve(store, settings) -> int: runs the monitor until SIGINT/SIGTERM.
Design notes:
- The stop flag is only checked between ticks (and during the settle wait, before any
    write), so an upsert is either completed or never started.
- A failed write leaves the last-seen fingerprint untouched so the next tick retries it.
"""
# endregion
# region Imports
import logging
import signal
import threading
from typing import Callable, Optional

from clipstash import clipboard
from clipstash.config import MonitorSettings
from clipstash.errors import ClipboardError, StoreError, StoreWriteError
from clipstash.models import ClipboardEntry
from clipstash.store import HistoryStore, hash_content

# endregion

logger = logging.getLogger("clipstash").getChild("monitor")


class ClipboardMonitor:
    """
    Polling loop that records clipboard changes.

    Attributes:
        store (HistoryStore): Destination of observed values.
        settings (MonitorSettings): Poll interval, read timeout, settle delay, min length.
        last_seen (Optional[str]): Fingerprint of the value seen on the previous tick.
        ticks (int): Number of completed ticks.
        writes (int): Number of successful upserts.
        failures (int): Number of failed reads or writes.
    """

    def __init__(
        self,
        store: HistoryStore,
        settings: MonitorSettings,
        read_clipboard: Optional[Callable[[], Optional[str]]] = None,
    ):
        self.store = store
        self.settings = settings
        self._read = read_clipboard or (
            lambda: clipboard.read_text(timeout=settings.read_timeout)
        )
        self._stop_event = threading.Event()
        self.last_seen: Optional[str] = None
        self.ticks = 0
        self.writes = 0
        self.failures = 0

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Ask the loop to exit after the current tick."""
        self._stop_event.set()

    def prime(self) -> None:
        """Seed last-seen from the newest stored entry so a restart does not re-count it."""
        try:
            latest = self.store.latest()
        except StoreError as e:
            logger.warning(f"Could not read latest entry, starting unprimed: {e}")
            return
        if latest is not None:
            self.last_seen = latest.content_hash

    def observe(self) -> Optional[str]:
        """
        Read the clipboard once.

        Returns:
            Optional[str]: The content, or None for a failed read, an empty clipboard, or
            content shorter than `min_length` once stripped.
        """
        try:
            content = self._read()
        except ClipboardError as e:
            self.failures += 1
            logger.debug(f"Skipping tick: {e}")
            return None
        if not content or len(content.strip()) < self.settings.min_length:
            return None
        return content

    def tick(self) -> Optional[ClipboardEntry]:
        """
        Run one poll.

        Returns:
            Optional[ClipboardEntry]: The upserted row, or None when nothing was written.
        """
        self.ticks += 1
        content = self.observe()
        if content is None:
            return None

        fingerprint = hash_content(content)
        if fingerprint == self.last_seen:
            return None

        if self.settings.settle_delay > 0:
            if self._stop_event.wait(self.settings.settle_delay):
                return None
            if self.observe() != content:
                logger.debug("Clipboard changed during settle window, skipping")
                return None

        try:
            entry = self.store.upsert(content)
        except StoreWriteError as e:
            self.failures += 1
            logger.error(f"Failed to record clipboard entry: {e}")
            return None

        self.last_seen = fingerprint
        self.writes += 1
        logger.info(
            f"Recorded clipboard entry id={entry.id} copy_count={entry.copy_count} chars={len(content)}"
        )
        return entry

    def run(self, max_ticks: Optional[int] = None) -> None:
        """
        Poll until stop() is called (or `max_ticks` ticks have run).
        """
        logger.info(
            f"Clipboard monitor started (interval={self.settings.poll_interval}s, store={self.store.path})"
        )
        while not self._stop_event.is_set():
            self.tick()
            if max_ticks is not None and self.ticks >= max_ticks:
                break
            self._stop_event.wait(self.settings.poll_interval)
        logger.info(
            f"Clipboard monitor stopped after {self.ticks} ticks ({self.writes} writes, {self.failures} failures)"
        )


def serve(store: HistoryStore, settings: MonitorSettings) -> int:
    """Run the monitor in the foreground until SIGINT or SIGTERM."""
    monitor = ClipboardMonitor(store, settings)

    def _handle_signal(signum, frame):
        logger.info(f"Received signal {signal.Signals(signum).name}, stopping")
        monitor.stop()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    monitor.prime()
    monitor.run()
    return 0


__all__ = ["ClipboardMonitor", "serve"]
