"""
clipstash.clipboard

Read and write primitives for the OS clipboard (plain text only).

Both calls are fallible: any pyperclip failure, and a read that exceeds its timeout,
is raised as ClipboardError. A timed read runs in a daemon thread so a stuck platform
call cannot block the caller past `timeout`. At most one such reader exists: while a
timed-out read is still stuck, further reads fail fast instead of starting another thread.
"""

import logging
import threading
from typing import Optional

import pyperclip

from clipstash.errors import ClipboardError

logger = logging.getLogger("clipstash").getChild("clipboard")

_reader: Optional[threading.Thread] = None
_reader_lock = threading.Lock()


def _paste() -> Optional[str]:
    try:
        return pyperclip.paste()
    except pyperclip.PyperclipException as e:
        raise ClipboardError("Clipboard read failed", original_error=e)


def read_text(timeout: Optional[float] = None) -> Optional[str]:
    """
    Get the current clipboard text.

    Args:
        timeout (Optional[float]): Seconds to wait for the platform call. None waits forever.

    Returns:
        Optional[str]: The clipboard text; None or "" when the clipboard holds no text.

    Raises:
        ClipboardError: The read failed or timed out, or an earlier read is still stuck.
    """
    global _reader
    if timeout is None:
        return _paste()

    result: dict = {}

    def _target():
        try:
            result["value"] = _paste()
        except ClipboardError as e:
            result["error"] = e

    with _reader_lock:
        if _reader is not None and _reader.is_alive():
            raise ClipboardError("Previous clipboard read is still in progress")
        worker = threading.Thread(target=_target, name="clipstash-clipboard-read", daemon=True)
        _reader = worker
        worker.start()
    worker.join(timeout)
    if worker.is_alive():
        raise ClipboardError(f"Clipboard read timed out after {timeout:.1f}s")
    if "error" in result:
        raise result["error"]
    return result.get("value")


def write_text(content: str) -> None:
    """
    Replace the clipboard contents with `content`.

    Raises:
        ClipboardError: The platform refused the write.
    """
    try:
        pyperclip.copy(content)
    except pyperclip.PyperclipException as e:
        raise ClipboardError("Clipboard write failed", original_error=e)
    logger.debug(f"Wrote {len(content)} characters to the clipboard")
