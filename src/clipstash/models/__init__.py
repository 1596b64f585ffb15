"""
clipstash.models
Package initialization for history persistence and domain models.
Contents:
- Entity Models:
    - ClipboardEntryEntity: database row for one distinct clipboard content.
- Domain Models:
    - ClipboardEntry: immutable Pydantic view of a row, handed to the daemon and browser.
"""

from .history import ClipboardEntry, ClipboardEntryEntity  # noqa: F401


__entities__ = ["ClipboardEntryEntity"]
__models__ = ["ClipboardEntry"]
__all__ = [*__entities__, *__models__]
