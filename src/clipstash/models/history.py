# region Docstring
"""
clipstash.models.history
Persistence and domain models for clipboard history entries.
Overview:
- Provides the SQLAlchemy entity persisting one row per distinct clipboard content.
- Provides the Pydantic model mirroring the persisted entity for safe I/O, validation,
    and presentation.
Contents:
- SQLAlchemy entities:
    - ClipboardEntryEntity:
        Stores the content, its SHA-256 hash (unique, the deduplication key), first and
        last observation times (epoch seconds) and the observation count. Includes
        helpers for equality, hashing, and conversion to a ClipboardEntry Pydantic
        model via the .model property.
- Pydantic models:
    - ClipboardEntry:
        A domain model representing a single history entry with datetime helpers and
        content statistics used by the browser's preview panel.
Design notes:
- content_hash carries the UNIQUE constraint; upserts conflict on it.
- last_copied is indexed for descending recency retrieval, first_copied for age-based
    clearing.
- Timestamps are stored as REAL epoch seconds so ordering is sub-second precise.
"""
# endregion
# region Imports
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from clipstash.database import Base


# endregion
# region SQLAlchemy Model
class ClipboardEntryEntity(Base):
    """
    Model representing clipboard history entries.
    Attributes:
        id (int): Primary key, never reused.
        content (str): The clipboard content.
        content_hash (str): SHA-256 hex digest of the content.
        first_copied (float): Epoch seconds of the first observation.
        last_copied (float): Epoch seconds of the latest observation.
        copy_count (int): Number of observations.
    """

    __tablename__ = "clipboard_entries"
    __table_args__ = (
        Index("idx_last_copied", "last_copied"),
        Index("idx_first_copied", "first_copied"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    content_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    first_copied: Mapped[float] = mapped_column(Float, nullable=False)
    last_copied: Mapped[float] = mapped_column(Float, nullable=False)
    copy_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        return f"<ClipboardEntry(id={self.id}, copy_count={self.copy_count}, last_copied={self.last_copied})>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ClipboardEntryEntity):
            return NotImplemented
        return self.id == other.id and self.content_hash == other.content_hash

    def __hash__(self) -> int:
        return hash((self.id, self.content_hash))

    @property
    def model(self) -> "ClipboardEntry":
        return ClipboardEntry.model_validate(self)


# endregion
# region Pydantic Model
class ClipboardEntry(BaseModel):
    id: int = Field(..., description="The unique ID of the history entry")
    content: str = Field(..., description="The captured clipboard text")
    content_hash: str = Field(..., description="SHA-256 hex digest of the content")
    first_copied: float = Field(
        ..., description="Epoch seconds of the first time this content was copied"
    )
    last_copied: float = Field(
        ..., description="Epoch seconds of the most recent time this content was copied"
    )
    copy_count: int = Field(
        1, ge=1, description="Number of times this exact content was copied"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "id": 1,
                    "content": "Sample clipboard text",
                    "content_hash": "0f3c…",
                    "first_copied": 1704110400.0,
                    "last_copied": 1704114000.0,
                    "copy_count": 5,
                }
            ]
        },
        from_attributes=True,
        frozen=True,
    )

    @property
    def first_copied_at(self) -> datetime:
        return datetime.fromtimestamp(self.first_copied, tz=timezone.utc)

    @property
    def last_copied_at(self) -> datetime:
        return datetime.fromtimestamp(self.last_copied, tz=timezone.utc)

    @property
    def line_count(self) -> int:
        return len(self.content.split("\n"))

    @property
    def char_count(self) -> int:
        return len(self.content)


# endregion

__all__ = ["ClipboardEntryEntity", "ClipboardEntry"]
