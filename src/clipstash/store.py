# region Docstring
"""
clipstash.store
Durable, deduplicated clipboard history backed by SQLite.
Overview:
- HistoryStore owns the on-disk schema and is the only code that issues SQL against it.
- Deduplication is keyed by the SHA-256 digest of the content; the UNIQUE constraint on
    content_hash makes a second row for the same content impossible.
- Upsert is a single INSERT ... ON CONFLICT DO UPDATE statement inside one transaction,
    so a concurrent reader sees either the pre- or post-state of the row.
Contents:
- Functions:
    - hash_content(content) -> str
- Classes:
    - HistoryStore:
        open(), exists(), upsert(), list_all(), get(), latest(), delete_by_id(),
        delete_all(), delete_older_than(), count(), size_bytes(), close().
Design notes:
- Reads return immutable ClipboardEntry models, never live ORM entities.
- A missing database is reported as StoreNotInitializedError, never as an empty history.
"""
# endregion
# region Imports
import logging
import time
from hashlib import sha256
from pathlib import Path
from typing import Callable, Optional

from sqlalchemy import delete, func, select, text
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from clipstash.database import DatabaseSessionGenerator
from clipstash.errors import StoreNotInitializedError, StoreReadError, StoreWriteError
from clipstash.models import ClipboardEntry, ClipboardEntryEntity

# endregion

logger = logging.getLogger("clipstash").getChild("store")

SECONDS_PER_DAY = 86400


def hash_content(content: str) -> str:
    """
    Compute the deduplication key of a clipboard value.

    Args:
        content (str): The clipboard text.

    Returns:
        str: 64 character lowercase SHA-256 hex digest of the UTF-8 bytes.
    """
    return sha256(content.encode("utf-8", "surrogatepass")).hexdigest()


class HistoryStore:
    """
    Clipboard history persisted in a SQLite file.

    Attributes:
        path (Path): Location of the database file.
    """

    TABLE = ClipboardEntryEntity.__tablename__

    def __init__(
        self,
        path: Path,
        sessions: DatabaseSessionGenerator,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path)
        self._db = sessions
        self._clock = clock

    # region Lifecycle

    @classmethod
    def open(
        cls,
        path: Path,
        create: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> "HistoryStore":
        """
        Open the store at `path`.

        Args:
            path (Path): Database file location.
            create (bool): Create the file and schema when absent. The browser passes
                False so it fails fast on a missing store.
            clock (Callable[[], float]): Source of epoch seconds for timestamps.

        Raises:
            StoreNotInitializedError: `create` is False and the file or table is absent.
            StoreWriteError: The file or schema could not be created.
        """
        path = Path(path).expanduser()
        if not create and not path.is_file():
            raise StoreNotInitializedError(f"Clipboard history database not found at {path}")

        if create:
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StoreWriteError(
                    f"Could not create database directory {path.parent}", original_error=e
                )

        sessions = DatabaseSessionGenerator(path)
        try:
            if create:
                sessions.init_db()
            elif not sessions.table_exists(cls.TABLE):
                sessions.dispose()
                raise StoreNotInitializedError(
                    f"Clipboard history database at {path} has no {cls.TABLE} table"
                )
        except SQLAlchemyError as e:
            sessions.dispose()
            if create:
                raise StoreWriteError(f"Could not initialize database at {path}", original_error=e)
            raise StoreNotInitializedError(f"Could not open database at {path}", original_error=e)

        logger.debug(f"Opened history store at {path}")
        return cls(path, sessions, clock=clock)

    def exists(self) -> bool:
        """Whether the backing file is present and the table is reachable."""
        if not self.path.is_file():
            return False
        try:
            return self._db.table_exists(self.TABLE)
        except SQLAlchemyError:
            return False

    def close(self) -> None:
        self._db.dispose()

    def __enter__(self) -> "HistoryStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # endregion
    # region Writes

    def upsert(self, content: str) -> ClipboardEntry:
        """
        Record one observation of `content`.

        A new content value is inserted with copy_count 1 and both timestamps set to now.
        A known value gets last_copied = now and copy_count + 1.

        Raises:
            StoreWriteError: The transaction failed; nothing was changed.
        """
        content_hash = hash_content(content)
        now = self._clock()
        stmt = sqlite_insert(ClipboardEntryEntity).values(
            content=content,
            content_hash=content_hash,
            first_copied=now,
            last_copied=now,
            copy_count=1,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["content_hash"],
            set_={
                "last_copied": stmt.excluded.last_copied,
                "copy_count": ClipboardEntryEntity.copy_count + 1,
            },
        )
        try:
            with self._db.get_session() as session, session.begin():
                session.execute(stmt)
                entity = session.execute(
                    select(ClipboardEntryEntity).where(
                        ClipboardEntryEntity.content_hash == content_hash
                    )
                ).scalar_one()
                entry = entity.model
        except SQLAlchemyError as e:
            raise StoreWriteError("Failed to record clipboard entry", original_error=e)

        logger.debug(f"Upserted entry id={entry.id} copy_count={entry.copy_count}")
        return entry

    def delete_by_id(self, entry_id: int) -> int:
        """Delete one entry. Returns the number of rows removed (0 or 1)."""
        return self._delete(
            delete(ClipboardEntryEntity).where(ClipboardEntryEntity.id == entry_id)
        )

    def delete_all(self) -> int:
        """Delete every entry. Returns the number of rows removed."""
        return self._delete(delete(ClipboardEntryEntity))

    def delete_older_than(self, days: int) -> int:
        """Delete entries first copied more than `days` days ago."""
        cutoff = self._clock() - days * SECONDS_PER_DAY
        return self._delete(
            delete(ClipboardEntryEntity).where(ClipboardEntryEntity.first_copied < cutoff)
        )

    def _delete(self, stmt) -> int:
        try:
            with self._db.get_session() as session, session.begin():
                result = session.execute(stmt)
                removed = result.rowcount or 0
        except SQLAlchemyError as e:
            raise StoreWriteError("Failed to delete clipboard entries", original_error=e)
        logger.info(f"Deleted {removed} clipboard entries")
        return removed

    # endregion
    # region Reads

    def list_all(self) -> list[ClipboardEntry]:
        """Every entry, most recently copied first (ties: later insertion first)."""
        stmt = select(ClipboardEntryEntity).order_by(
            ClipboardEntryEntity.last_copied.desc(), ClipboardEntryEntity.id.desc()
        )
        try:
            with self._db.get_session() as session:
                return [entity.model for entity in session.execute(stmt).scalars()]
        except SQLAlchemyError as e:
            raise StoreReadError("Failed to read clipboard history", original_error=e)

    def get(self, entry_id: int) -> Optional[ClipboardEntry]:
        try:
            with self._db.get_session() as session:
                entity = session.get(ClipboardEntryEntity, entry_id)
                return entity.model if entity else None
        except SQLAlchemyError as e:
            raise StoreReadError(f"Failed to read entry {entry_id}", original_error=e)

    def latest(self) -> Optional[ClipboardEntry]:
        stmt = (
            select(ClipboardEntryEntity)
            .order_by(ClipboardEntryEntity.last_copied.desc(), ClipboardEntryEntity.id.desc())
            .limit(1)
        )
        try:
            with self._db.get_session() as session:
                entity = session.execute(stmt).scalar_one_or_none()
                return entity.model if entity else None
        except SQLAlchemyError as e:
            raise StoreReadError("Failed to read latest entry", original_error=e)

    def count(self) -> int:
        try:
            with self._db.get_session() as session:
                return session.execute(
                    select(func.count()).select_from(ClipboardEntryEntity)
                ).scalar_one()
        except SQLAlchemyError as e:
            raise StoreReadError("Failed to count entries", original_error=e)

    def size_bytes(self) -> int:
        """Database size as page_count * page_size."""
        try:
            with self._db.get_session() as session:
                return session.execute(
                    text(
                        "SELECT page_count * page_size FROM pragma_page_count(), pragma_page_size()"
                    )
                ).scalar_one()
        except SQLAlchemyError as e:
            raise StoreReadError("Failed to read database size", original_error=e)

    # endregion


__all__ = ["HistoryStore", "hash_content"]
