"""
clipstash.database

Shared SQLAlchemy declarative base and engine/session management for the history store.

Overview:
- Provides a single `declarative_base()` instance (`Base`) inherited by the ORM entities.
- Provides a utility class that builds a SQLite engine for a database file, applies the
    connection pragmas the store relies on, and hands out sessions.

Contents:
- Base:
    Singleton `declarative_base` instance.

- DatabaseSessionGenerator:
    - __init__(db_path: Path):
        Creates the engine for the given SQLite file.
    - get_session() -> Session:
        Creates a new synchronous SQLAlchemy session.
    - init_db():
        Creates all tables defined in the ORM models.
    - table_exists(name) -> bool:
        Whether a table is present without creating anything.
    - dispose():
        Closes pooled connections.

Design Notes:
- Every connection runs with `journal_mode=WAL` and `synchronous=NORMAL` so the
    daemon (single writer) and browser sessions (readers) never see torn writes and
    readers are not blocked by the writer.
- `busy_timeout` lets a reader wait out a checkpoint instead of failing immediately.
"""

from pathlib import Path

from sqlalchemy import engine, event, inspect
from sqlalchemy.orm import declarative_base, sessionmaker


Base = declarative_base()
"""Singleton `declarative_base` instance for ORM models."""


def _apply_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA busy_timeout=5000")
    finally:
        cursor.close()


class DatabaseSessionGenerator:
    """
    Utility class to generate SQLAlchemy sessions bound to a SQLite file.

    Attributes:
        db_path (Path): Location of the SQLite database file.
        engine (sqlalchemy.engine.Engine): The SQLAlchemy engine to bind sessions to.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.engine = engine.create_engine(f"sqlite:///{self.db_path.as_posix()}")
        event.listen(self.engine, "connect", _apply_pragmas)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def get_session(self):
        """
        Creates a new SQLAlchemy session bound to the configured engine.

        Returns:
            sqlalchemy.orm.Session: A new session instance.
        """
        return self._session_factory()

    def init_db(self):
        """
        Initializes the database by creating all tables defined in the ORM models.
        """
        Base.metadata.create_all(self.engine)

    def table_exists(self, name: str) -> bool:
        return inspect(self.engine).has_table(name)

    def dispose(self):
        self.engine.dispose()
