from hashlib import sha256
from pathlib import Path

import pytest

from clipstash.database import DatabaseSessionGenerator
from clipstash.errors import StoreNotInitializedError
from clipstash.store import SECONDS_PER_DAY, HistoryStore, hash_content


def test_hash_content_is_sha256_hex():
    assert hash_content("hello") == sha256(b"hello").hexdigest()
    assert len(hash_content("")) == 64


def test_upsert_new_content(store: HistoryStore):
    """A first observation creates a row with count 1 and equal timestamps."""
    entry = store.upsert("hello")
    assert entry.id is not None
    assert entry.content == "hello"
    assert entry.content_hash == hash_content("hello")
    assert entry.copy_count == 1
    assert entry.first_copied == entry.last_copied
    assert store.count() == 1


def test_upsert_existing_content_updates_row(store: HistoryStore):
    first = store.upsert("hello")
    second = store.upsert("hello")
    assert second.id == first.id
    assert second.copy_count == 2
    assert second.first_copied == first.first_copied
    assert second.last_copied > first.last_copied
    assert store.count() == 1


def test_dedup_and_recency_order(store: HistoryStore):
    """hello, hello, world, hello -> two rows, hello (count 2) ahead of world."""
    store.upsert("hello")
    store.upsert("hello")
    assert [(e.content, e.copy_count) for e in store.list_all()] == [("hello", 2)]

    store.upsert("world")
    store.upsert("hello")
    entries = store.list_all()
    assert [e.content for e in entries] == ["hello", "world"]
    assert entries[0].copy_count == 3
    assert entries[1].copy_count == 1


def test_reupserted_row_moves_to_front(store: HistoryStore):
    for content in ("a", "b", "c"):
        store.upsert(content)
    assert [e.content for e in store.list_all()] == ["c", "b", "a"]
    store.upsert("a")
    assert [e.content for e in store.list_all()] == ["a", "c", "b"]


def test_equal_timestamps_break_ties_by_id(db_path: Path):
    with HistoryStore.open(db_path, clock=lambda: 100.0) as history:
        history.upsert("older")
        history.upsert("newer")
        assert [e.content for e in history.list_all()] == ["newer", "older"]


def test_list_all_empty(store: HistoryStore):
    assert store.list_all() == []
    assert store.latest() is None
    assert store.count() == 0


def test_content_is_stored_verbatim(store: HistoryStore):
    content = "  héllo 🌍\r\n\tsecond line  "
    entry = store.upsert(content)
    assert store.get(entry.id).content == content


def test_latest_and_get(store: HistoryStore):
    store.upsert("one")
    two = store.upsert("two")
    assert store.latest().content == "two"
    assert store.get(two.id) == two
    assert store.get(9999) is None


def test_delete_by_id(store: HistoryStore):
    keep = store.upsert("keep")
    drop = store.upsert("drop")
    assert store.delete_by_id(drop.id) == 1
    assert store.delete_by_id(drop.id) == 0
    assert [e.id for e in store.list_all()] == [keep.id]


def test_delete_all(store: HistoryStore):
    for content in ("a", "b", "c"):
        store.upsert(content)
    assert store.delete_all() == 3
    assert store.count() == 0


def test_delete_older_than_uses_first_copied(store: HistoryStore, clock):
    store.upsert("old")
    clock.advance(40 * SECONDS_PER_DAY)
    store.upsert("new")
    # Re-copying old content does not reset its age.
    store.upsert("old")

    assert store.delete_older_than(30) == 1
    assert [e.content for e in store.list_all()] == ["new"]


def test_writes_are_visible_to_another_handle(store: HistoryStore, db_path: Path):
    """A second process-style handle (the browser) sees committed upserts."""
    with HistoryStore.open(db_path, create=False) as reader:
        assert reader.count() == 0
        store.upsert("shared")
        assert [e.content for e in reader.list_all()] == ["shared"]


def test_size_bytes(store: HistoryStore):
    store.upsert("x" * 1000)
    assert store.size_bytes() > 0


def test_open_without_create_on_missing_file(tmp_path: Path):
    path = tmp_path / "missing.db"
    with pytest.raises(StoreNotInitializedError):
        HistoryStore.open(path, create=False)
    assert not path.exists()


def test_open_without_create_on_missing_table(tmp_path: Path):
    path = tmp_path / "empty.db"
    sessions = DatabaseSessionGenerator(path)
    with sessions.engine.connect():
        pass
    sessions.dispose()
    assert path.exists()

    with pytest.raises(StoreNotInitializedError):
        HistoryStore.open(path, create=False)


def test_open_creates_parent_directories(tmp_path: Path):
    path = tmp_path / "a" / "b" / "clipboard.db"
    with HistoryStore.open(path) as history:
        assert history.exists()
    assert path.is_file()
