# ABOUTME: Unit tests for SqliteRecordStore document CRUD.
# ABOUTME: Validates namespacing by owner, field merging, and not-found handling.

import asyncio

import pytest

from readtrack.errors import BookNotFoundError
from readtrack.store.protocols import RecordStore
from readtrack.store.sqlite import SqliteRecordStore


class TestSqliteRecordStore:
    """Tests for SqliteRecordStore."""

    def test_satisfies_protocol(self, record_store: SqliteRecordStore) -> None:
        """The SQLite store is a RecordStore."""
        assert isinstance(record_store, RecordStore)

    def test_create_and_get(self, record_store: SqliteRecordStore) -> None:
        """A created document can be read back by id."""
        book_id = asyncio.run(record_store.create_record("alice", {"title": "Dune"}))
        assert asyncio.run(record_store.get_record("alice", book_id)) == {"title": "Dune"}

    def test_generated_ids_are_unique(self, record_store: SqliteRecordStore) -> None:
        """Each create gets a fresh id."""
        first = asyncio.run(record_store.create_record("alice", {}))
        second = asyncio.run(record_store.create_record("alice", {}))
        assert first != second

    def test_get_missing_returns_none(self, record_store: SqliteRecordStore) -> None:
        """Reading an unknown id returns None."""
        assert asyncio.run(record_store.get_record("alice", "nope")) is None

    def test_namespaces_are_isolated(self, record_store: SqliteRecordStore) -> None:
        """Another owner cannot see or list the document."""
        book_id = asyncio.run(record_store.create_record("alice", {"title": "Dune"}))
        assert asyncio.run(record_store.get_record("bob", book_id)) is None
        assert asyncio.run(record_store.list_records("bob")) == []

    def test_list_in_insertion_order(self, record_store: SqliteRecordStore) -> None:
        """Listing returns (id, fields) pairs in creation order."""
        a = asyncio.run(record_store.create_record("alice", {"title": "A"}))
        b = asyncio.run(record_store.create_record("alice", {"title": "B"}))
        listed = asyncio.run(record_store.list_records("alice"))
        assert listed == [(a, {"title": "A"}), (b, {"title": "B"})]

    def test_update_merges_fields(self, record_store: SqliteRecordStore) -> None:
        """Update changes named fields and keeps the rest."""
        book_id = asyncio.run(
            record_store.create_record("alice", {"title": "Dune", "author": "Herbert"})
        )
        asyncio.run(record_store.update_record("alice", book_id, {"title": "Dune Messiah"}))
        stored = asyncio.run(record_store.get_record("alice", book_id))
        assert stored == {"title": "Dune Messiah", "author": "Herbert"}

    def test_update_stores_null(self, record_store: SqliteRecordStore) -> None:
        """None is written as an explicit null."""
        book_id = asyncio.run(record_store.create_record("alice", {"genre": "Fantasy"}))
        asyncio.run(record_store.update_record("alice", book_id, {"genre": None}))
        assert asyncio.run(record_store.get_record("alice", book_id)) == {"genre": None}

    def test_update_missing_raises(self, record_store: SqliteRecordStore) -> None:
        """Updating an unknown id does not create it."""
        with pytest.raises(BookNotFoundError):
            asyncio.run(record_store.update_record("alice", "nope", {"title": "X"}))
        assert asyncio.run(record_store.list_records("alice")) == []

    def test_update_in_other_namespace_raises(self, record_store: SqliteRecordStore) -> None:
        """An owner cannot update another owner's document."""
        book_id = asyncio.run(record_store.create_record("alice", {"title": "Dune"}))
        with pytest.raises(BookNotFoundError):
            asyncio.run(record_store.update_record("bob", book_id, {"title": "Mine"}))

    def test_delete(self, record_store: SqliteRecordStore) -> None:
        """A deleted document is gone."""
        book_id = asyncio.run(record_store.create_record("alice", {"title": "Dune"}))
        asyncio.run(record_store.delete_record("alice", book_id))
        assert asyncio.run(record_store.get_record("alice", book_id)) is None

    def test_delete_missing_raises(self, record_store: SqliteRecordStore) -> None:
        """Deleting an unknown id raises BookNotFoundError."""
        with pytest.raises(BookNotFoundError) as excinfo:
            asyncio.run(record_store.delete_record("alice", "nope"))
        assert excinfo.value.book_id == "nope"
