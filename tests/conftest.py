# ABOUTME: Shared pytest fixtures for readtrack tests.
# ABOUTME: Provides a temporary SQLite record store, fake object store, and a repository over them.

from collections.abc import Iterator
from pathlib import Path

import pytest

from readtrack.books.covers import CoverUploader
from readtrack.books.repository import BookRepository
from readtrack.store.connection import open_store
from readtrack.store.sqlite import SqliteRecordStore
from tests.fixtures.fakes import JPEG_BYTES, FakeObjectStore, TickingClock


@pytest.fixture
def record_store(tmp_path: Path) -> Iterator[SqliteRecordStore]:
    """A SqliteRecordStore backed by a temporary database."""
    conn = open_store(tmp_path / "library.db")
    yield SqliteRecordStore(conn)
    conn.close()


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def repository(record_store: SqliteRecordStore, object_store: FakeObjectStore) -> BookRepository:
    """A BookRepository over the temporary record store and fake object store."""
    return BookRepository(record_store, CoverUploader(object_store), clock=TickingClock())


@pytest.fixture
def cover_photo(tmp_path: Path) -> Path:
    """A small file standing in for a captured cover photo."""
    path = tmp_path / "capture" / "front.jpg"
    path.parent.mkdir()
    path.write_bytes(JPEG_BYTES)
    return path
