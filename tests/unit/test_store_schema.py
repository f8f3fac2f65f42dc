# ABOUTME: Unit tests for local store schema creation and connection management.
# ABOUTME: Validates table structure, the owner index, WAL mode, and idempotent reopen.

import sqlite3
from pathlib import Path

import pytest

from readtrack.errors import RecordStoreError
from readtrack.store.connection import get_schema_version, open_store
from readtrack.store.schema import SCHEMA_VERSION


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    """Provide a temporary database path."""
    return tmp_path / "test_library.db"


class TestOpenStore:
    """Tests for open_store() connection factory."""

    def test_creates_database_file(self, db_path: Path) -> None:
        """Calling open_store creates a .db file at the given path."""
        conn = open_store(db_path)
        conn.close()
        assert db_path.exists()

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        """Creates parent directories if they don't exist."""
        nested = tmp_path / "deep" / "nested" / "library.db"
        conn = open_store(nested)
        conn.close()
        assert nested.exists()

    def test_creates_books_table(self, db_path: Path) -> None:
        """The books table holds one JSON document per owner and id."""
        conn = open_store(db_path)
        cursor = conn.execute("PRAGMA table_info(books)")
        columns = {row[1] for row in cursor.fetchall()}
        conn.close()
        assert columns == {"user_id", "id", "document", "created", "modified"}

    def test_creates_owner_index(self, db_path: Path) -> None:
        """Listing by owner is indexed."""
        conn = open_store(db_path)
        cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='index'")
        indexes = {row[0] for row in cursor.fetchall()}
        conn.close()
        assert "idx_books_user" in indexes

    def test_wal_mode(self, db_path: Path) -> None:
        """The connection uses WAL journaling."""
        conn = open_store(db_path)
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        conn.close()
        assert mode == "wal"

    def test_row_factory(self, db_path: Path) -> None:
        """Rows support access by column name."""
        conn = open_store(db_path)
        assert conn.row_factory is sqlite3.Row
        conn.close()

    def test_records_schema_version(self, db_path: Path) -> None:
        """A fresh database is at the current schema version."""
        conn = open_store(db_path)
        assert get_schema_version(conn) == SCHEMA_VERSION
        conn.close()

    def test_reopen_does_not_reapply_schema(self, db_path: Path) -> None:
        """Opening an existing database keeps its data and single version row."""
        conn = open_store(db_path)
        conn.execute(
            "INSERT INTO books (user_id, id, document) VALUES ('u', 'b', '{}')"
        )
        conn.commit()
        conn.close()

        conn = open_store(db_path)
        count = conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]
        versions = conn.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0]
        conn.close()
        assert count == 1
        assert versions == 1

    def test_primary_key_is_per_owner(self, db_path: Path) -> None:
        """The same id may exist in two owners' namespaces."""
        conn = open_store(db_path)
        conn.execute("INSERT INTO books (user_id, id, document) VALUES ('a', 'x', '{}')")
        conn.execute("INSERT INTO books (user_id, id, document) VALUES ('b', 'x', '{}')")
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO books (user_id, id, document) VALUES ('a', 'x', '{}')")
        conn.close()

    def test_newer_schema_is_refused(self, db_path: Path) -> None:
        """A database from a newer readtrack is not opened."""
        conn = open_store(db_path)
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION + 1,))
        conn.commit()
        conn.close()

        with pytest.raises(RecordStoreError, match="Please upgrade readtrack"):
            open_store(db_path)
