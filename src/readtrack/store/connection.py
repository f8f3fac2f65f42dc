# ABOUTME: SQLite connection management for the local readtrack record store.
# ABOUTME: Opens or creates the database, applies the schema, and checks the schema version.

import sqlite3
from pathlib import Path

from readtrack.errors import RecordStoreError
from readtrack.store.schema import SCHEMA_V1, SCHEMA_VERSION


def _schema_exists(conn: sqlite3.Connection) -> bool:
    """Check if the schema has already been applied."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
    )
    return cursor.fetchone() is not None


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Read the current schema version from the database."""
    cursor = conn.execute("SELECT version FROM schema_version ORDER BY version DESC LIMIT 1")
    row = cursor.fetchone()
    return row[0] if row else 0


def open_store(path: Path) -> sqlite3.Connection:
    """Open or create the local record store database.

    Creates the database file and parent directories if they don't exist.
    Applies the schema on first creation. Sets WAL journal mode and
    sqlite3.Row factory for dict-like column access.

    Args:
        path: Path to the database file.

    Returns:
        A configured sqlite3.Connection.

    Raises:
        RecordStoreError: If the database was written by a newer readtrack
            with a schema this version does not understand.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")

    if not _schema_exists(conn):
        conn.executescript(SCHEMA_V1)

    version = get_schema_version(conn)
    if version > SCHEMA_VERSION:
        conn.close()
        raise RecordStoreError(
            f"{path} uses schema version {version}; this readtrack supports up to "
            f"{SCHEMA_VERSION}. Please upgrade readtrack."
        )

    return conn
