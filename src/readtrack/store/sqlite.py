# ABOUTME: Local SQLite implementation of the RecordStore protocol.
# ABOUTME: Stores each book as a JSON document keyed by (user_id, book_id).

import json
import logging
import sqlite3
import uuid
from typing import Any

from readtrack.errors import BookNotFoundError, RecordStoreError

logger = logging.getLogger(__name__)


class SqliteRecordStore:
    """Wraps a sqlite3 connection and provides namespaced document CRUD.

    Every statement filters on user_id, so a book id is meaningless outside
    its owner's namespace. Methods are async to satisfy RecordStore, but run
    synchronously on the calling thread.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    async def list_records(self, user_id: str) -> list[tuple[str, dict[str, Any]]]:
        """Return (book_id, fields) for every book in the namespace, in insertion order."""
        try:
            cursor = self._conn.execute(
                "SELECT id, document FROM books WHERE user_id = ? ORDER BY rowid",
                (user_id,),
            )
            rows = cursor.fetchall()
        except sqlite3.Error as exc:
            raise RecordStoreError(f"Could not read books: {exc}") from exc
        return [(row["id"], json.loads(row["document"])) for row in rows]

    async def get_record(self, user_id: str, book_id: str) -> dict[str, Any] | None:
        """Retrieve one book's fields, or None if it does not exist."""
        try:
            cursor = self._conn.execute(
                "SELECT document FROM books WHERE user_id = ? AND id = ?",
                (user_id, book_id),
            )
            row = cursor.fetchone()
        except sqlite3.Error as exc:
            raise RecordStoreError(f"Could not read book {book_id}: {exc}") from exc
        return json.loads(row["document"]) if row else None

    async def create_record(self, user_id: str, fields: dict[str, Any]) -> str:
        """Insert a new document and return its generated id."""
        book_id = uuid.uuid4().hex
        try:
            self._conn.execute(
                "INSERT INTO books (user_id, id, document) VALUES (?, ?, ?)",
                (user_id, book_id, json.dumps(fields)),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise RecordStoreError(f"Could not save book: {exc}") from exc
        logger.debug("Created book %s for user %s", book_id, user_id)
        return book_id

    async def update_record(self, user_id: str, book_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into an existing document. None values are stored as null.

        Raises:
            BookNotFoundError: If the book does not exist in the namespace.
        """
        current = await self.get_record(user_id, book_id)
        if current is None:
            raise BookNotFoundError(book_id)

        current.update(fields)
        try:
            self._conn.execute(
                "UPDATE books SET document = ?, "
                "modified = strftime('%Y-%m-%dT%H:%M:%S', 'now') "
                "WHERE user_id = ? AND id = ?",
                (json.dumps(current), user_id, book_id),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise RecordStoreError(f"Could not update book {book_id}: {exc}") from exc
        logger.debug("Updated book %s fields %s", book_id, sorted(fields))

    async def delete_record(self, user_id: str, book_id: str) -> None:
        """Delete a document.

        Raises:
            BookNotFoundError: If the book does not exist in the namespace.
        """
        try:
            cursor = self._conn.execute(
                "DELETE FROM books WHERE user_id = ? AND id = ?",
                (user_id, book_id),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise RecordStoreError(f"Could not delete book {book_id}: {exc}") from exc

        if cursor.rowcount == 0:
            raise BookNotFoundError(book_id)
