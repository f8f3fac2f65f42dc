# ABOUTME: BookRepository: owner-scoped CRUD, listing, and stats over a RecordStore.
# ABOUTME: Add/update run as a two-step saga: commit the record, then best-effort cover upload and patch-back.

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

from readtrack.books.clock import Clock, next_timestamp, parse_timestamp, utc_now
from readtrack.books.covers import CoverUploader
from readtrack.books.mapping import record_field, record_to_book
from readtrack.books.sanitizer import sanitize_new_book, sanitize_patch
from readtrack.books.search import search_books
from readtrack.books.stats import summarize
from readtrack.books.types import (
    CLEAR,
    Book,
    BookPatch,
    BookStats,
    BookStatus,
    CoverSlot,
    NewBook,
    SetTo,
)
from readtrack.errors import (
    AccessDeniedError,
    BookNotFoundError,
    BookValidationError,
    OwnershipError,
    RecordStoreError,
)
from readtrack.store.protocols import RecordStore

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=UTC)


def _sort_key(book: Book) -> datetime:
    if not book.updated_at:
        return _EPOCH
    try:
        return parse_timestamp(book.updated_at)
    except ValueError:
        return _EPOCH


class BookRepository:
    """CRUD and queries over one user's book collection at a time.

    The caller passes ``user_id`` on every call; the repository keeps no
    session state and no cache, so every read goes to the record store.
    Concurrent writers to the same book are not detected: the last write wins.
    """

    def __init__(
        self,
        records: RecordStore,
        uploader: CoverUploader,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self._records = records
        self._uploader = uploader
        self._clock = clock

    async def list_all(self, user_id: str) -> list[Book]:
        """Return every book in the user's collection, most recently updated first.

        A user with no collection yet, or whose collection is not readable
        right now, gets an empty list rather than an error.

        Raises:
            RecordStoreError: For any other store failure.
        """
        try:
            records = await self._records.list_records(user_id)
        except AccessDeniedError:
            logger.info("Book collection for %s is not accessible; treating as empty", user_id)
            return []

        books = [record_to_book(book_id, record) for book_id, record in records]
        books.sort(key=_sort_key, reverse=True)
        return books

    async def get(self, user_id: str, book_id: str) -> Book:
        """Fetch one book.

        Raises:
            BookNotFoundError: If the book does not exist.
            OwnershipError: If the stored owner is a different user.
        """
        record = await self._records.get_record(user_id, book_id)
        if record is None:
            raise BookNotFoundError(book_id)

        book = record_to_book(book_id, record)
        if book.user_id is not None and book.user_id != user_id:
            raise OwnershipError(book_id)
        return book

    async def add(self, user_id: str, book: NewBook) -> str:
        """Add a book and return its id.

        The record is written first, without any local cover reference. Local
        covers are then uploaded under the new id and patched in. A failed
        upload leaves that cover unset; it never fails the add.

        Raises:
            BookValidationError: If title or author is blank, or status is invalid.
        """
        _validate_required(title=book.title, author=book.author)
        _validate_status(book.status)

        timestamp = next_timestamp(self._clock)
        sanitized = sanitize_new_book(book, timestamp=timestamp)
        fields = {
            **sanitized.fields,
            "userId": user_id,
            "createdAt": timestamp,
            "updatedAt": timestamp,
        }

        book_id = await self._records.create_record(user_id, fields)
        logger.info("Added book %s (%r) for user %s", book_id, book.title, user_id)

        if sanitized.pending_covers:
            await self._attach_covers(user_id, book_id, sanitized.pending_covers, timestamp)
        return book_id

    async def update(self, user_id: str, book_id: str, patch: BookPatch) -> None:
        """Apply a partial update to a book.

        Fields the patch leaves UNCHANGED keep their stored values; CLEAR
        writes null. Turning lending off clears all lending fields, and so does
        setting them on a book that is not lent. Local
        covers are uploaded after the record write, as in ``add``.

        Raises:
            BookNotFoundError: If the book does not exist.
            OwnershipError: If the stored owner is a different user.
            BookValidationError: If the patch would blank title or author.
        """
        _validate_patch(patch)
        current = await self.get(user_id, book_id)

        timestamp = next_timestamp(self._clock, current.updated_at or None)
        sanitized = sanitize_patch(patch, timestamp=timestamp, was_lent=current.is_lent)
        fields = {**sanitized.fields, "updatedAt": timestamp}

        await self._records.update_record(user_id, book_id, fields)
        logger.info("Updated book %s fields %s", book_id, sorted(sanitized.fields))

        if sanitized.pending_covers:
            await self._attach_covers(user_id, book_id, sanitized.pending_covers, timestamp)

    async def delete(self, user_id: str, book_id: str) -> None:
        """Permanently delete a book. Uploaded cover objects are left in place.

        Raises:
            BookNotFoundError: If the book does not exist.
        """
        await self._records.delete_record(user_id, book_id)
        logger.info("Deleted book %s for user %s", book_id, user_id)

    async def stats(self, user_id: str) -> BookStats:
        """Counts per reading status, computed from a fresh listing."""
        return summarize(await self.list_all(user_id))

    async def search(self, user_id: str, query: str) -> list[Book]:
        """Books whose title or author contains ``query``, case-insensitively."""
        return search_books(await self.list_all(user_id), query)

    async def lend(
        self,
        user_id: str,
        book_id: str,
        lent_to: str,
        expected_return_at: str | None = None,
    ) -> None:
        """Mark a book as lent to someone, starting a new lending episode now."""
        if not lent_to.strip():
            raise BookValidationError("Please enter who you lent the book to")
        await self.update(
            user_id,
            book_id,
            BookPatch(
                is_lent=SetTo(True),
                lent_to=SetTo(lent_to.strip()),
                lent_at=SetTo(next_timestamp(self._clock)),
                expected_return_at=SetTo(expected_return_at) if expected_return_at else CLEAR,
            ),
        )

    async def mark_returned(self, user_id: str, book_id: str) -> None:
        """Mark a lent book as returned, clearing all lending fields."""
        await self.update(user_id, book_id, BookPatch(is_lent=SetTo(False)))

    async def _attach_covers(
        self,
        user_id: str,
        book_id: str,
        pending: dict[CoverSlot, str],
        previous: str,
    ) -> None:
        """Upload pending covers concurrently and patch the resulting URLs in.

        This step is best effort: the record is already committed, so upload
        or patch failures are logged and the cover field stays as it was.
        """
        slots = list(pending)
        results = await asyncio.gather(
            *(self._uploader.upload(user_id, book_id, pending[slot], slot) for slot in slots),
            return_exceptions=True,
        )

        resolved: dict[str, Any] = {}
        for slot, result in zip(slots, results, strict=True):
            if isinstance(result, Exception):
                logger.warning(
                    "Cover upload failed for book %s (%s): %s", book_id, slot.value, result
                )
                continue
            # Cancellation and interpreter exits still abort the mutation.
            if isinstance(result, BaseException):
                raise result
            resolved[record_field(slot.attribute)] = result

        if not resolved:
            return

        resolved["updatedAt"] = next_timestamp(self._clock, previous)
        try:
            await self._records.update_record(user_id, book_id, resolved)
        except (BookNotFoundError, RecordStoreError, AccessDeniedError) as exc:
            logger.warning("Could not attach covers to book %s: %s", book_id, exc)


def _validate_required(**values: Any) -> None:
    for name, value in values.items():
        if not isinstance(value, str) or not value.strip():
            raise BookValidationError(f"Please fill in {name}")


def _validate_status(status: Any) -> None:
    try:
        BookStatus(status)
    except ValueError as exc:
        raise BookValidationError(f"Unknown status: {status}") from exc


def _validate_patch(patch: BookPatch) -> None:
    for name in ("title", "author", "status"):
        change = getattr(patch, name)
        if change is CLEAR:
            raise BookValidationError(f"{name.capitalize()} cannot be cleared")
    if isinstance(patch.title, SetTo):
        _validate_required(title=patch.title.value)
    if isinstance(patch.author, SetTo):
        _validate_required(author=patch.author.value)
    if isinstance(patch.status, SetTo):
        _validate_status(patch.status.value)
    if isinstance(patch.is_lent, SetTo) and not isinstance(patch.is_lent.value, bool):
        raise BookValidationError("Lending state must be true or false")
