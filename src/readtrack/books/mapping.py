# ABOUTME: Converts stored record-store field maps into Book dataclasses.
# ABOUTME: Record fields use the camelCase names shared with the mobile client.

from typing import Any

from readtrack.books.types import Book, BookStatus

# Python attribute -> record field name
FIELD_NAMES: dict[str, str] = {
    "title": "title",
    "author": "author",
    "status": "status",
    "genre": "genre",
    "description": "description",
    "front_cover_uri": "frontCoverUri",
    "back_cover_uri": "backCoverUri",
    "is_lent": "isLent",
    "lent_to": "lentTo",
    "lent_at": "lentAt",
    "expected_return_at": "expectedReturnAt",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
    "user_id": "userId",
}

LENDING_FIELDS = ("lentTo", "lentAt", "expectedReturnAt")


def record_field(attribute: str) -> str:
    """Record field name for a Book attribute."""
    return FIELD_NAMES[attribute]


def record_to_book(book_id: str, record: dict[str, Any]) -> Book:
    """Convert a stored record into a Book.

    Missing optional fields become None. An unrecognized status falls back to
    to-read rather than failing the whole listing.
    """
    try:
        status = BookStatus(record.get("status", BookStatus.TO_READ))
    except ValueError:
        status = BookStatus.TO_READ

    return Book(
        id=book_id,
        title=record.get("title") or "",
        author=record.get("author") or "",
        status=status,
        created_at=record.get("createdAt") or "",
        updated_at=record.get("updatedAt") or "",
        genre=record.get("genre"),
        description=record.get("description"),
        front_cover_uri=record.get("frontCoverUri"),
        back_cover_uri=record.get("backCoverUri"),
        is_lent=bool(record.get("isLent", False)),
        lent_to=record.get("lentTo"),
        lent_at=record.get("lentAt"),
        expected_return_at=record.get("expectedReturnAt"),
        user_id=record.get("userId"),
    )
