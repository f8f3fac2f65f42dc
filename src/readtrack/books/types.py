# ABOUTME: Core data structures for the book collection: Book, NewBook, and BookPatch.
# ABOUTME: BookPatch carries typed per-field changes (UNCHANGED, SetTo, CLEAR).

from dataclasses import dataclass, fields
from enum import Enum, StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

GENRES = (
    "Fiction",
    "Mystery",
    "Science Fiction",
    "Fantasy",
    "Romance",
    "Thriller",
    "Horror",
    "Biography",
    "History",
    "Self-Help",
    "Non-Fiction",
    "Poetry",
    "Drama",
    "Science",
    "Adventure",
    "Other",
)


class BookStatus(StrEnum):
    """Reading status of a book."""

    TO_READ = "to-read"
    READING = "reading"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        """Human-readable label for display."""
        return {
            BookStatus.TO_READ: "To Read",
            BookStatus.READING: "Reading",
            BookStatus.COMPLETED: "Completed",
        }[self]


class CoverSlot(StrEnum):
    """Which side of the book a cover photo shows."""

    FRONT = "front"
    BACK = "back"

    @property
    def attribute(self) -> str:
        """The Book attribute holding this slot's URI."""
        return f"{self.value}_cover_uri"


@dataclass
class Book:
    """A persisted book in a user's collection.

    Cover URIs are always remote URLs once stored. Lending fields are only
    meaningful while is_lent is True.
    """

    id: str
    title: str
    author: str
    status: BookStatus
    created_at: str
    updated_at: str
    genre: str | None = None
    description: str | None = None
    front_cover_uri: str | None = None
    back_cover_uri: str | None = None
    is_lent: bool = False
    lent_to: str | None = None
    lent_at: str | None = None
    expected_return_at: str | None = None
    user_id: str | None = None

    def cover(self, slot: CoverSlot) -> str | None:
        return getattr(self, slot.attribute)


@dataclass
class NewBook:
    """Input for adding a book. Cover URIs may still be local references."""

    title: str
    author: str
    status: BookStatus = BookStatus.TO_READ
    genre: str | None = None
    description: str | None = None
    front_cover_uri: str | None = None
    back_cover_uri: str | None = None
    is_lent: bool = False
    lent_to: str | None = None
    lent_at: str | None = None
    expected_return_at: str | None = None


class Marker(Enum):
    """Field states in a patch that carry no value."""

    UNCHANGED = "unchanged"
    CLEAR = "clear"

    def __repr__(self) -> str:
        return self.name


UNCHANGED = Marker.UNCHANGED
CLEAR = Marker.CLEAR


@dataclass(frozen=True)
class SetTo(Generic[T]):
    """Set a field to a concrete value."""

    value: T


FieldChange = Marker | SetTo[Any]


@dataclass
class BookPatch:
    """A partial update to a book.

    Every field defaults to UNCHANGED, so a patch only touches what the caller
    names. CLEAR writes an explicit null, which matters for the lending fields.
    """

    title: FieldChange = UNCHANGED
    author: FieldChange = UNCHANGED
    status: FieldChange = UNCHANGED
    genre: FieldChange = UNCHANGED
    description: FieldChange = UNCHANGED
    front_cover_uri: FieldChange = UNCHANGED
    back_cover_uri: FieldChange = UNCHANGED
    is_lent: FieldChange = UNCHANGED
    lent_to: FieldChange = UNCHANGED
    lent_at: FieldChange = UNCHANGED
    expected_return_at: FieldChange = UNCHANGED

    @classmethod
    def of(cls, **values: Any) -> "BookPatch":
        """Build a patch from plain values: None clears, omitted stays unchanged.

        Raises:
            TypeError: If a keyword does not name a patchable field.
        """
        changes = {name: CLEAR if value is None else SetTo(value) for name, value in values.items()}
        return cls(**changes)

    def changes(self) -> dict[str, FieldChange]:
        """Return the fields this patch touches, in declaration order."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNCHANGED
        }

    @property
    def is_empty(self) -> bool:
        return not self.changes()


@dataclass
class BookStats:
    """Counts of books per reading status."""

    total: int = 0
    reading: int = 0
    completed: int = 0
    to_read: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "reading": self.reading,
            "completed": self.completed,
            "toRead": self.to_read,
        }
