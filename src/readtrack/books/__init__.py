# ABOUTME: Public API for the book collection layer.
# ABOUTME: Exports the repository, cover pipeline, data types, and pure derivations.

from readtrack.books.covers import CoverUploader, is_remote_uri
from readtrack.books.repository import BookRepository
from readtrack.books.search import filter_by_status, search_books
from readtrack.books.stats import summarize
from readtrack.books.types import (
    CLEAR,
    GENRES,
    UNCHANGED,
    Book,
    BookPatch,
    BookStats,
    BookStatus,
    CoverSlot,
    NewBook,
    SetTo,
)

__all__ = [
    "CLEAR",
    "GENRES",
    "UNCHANGED",
    "Book",
    "BookPatch",
    "BookRepository",
    "BookStats",
    "BookStatus",
    "CoverSlot",
    "CoverUploader",
    "NewBook",
    "SetTo",
    "filter_by_status",
    "is_remote_uri",
    "search_books",
    "summarize",
]
