# ABOUTME: Client-side search and status filtering over an already-fetched collection.
# ABOUTME: Personal libraries are small, so a linear scan stands in for server-side queries.

from readtrack.books.types import Book, BookStatus


def search_books(books: list[Book], query: str) -> list[Book]:
    """Case-insensitive substring match against title or author.

    A blank query matches nothing. Input order is preserved.
    """
    needle = query.strip().casefold()
    if not needle:
        return []
    return [
        book
        for book in books
        if needle in book.title.casefold() or needle in book.author.casefold()
    ]


def filter_by_status(books: list[Book], status: BookStatus | None) -> list[Book]:
    """Books with the given status; all books when status is None."""
    if status is None:
        return list(books)
    return [book for book in books if book.status == status]
