# ABOUTME: Derives reading-status counts from a fetched book collection.
# ABOUTME: Nothing is persisted; stats are recomputed from the current listing every time.

from collections import Counter
from collections.abc import Iterable

from readtrack.books.types import Book, BookStats, BookStatus


def summarize(books: Iterable[Book]) -> BookStats:
    """Count books per status. An empty collection gives all zeros."""
    books = list(books)
    counts = Counter(book.status for book in books)
    return BookStats(
        total=len(books),
        reading=counts[BookStatus.READING],
        completed=counts[BookStatus.COMPLETED],
        to_read=counts[BookStatus.TO_READ],
    )
