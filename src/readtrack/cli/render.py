# ABOUTME: Rich rendering helpers shared by the listing and detail commands.
# ABOUTME: Builds book tables and the key/value detail view.

from rich.markup import escape
from rich.table import Table

from readtrack.books.types import Book, BookStatus

_STATUS_STYLES = {
    BookStatus.READING: "blue",
    BookStatus.COMPLETED: "green",
    BookStatus.TO_READ: "yellow",
}


def status_text(status: BookStatus) -> str:
    return f"[{_STATUS_STYLES[status]}]{status.label}[/{_STATUS_STYLES[status]}]"


def book_table(books: list[Book]) -> Table:
    """A table row per book: id, title, author, status, lending."""
    table = Table()
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Author")
    table.add_column("Status")
    table.add_column("Lent To")

    for book in books:
        table.add_row(
            book.id,
            escape(book.title),
            escape(book.author),
            status_text(book.status),
            escape(book.lent_to or "someone") if book.is_lent else "",
        )
    return table


def book_detail(book: Book) -> Table:
    """All fields of one book, skipping the empty optional ones."""
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=14)
    table.add_column("Value")

    table.add_row("ID", book.id)
    table.add_row("Title", escape(book.title))
    table.add_row("Author", escape(book.author))
    table.add_row("Status", status_text(book.status))
    if book.genre:
        table.add_row("Genre", escape(book.genre))
    if book.description:
        table.add_row("Description", escape(book.description))
    if book.front_cover_uri:
        table.add_row("Front Cover", escape(book.front_cover_uri))
    if book.back_cover_uri:
        table.add_row("Back Cover", escape(book.back_cover_uri))
    if book.is_lent:
        table.add_row("Lent To", escape(book.lent_to or "someone"))
        if book.lent_at:
            table.add_row("Lent On", book.lent_at[:10])
        if book.expected_return_at:
            table.add_row("Return By", escape(book.expected_return_at))
    table.add_row("Added", book.created_at)
    table.add_row("Updated", book.updated_at)
    return table
