# ABOUTME: The `readtrack ls` command for listing the collection.
# ABOUTME: Shows a Rich table of books, most recently updated first, optionally filtered by status.

from pathlib import Path

import click

from readtrack.books.search import filter_by_status
from readtrack.books.types import BookStatus
from readtrack.cli.context import console, open_library, run
from readtrack.cli.options import load_settings, status_type, store_options
from readtrack.cli.render import book_table


@click.command("ls")
@click.option("--status", "status_filter", type=status_type, default=None, help="Only books with this status.")
@click.option("--lent", "lent_only", is_flag=True, help="Only books that are lent out.")
@store_options
def ls(
    status_filter: str | None,
    lent_only: bool,
    backend: str | None,
    data_dir: Path | None,
) -> None:
    """List the books in your library."""
    settings = load_settings(backend, data_dir)

    async def _list():
        async with open_library(settings) as library:
            user_id = await library.require_user()
            return await library.repository.list_all(user_id)

    books = run(_list())
    total = len(books)
    books = filter_by_status(books, BookStatus(status_filter) if status_filter else None)
    if lent_only:
        books = [book for book in books if book.is_lent]

    if not books:
        if total:
            console.print("[yellow]No books match this filter.[/yellow]")
        else:
            console.print("[yellow]No books yet. Add one with `readtrack add`.[/yellow]")
        return

    console.print(book_table(books))
    console.print(f"\n[dim]{len(books)} of {total} book(s)[/dim]")
