# ABOUTME: The `readtrack lend` and `readtrack return` commands for tracking lent books.
# ABOUTME: Returning a book clears who it was lent to, when, and the expected return date.

from datetime import datetime
from pathlib import Path

import click
from rich.markup import escape

from readtrack.cli.context import console, open_library, run
from readtrack.cli.options import load_settings, store_options


@click.command("lend")
@click.argument("book_id")
@click.option("--to", "lent_to", required=True, help="Who is borrowing the book.")
@click.option(
    "--return-by",
    "return_by",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Expected return date (YYYY-MM-DD).",
)
@store_options
def lend(
    book_id: str,
    lent_to: str,
    return_by: datetime | None,
    backend: str | None,
    data_dir: Path | None,
) -> None:
    """Mark a book as lent to someone."""
    settings = load_settings(backend, data_dir)
    expected = return_by.date().isoformat() if return_by else None

    async def _lend():
        async with open_library(settings) as library:
            user_id = await library.require_user()
            await library.repository.lend(user_id, book_id, lent_to, expected)
            return await library.repository.get(user_id, book_id)

    saved = run(_lend())
    console.print(
        f"Lent [bold]{escape(saved.title)}[/bold] to [cyan]{escape(saved.lent_to or '')}[/cyan]."
    )


@click.command("return")
@click.argument("book_id")
@store_options
def return_book(book_id: str, backend: str | None, data_dir: Path | None) -> None:
    """Mark a lent book as returned."""
    settings = load_settings(backend, data_dir)

    async def _return():
        async with open_library(settings) as library:
            user_id = await library.require_user()
            await library.repository.mark_returned(user_id, book_id)
            return await library.repository.get(user_id, book_id)

    saved = run(_return())
    console.print(f"[bold]{escape(saved.title)}[/bold] is back on your shelf.")
