# ABOUTME: The `readtrack add` command for adding a book to the collection.
# ABOUTME: Cover photos may be local files; they are uploaded after the book is saved.

from datetime import datetime
from pathlib import Path

import click
from rich.markup import escape

from readtrack.books.types import BookStatus, NewBook
from readtrack.cli.context import console, open_library, run
from readtrack.cli.options import genre_type, load_settings, status_type, store_options


@click.command("add")
@click.option("--title", required=True, help="Book title.")
@click.option("--author", required=True, help="Book author.")
@click.option("--status", type=status_type, default=BookStatus.TO_READ.value, show_default=True)
@click.option("--genre", type=genre_type, default=None)
@click.option("--description", default=None)
@click.option("--front-cover", "front_cover", default=None, help="Front cover photo (path or URI).")
@click.option("--back-cover", "back_cover", default=None, help="Back cover photo (path or URI).")
@click.option("--lent-to", "lent_to", default=None, help="Mark as lent to this person.")
@click.option(
    "--return-by",
    "return_by",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Expected return date (YYYY-MM-DD), when lent.",
)
@store_options
def add(
    title: str,
    author: str,
    status: str,
    genre: str | None,
    description: str | None,
    front_cover: str | None,
    back_cover: str | None,
    lent_to: str | None,
    return_by: datetime | None,
    backend: str | None,
    data_dir: Path | None,
) -> None:
    """Add a book to your library."""
    if return_by is not None and not lent_to:
        raise click.UsageError("--return-by requires --lent-to.")

    book = NewBook(
        title=title.strip(),
        author=author.strip(),
        status=BookStatus(status),
        genre=genre,
        description=description,
        front_cover_uri=front_cover,
        back_cover_uri=back_cover,
        is_lent=bool(lent_to),
        lent_to=lent_to,
        expected_return_at=return_by.date().isoformat() if return_by else None,
    )
    settings = load_settings(backend, data_dir)

    async def _add():
        async with open_library(settings) as library:
            user_id = await library.require_user()
            book_id = await library.repository.add(user_id, book)
            return await library.repository.get(user_id, book_id)

    saved = run(_add())
    console.print(
        f"Added [bold]{escape(saved.title)}[/bold] by {escape(saved.author)} "
        f"[dim]({saved.id})[/dim]"
    )
    for label, requested, stored in (
        ("front", front_cover, saved.front_cover_uri),
        ("back", back_cover, saved.back_cover_uri),
    ):
        if requested and not stored:
            console.print(f"[yellow]The {label} cover could not be uploaded.[/yellow]")
