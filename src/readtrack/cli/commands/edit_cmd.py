# ABOUTME: The `readtrack edit` command for changing fields of an existing book.
# ABOUTME: Only the options given are changed; --clear-* options remove optional fields.

from pathlib import Path

import click
from rich.markup import escape

from readtrack.books.types import CLEAR, BookPatch, BookStatus, SetTo
from readtrack.cli.context import console, open_library, run
from readtrack.cli.options import genre_type, load_settings, status_type, store_options


@click.command("edit")
@click.argument("book_id")
@click.option("--title", default=None)
@click.option("--author", default=None)
@click.option("--status", type=status_type, default=None)
@click.option("--genre", type=genre_type, default=None)
@click.option("--description", default=None)
@click.option("--front-cover", "front_cover", default=None, help="New front cover (path or URI).")
@click.option("--back-cover", "back_cover", default=None, help="New back cover (path or URI).")
@click.option("--clear-genre", is_flag=True, help="Remove the genre.")
@click.option("--clear-description", is_flag=True, help="Remove the description.")
@store_options
def edit(
    book_id: str,
    title: str | None,
    author: str | None,
    status: str | None,
    genre: str | None,
    description: str | None,
    front_cover: str | None,
    back_cover: str | None,
    clear_genre: bool,
    clear_description: bool,
    backend: str | None,
    data_dir: Path | None,
) -> None:
    """Edit a book by ID."""
    if genre and clear_genre:
        raise click.UsageError("--genre and --clear-genre are mutually exclusive.")
    if description and clear_description:
        raise click.UsageError("--description and --clear-description are mutually exclusive.")

    patch = BookPatch()
    if title is not None:
        patch.title = SetTo(title.strip())
    if author is not None:
        patch.author = SetTo(author.strip())
    if status is not None:
        patch.status = SetTo(BookStatus(status))
    if genre is not None:
        patch.genre = SetTo(genre)
    elif clear_genre:
        patch.genre = CLEAR
    if description is not None:
        patch.description = SetTo(description)
    elif clear_description:
        patch.description = CLEAR
    if front_cover is not None:
        patch.front_cover_uri = SetTo(front_cover)
    if back_cover is not None:
        patch.back_cover_uri = SetTo(back_cover)

    if patch.is_empty:
        raise click.UsageError("Nothing to change. Pass at least one option.")

    settings = load_settings(backend, data_dir)

    async def _edit():
        async with open_library(settings) as library:
            user_id = await library.require_user()
            await library.repository.update(user_id, book_id, patch)
            return await library.repository.get(user_id, book_id)

    saved = run(_edit())
    console.print(f"Updated [bold]{escape(saved.title)}[/bold].")
