# ABOUTME: The `readtrack rm` command for deleting a book.
# ABOUTME: Deletion is permanent; asks for confirmation unless --yes is given.

from pathlib import Path

import click
from rich.markup import escape

from readtrack.cli.context import console, open_library, run
from readtrack.cli.options import load_settings, store_options


@click.command("rm")
@click.argument("book_id")
@click.option("--yes", "-y", "assume_yes", is_flag=True, help="Do not ask for confirmation.")
@store_options
def rm(book_id: str, assume_yes: bool, backend: str | None, data_dir: Path | None) -> None:
    """Delete a book by ID. This cannot be undone."""
    if not assume_yes:
        click.confirm(f"Delete book {book_id}? This cannot be undone", abort=True)

    settings = load_settings(backend, data_dir)

    async def _delete() -> None:
        async with open_library(settings) as library:
            user_id = await library.require_user()
            await library.repository.delete(user_id, book_id)

    run(_delete())
    console.print(f"Deleted book {escape(book_id)}.")
