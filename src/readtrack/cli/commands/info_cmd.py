# ABOUTME: The `readtrack info` command for displaying one book in detail.
# ABOUTME: Shows every stored field, including cover URLs and lending state.

from pathlib import Path

import click

from readtrack.cli.context import console, open_library, run
from readtrack.cli.options import load_settings, store_options
from readtrack.cli.render import book_detail


@click.command("info")
@click.argument("book_id")
@store_options
def info(book_id: str, backend: str | None, data_dir: Path | None) -> None:
    """Show details for a book by ID."""
    settings = load_settings(backend, data_dir)

    async def _get():
        async with open_library(settings) as library:
            user_id = await library.require_user()
            return await library.repository.get(user_id, book_id)

    console.print(book_detail(run(_get())))
