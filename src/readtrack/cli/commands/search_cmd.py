# ABOUTME: The `readtrack search` command for finding books by title or author.
# ABOUTME: Fetches the collection once and matches case-insensitively on the client.

from pathlib import Path

import click

from readtrack.cli.context import console, open_library, run
from readtrack.cli.options import load_settings, store_options
from readtrack.cli.render import book_table


@click.command("search")
@click.argument("query")
@store_options
def search(query: str, backend: str | None, data_dir: Path | None) -> None:
    """Search your library by title or author."""
    if not query.strip():
        raise click.UsageError("Search query cannot be empty.")

    settings = load_settings(backend, data_dir)

    async def _search():
        async with open_library(settings) as library:
            user_id = await library.require_user()
            return await library.repository.search(user_id, query)

    results = run(_search())

    if not results:
        console.print("[yellow]No books found. Try searching with different keywords.[/yellow]")
        return

    console.print(book_table(results))
    plural = "s" if len(results) != 1 else ""
    console.print(f"\n[dim]Found {len(results)} book{plural}[/dim]")
