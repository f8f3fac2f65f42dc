# ABOUTME: The `readtrack stats` command for reading-status counts.
# ABOUTME: Counts are derived from a fresh listing of the whole collection.

from pathlib import Path

import click
from rich.table import Table

from readtrack.cli.context import console, open_library, run
from readtrack.cli.options import load_settings, store_options


@click.command("stats")
@store_options
def stats(backend: str | None, data_dir: Path | None) -> None:
    """Show how many books you are reading, have read, and want to read."""
    settings = load_settings(backend, data_dir)

    async def _stats():
        async with open_library(settings) as library:
            user_id = await library.require_user()
            return await library.repository.stats(user_id)

    result = run(_stats())

    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Status", style="bold", width=12)
    table.add_column("Books", justify="right")
    table.add_row("Total", str(result.total))
    table.add_row("Reading", str(result.reading))
    table.add_row("Completed", str(result.completed))
    table.add_row("To Read", str(result.to_read))
    console.print(table)
