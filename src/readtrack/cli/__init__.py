# ABOUTME: CLI package for readtrack, built on Click.
# ABOUTME: Defines the root command group and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from readtrack.cli.commands import (
    add_cmd,
    auth_cmd,
    edit_cmd,
    info_cmd,
    lend_cmd,
    ls_cmd,
    rm_cmd,
    search_cmd,
    stats_cmd,
)


@click.group()
@click.version_option(package_name="readtrack")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """readtrack - keep track of the books you own, read, and lend."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


cli.add_command(ls_cmd.ls)
cli.add_command(search_cmd.search)
cli.add_command(info_cmd.info)
cli.add_command(add_cmd.add)
cli.add_command(edit_cmd.edit)
cli.add_command(lend_cmd.lend)
cli.add_command(lend_cmd.return_book)
cli.add_command(rm_cmd.rm)
cli.add_command(stats_cmd.stats)
cli.add_command(auth_cmd.login)
cli.add_command(auth_cmd.register)
cli.add_command(auth_cmd.logout)
cli.add_command(auth_cmd.whoami)
