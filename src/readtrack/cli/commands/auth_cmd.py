# ABOUTME: The `readtrack login`, `register`, `logout`, and `whoami` commands.
# ABOUTME: Sign-in is only meaningful with the firebase backend; the local backend has a fixed user.

from pathlib import Path

import click
from rich.markup import escape

from readtrack.auth import FirebaseIdentity
from readtrack.cli.context import console, open_library, run
from readtrack.cli.options import load_settings, store_options
from readtrack.errors import AuthError


@click.command("login")
@click.argument("email")
@click.password_option(confirmation_prompt=False)
@store_options
def login(email: str, password: str, backend: str | None, data_dir: Path | None) -> None:
    """Sign in with email and password."""
    settings = load_settings(backend, data_dir)

    async def _login():
        async with open_library(settings) as library:
            return await library.identity.login(email.strip(), password)

    session = run(_login())
    console.print(f"Signed in as [bold]{escape(session.email)}[/bold].")


@click.command("register")
@click.argument("email")
@click.password_option()
@click.option("--name", "display_name", default=None, help="Display name (default: part of the email before @).")
@store_options
def register(
    email: str,
    password: str,
    display_name: str | None,
    backend: str | None,
    data_dir: Path | None,
) -> None:
    """Create an account and sign in."""
    settings = load_settings(backend, data_dir)

    async def _register():
        async with open_library(settings) as library:
            if not isinstance(library.identity, FirebaseIdentity):
                raise AuthError("Registration is only available with the firebase backend.")
            return await library.identity.register(email.strip(), password, display_name)

    session = run(_register())
    console.print(f"Welcome, [bold]{escape(session.display_name or session.email)}[/bold]!")


@click.command("logout")
@store_options
def logout(backend: str | None, data_dir: Path | None) -> None:
    """Sign out and forget the saved session."""
    settings = load_settings(backend, data_dir)

    async def _logout() -> None:
        async with open_library(settings) as library:
            await library.identity.logout()

    run(_logout())
    console.print("Signed out.")


@click.command("whoami")
@store_options
def whoami(backend: str | None, data_dir: Path | None) -> None:
    """Show the user whose library commands act on."""
    settings = load_settings(backend, data_dir)

    async def _whoami() -> str:
        async with open_library(settings) as library:
            return await library.require_user()

    console.print(escape(run(_whoami())))
