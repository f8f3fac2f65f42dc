# ABOUTME: Wires settings, identity, stores, and the repository together for CLI commands.
# ABOUTME: Also runs command coroutines and turns repository/auth errors into red messages.

import asyncio
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.markup import escape

from readtrack.auth import FirebaseIdentity, IdentityContext, StaticIdentity
from readtrack.books.covers import CoverUploader
from readtrack.books.repository import BookRepository
from readtrack.config import Settings
from readtrack.errors import AuthError, RepositoryError
from readtrack.store.connection import open_store
from readtrack.store.directory import DirectoryObjectStore
from readtrack.store.firebase_storage import FirebaseStorage
from readtrack.store.firestore import FirestoreRecordStore
from readtrack.store.http import FirebaseHttpClient
from readtrack.store.sqlite import SqliteRecordStore

T = TypeVar("T")

console = Console()


@dataclass
class Library:
    """Everything a command needs: the repository and who is asking."""

    repository: BookRepository
    identity: IdentityContext

    async def require_user(self) -> str:
        """The signed-in user's id.

        Raises:
            AuthError: If nobody is signed in.
        """
        await self.identity.ensure_fresh()
        user_id = self.identity.current_user_id
        if not user_id:
            raise AuthError("You are not logged in. Run `readtrack login` first.")
        return user_id


@asynccontextmanager
async def open_library(settings: Settings) -> AsyncIterator[Library]:
    """Build the repository for the configured backend and close it afterwards."""
    if settings.backend == "firebase":
        missing = settings.missing_firebase_settings()
        if missing:
            raise click.ClickException(f"Missing Firebase settings: {', '.join(missing)}")

        async with FirebaseHttpClient(timeout=settings.http_timeout) as auth_client:
            identity = FirebaseIdentity(
                auth_client,
                settings.firebase_api_key,
                project_id=settings.firebase_project_id,
                session_path=settings.session_path,
            )
            async with FirebaseHttpClient(
                token_provider=identity.id_token, timeout=settings.http_timeout
            ) as data_client:
                records = FirestoreRecordStore(data_client, settings.firebase_project_id)
                objects = FirebaseStorage(data_client, settings.firebase_storage_bucket)
                yield Library(BookRepository(records, CoverUploader(objects)), identity)
        return

    conn = open_store(settings.db_path)
    try:
        objects = DirectoryObjectStore(settings.covers_dir, settings.cover_base_url)
        repository = BookRepository(SqliteRecordStore(conn), CoverUploader(objects))
        yield Library(repository, StaticIdentity(settings.user_id))
    finally:
        conn.close()


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a command coroutine, reporting user-facing errors and exiting 1."""
    try:
        return asyncio.run(coro)
    except (RepositoryError, AuthError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise SystemExit(1) from exc
