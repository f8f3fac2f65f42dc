# ABOUTME: Integration tests for a book's full lifecycle on the local backend.
# ABOUTME: Uses open_library with real SQLite and directory stores, including cover files on disk.

import asyncio
import base64
from pathlib import Path

import pytest

from readtrack.books.types import BookPatch, BookStatus, NewBook
from readtrack.cli.context import open_library
from readtrack.config import Settings
from readtrack.errors import BookNotFoundError
from tests.fixtures.fakes import JPEG_BYTES


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        backend="local",
        data_dir=tmp_path / "library",
        user_id="ana",
        cover_base_url="https://covers.example.com",
    )


class TestLocalLifecycle:
    """A book added, covered, lent, returned, and deleted through the local stack."""

    def test_full_lifecycle(self, settings: Settings, cover_photo: Path) -> None:
        async def scenario() -> None:
            async with open_library(settings) as library:
                user_id = await library.require_user()
                repository = library.repository

                book_id = await repository.add(
                    user_id,
                    NewBook(
                        title="The Name of the Rose",
                        author="Umberto Eco",
                        front_cover_uri=str(cover_photo),
                    ),
                )
                book = await repository.get(user_id, book_id)
                assert book.front_cover_uri.startswith(
                    f"https://covers.example.com/users/ana/books/{book_id}/front-"
                )
                stored = settings.covers_dir / "users" / "ana" / "books" / book_id
                assert [p.read_bytes() for p in stored.iterdir()] == [JPEG_BYTES]

                await repository.update(
                    user_id, book_id, BookPatch.of(status=BookStatus.READING)
                )
                await repository.lend(user_id, book_id, "Bruno", "2024-07-01")
                assert (await repository.stats(user_id)).reading == 1

                await repository.mark_returned(user_id, book_id)
                book = await repository.get(user_id, book_id)
                assert book.is_lent is False
                assert book.lent_to is None
                assert book.status is BookStatus.READING
                assert book.front_cover_uri is not None

                await repository.delete(user_id, book_id)
                with pytest.raises(BookNotFoundError):
                    await repository.get(user_id, book_id)

        asyncio.run(scenario())

    def test_data_survives_reopen(self, settings: Settings) -> None:
        """Books written in one session are listed in the next."""

        async def add() -> str:
            async with open_library(settings) as library:
                return await library.repository.add("ana", NewBook(title="Emma", author="Jane Austen"))

        async def list_titles() -> list[str]:
            async with open_library(settings) as library:
                return [b.title for b in await library.repository.list_all("ana")]

        asyncio.run(add())
        assert asyncio.run(list_titles()) == ["Emma"]

    def test_data_uri_cover(self, settings: Settings) -> None:
        """An in-memory photo is materialized, stored, and linked."""
        uri = "data:image/jpeg;base64," + base64.b64encode(JPEG_BYTES).decode()

        async def scenario() -> str | None:
            async with open_library(settings) as library:
                book_id = await library.repository.add(
                    "ana", NewBook(title="Emma", author="Jane Austen", back_cover_uri=uri)
                )
                return (await library.repository.get("ana", book_id)).back_cover_uri

        url = asyncio.run(scenario())
        assert url is not None
        assert "/back-" in url

    def test_users_do_not_see_each_other(self, settings: Settings) -> None:
        async def scenario() -> list:
            async with open_library(settings) as library:
                await library.repository.add("ana", NewBook(title="Emma", author="Jane Austen"))
                return await library.repository.list_all("bruno")

        assert asyncio.run(scenario()) == []
