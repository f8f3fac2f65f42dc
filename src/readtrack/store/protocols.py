# ABOUTME: RecordStore and ObjectStore protocols defining the remote storage contracts.
# ABOUTME: Any backend (SQLite, Firestore, Firebase Storage, a directory) implements these.

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RecordStore(Protocol):
    """Protocol for a per-user book record store.

    Records are flat field maps addressed as ``users/{user_id}/books/{book_id}``,
    so ownership is structural: a store never returns another user's record
    through a different user's namespace.
    """

    async def list_records(self, user_id: str) -> list[tuple[str, dict[str, Any]]]: ...

    async def get_record(self, user_id: str, book_id: str) -> dict[str, Any] | None: ...

    async def create_record(self, user_id: str, fields: dict[str, Any]) -> str: ...

    async def update_record(self, user_id: str, book_id: str, fields: dict[str, Any]) -> None: ...

    async def delete_record(self, user_id: str, book_id: str) -> None: ...


@runtime_checkable
class ObjectStore(Protocol):
    """Protocol for a binary object store that hands back fetchable URLs."""

    async def put_object(self, path: str, data: bytes, content_type: str) -> str: ...
