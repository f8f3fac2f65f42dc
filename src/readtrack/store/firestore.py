# ABOUTME: Cloud Firestore (REST API) implementation of the RecordStore protocol.
# ABOUTME: Books live at users/{uid}/books/{bookId}; HTTP failures map to repository errors.

import logging
from typing import Any
from urllib.parse import quote

from readtrack.errors import AccessDeniedError, BookNotFoundError, RecordStoreError
from readtrack.store.firestore_codec import decode_fields, document_id, encode_fields
from readtrack.store.http import FirebaseRequestError, JsonClient

logger = logging.getLogger(__name__)

_FIRESTORE_BASE = "https://firestore.googleapis.com/v1"
_PAGE_SIZE = 300
_EXISTS_PRECONDITION = ("currentDocument.exists", "true")


class FirestoreRecordStore:
    """Record store backed by the Firestore REST API.

    Uses a dependency-injected JsonClient so tests can run against canned
    responses. Partial updates use an update mask, so fields not named in an
    update are left alone server-side.
    """

    def __init__(
        self,
        client: JsonClient,
        project_id: str,
        database: str = "(default)",
    ) -> None:
        self._client = client
        self._documents_url = (
            f"{_FIRESTORE_BASE}/projects/{project_id}/databases/{database}/documents"
        )

    def collection_url(self, user_id: str) -> str:
        return f"{self._documents_url}/users/{quote(user_id, safe='')}/books"

    def document_url(self, user_id: str, book_id: str) -> str:
        return f"{self.collection_url(user_id)}/{quote(book_id, safe='')}"

    async def list_records(self, user_id: str) -> list[tuple[str, dict[str, Any]]]:
        """Return every document in the user's books collection, following pagination.

        An empty or not-yet-created collection yields an empty list.
        """
        records: list[tuple[str, dict[str, Any]]] = []
        page_token: str | None = None

        while True:
            params = {"pageSize": str(_PAGE_SIZE)}
            if page_token:
                params["pageToken"] = page_token
            try:
                data = await self._client.request(
                    "GET", self.collection_url(user_id), params=params
                )
            except FirebaseRequestError as exc:
                if exc.status_code == 404:
                    return []
                raise _translate(exc, "Could not read books") from exc

            for document in data.get("documents", []):
                records.append((document_id(document), decode_fields(document.get("fields", {}))))

            page_token = data.get("nextPageToken")
            if not page_token:
                return records

    async def get_record(self, user_id: str, book_id: str) -> dict[str, Any] | None:
        try:
            document = await self._client.request("GET", self.document_url(user_id, book_id))
        except FirebaseRequestError as exc:
            if exc.status_code == 404:
                return None
            raise _translate(exc, f"Could not read book {book_id}") from exc
        return decode_fields(document.get("fields", {}))

    async def create_record(self, user_id: str, fields: dict[str, Any]) -> str:
        """Create a document with a server-assigned id and return the id."""
        try:
            document = await self._client.request(
                "POST",
                self.collection_url(user_id),
                json={"fields": encode_fields(fields)},
            )
        except FirebaseRequestError as exc:
            raise _translate(exc, "Could not save book") from exc

        book_id = document_id(document)
        logger.debug("Created Firestore document %s for user %s", book_id, user_id)
        return book_id

    async def update_record(self, user_id: str, book_id: str, fields: dict[str, Any]) -> None:
        """Patch only the named fields of an existing document.

        Raises:
            BookNotFoundError: If the document does not exist.
        """
        params = [("updateMask.fieldPaths", name) for name in fields]
        params.append(_EXISTS_PRECONDITION)
        try:
            await self._client.request(
                "PATCH",
                self.document_url(user_id, book_id),
                params=params,
                json={"fields": encode_fields(fields)},
            )
        except FirebaseRequestError as exc:
            if exc.status_code == 404:
                raise BookNotFoundError(book_id) from exc
            raise _translate(exc, f"Could not update book {book_id}") from exc

    async def delete_record(self, user_id: str, book_id: str) -> None:
        """Delete a document, failing if it does not exist.

        Raises:
            BookNotFoundError: If the document does not exist.
        """
        try:
            await self._client.request(
                "DELETE",
                self.document_url(user_id, book_id),
                params=[_EXISTS_PRECONDITION],
            )
        except FirebaseRequestError as exc:
            if exc.status_code == 404:
                raise BookNotFoundError(book_id) from exc
            raise _translate(exc, f"Could not delete book {book_id}") from exc


def _translate(exc: FirebaseRequestError, action: str) -> Exception:
    """Map a Firestore REST failure to the repository error taxonomy."""
    if exc.status_code in (401, 403) or exc.reason == "PERMISSION_DENIED":
        return AccessDeniedError(f"{action}: access denied")
    return RecordStoreError(f"{action}: {exc}")
