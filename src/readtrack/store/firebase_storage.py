# ABOUTME: Firebase Storage (REST API) implementation of the ObjectStore protocol.
# ABOUTME: Uploads media and builds a token download URL from the upload response.

import logging
from urllib.parse import quote

from readtrack.errors import UploadFailedError
from readtrack.store.http import FirebaseRequestError, JsonClient

logger = logging.getLogger(__name__)

_STORAGE_BASE = "https://firebasestorage.googleapis.com/v0/b"


class FirebaseStorage:
    """Object store backed by a Firebase Storage bucket."""

    def __init__(self, client: JsonClient, bucket: str) -> None:
        self._client = client
        self._bucket = bucket

    def download_url(self, path: str, token: str) -> str:
        """The public download URL for an object with a download token."""
        return (
            f"{_STORAGE_BASE}/{self._bucket}/o/{quote(path, safe='')}"
            f"?alt=media&token={token}"
        )

    async def put_object(self, path: str, data: bytes, content_type: str) -> str:
        """Upload bytes to ``path`` and return a fetchable download URL.

        Raises:
            UploadFailedError: If the upload fails or the response carries no
                download token to build the URL from.
        """
        try:
            metadata = await self._client.request(
                "POST",
                f"{_STORAGE_BASE}/{self._bucket}/o",
                params={"uploadType": "media", "name": path},
                content=data,
                headers={"Content-Type": content_type},
            )
        except FirebaseRequestError as exc:
            raise UploadFailedError(f"Could not upload cover image: {exc}") from exc

        # Several comma-separated tokens may exist; any of them works.
        token = str(metadata.get("downloadTokens") or "").split(",")[0]
        if not token:
            raise UploadFailedError("Could not upload cover image: no download URL returned")

        logger.debug("Uploaded %d bytes to %s", len(data), path)
        return self.download_url(metadata.get("name", path), token)
