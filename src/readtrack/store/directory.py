# ABOUTME: Directory-backed ObjectStore for the local backend.
# ABOUTME: Writes blobs under a root directory and returns URLs under a public base URL.

import logging
from pathlib import Path, PurePosixPath
from urllib.parse import quote

from readtrack.errors import UploadFailedError

logger = logging.getLogger(__name__)


class DirectoryObjectStore:
    """Stores objects as files below ``root``.

    The directory is expected to be served at ``public_base_url`` (for example
    by a static file server), so the returned URLs are fetchable.
    """

    def __init__(self, root: Path, public_base_url: str) -> None:
        self._root = root
        self._base_url = public_base_url.rstrip("/")

    async def put_object(self, path: str, data: bytes, content_type: str) -> str:
        """Write data at ``root/path`` and return its public URL.

        Raises:
            UploadFailedError: If the path escapes the root or the write fails.
        """
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts:
            raise UploadFailedError(f"Invalid object path: {path}")

        target = self._root.joinpath(*relative.parts)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise UploadFailedError(f"Could not store cover image: {exc}") from exc

        logger.debug("Stored %d bytes (%s) at %s", len(data), content_type, target)
        return f"{self._base_url}/{quote(path)}"
