# ABOUTME: Cover upload pipeline: turns a local image reference into a durable remote URL.
# ABOUTME: Passes remote URLs through, materializes unreadable schemes to a temp copy, always cleans up.

import base64
import logging
import os
import tempfile
import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from urllib.parse import unquote_to_bytes, urlparse
from urllib.request import url2pathname

from readtrack.books.types import CoverSlot
from readtrack.errors import UploadFailedError
from readtrack.store.protocols import ObjectStore

logger = logging.getLogger(__name__)

COVER_CONTENT_TYPE = "image/jpeg"

_REMOTE_SCHEMES = {"http", "https"}

# Copies the content behind a URI into the given file.
Resolver = Callable[[str, Path], None]


def is_remote_uri(uri: str) -> bool:
    """Whether a cover reference is already a fetchable http(s) URL."""
    return urlparse(uri).scheme.lower() in _REMOTE_SCHEMES


def storage_path(user_id: str, book_id: str, slot: CoverSlot, token: str) -> str:
    """Object path for a cover: ``users/{uid}/books/{bookId}/{slot}-{token}.jpg``."""
    return f"users/{user_id}/books/{book_id}/{slot.value}-{token}.jpg"


def millisecond_token() -> str:
    return str(int(time.time() * 1000))


def decode_data_uri(uri: str, destination: Path) -> None:
    """Write the payload of a ``data:`` URI to ``destination``.

    Raises:
        ValueError: If the URI is not a well-formed data URI.
    """
    header, separator, payload = uri.partition(",")
    if not separator or not header.lower().startswith("data:"):
        raise ValueError("Malformed data URI")
    if header.lower().endswith(";base64"):
        data = base64.b64decode(payload, validate=True)
    else:
        data = unquote_to_bytes(payload)
    destination.write_bytes(data)


class CoverUploader:
    """Uploads cover photos for a book slot and returns their URLs.

    Plain paths and ``file://`` URIs are read in place. Any other scheme needs
    a resolver that copies the image into a temporary file first; ``data:`` is
    handled out of the box and the capture integration can register more
    (for example ``content``). The temporary copy is removed whether or not
    the upload succeeds.
    """

    def __init__(
        self,
        objects: ObjectStore,
        *,
        resolvers: Mapping[str, Resolver] | None = None,
        token_factory: Callable[[], str] = millisecond_token,
        temp_dir: Path | None = None,
    ) -> None:
        self._objects = objects
        self._resolvers: dict[str, Resolver] = {"data": decode_data_uri}
        self._resolvers.update(resolvers or {})
        self._token_factory = token_factory
        self._temp_dir = temp_dir

    async def upload(self, user_id: str, book_id: str, uri: str, slot: CoverSlot) -> str:
        """Store a cover image and return its remote URL.

        Idempotent for remote URLs: an http(s) URI is returned unchanged, since
        edit flows resubmit covers that were resolved earlier.

        Raises:
            UploadFailedError: If the image cannot be resolved, read or stored,
                whatever the underlying error.
        """
        if is_remote_uri(uri):
            return uri

        try:
            path = storage_path(user_id, book_id, slot, self._token_factory())
            with self._readable_copy(uri) as local_path:
                data = local_path.read_bytes()
                url = await self._objects.put_object(path, data, COVER_CONTENT_TYPE)
        except UploadFailedError:
            raise
        except Exception as exc:
            raise UploadFailedError(f"Could not upload cover image: {exc}") from exc

        logger.info("Uploaded %s cover for book %s", slot.value, book_id)
        return url

    @contextmanager
    def _readable_copy(self, uri: str) -> Iterator[Path]:
        """Yield a local path holding the image behind ``uri``."""
        parsed = urlparse(uri)
        scheme = parsed.scheme.lower()

        # Single letters are Windows drive letters, not schemes.
        if scheme == "" or len(scheme) == 1:
            yield Path(uri)
            return
        if scheme == "file":
            yield Path(url2pathname(parsed.path))
            return

        resolver = self._resolvers.get(scheme)
        if resolver is None:
            raise UploadFailedError(f"Unsupported image location: {scheme}://")

        fd, name = tempfile.mkstemp(suffix=".jpg", dir=self._temp_dir)
        os.close(fd)
        temp_path = Path(name)
        try:
            resolver(uri, temp_path)
            yield temp_path
        finally:
            temp_path.unlink(missing_ok=True)
