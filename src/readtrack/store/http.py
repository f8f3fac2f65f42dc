# ABOUTME: Async HTTP client abstraction for the Firebase REST APIs.
# ABOUTME: Adds auth and User-Agent headers, decodes Google error bodies, injectable transport for testing.

import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import httpx

from readtrack import __version__

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


class FirebaseRequestError(Exception):
    """Raised when a Firebase REST call fails or cannot be sent.

    ``status_code`` is 0 when no response was received. ``reason`` is the
    Google error status (``NOT_FOUND``, ``PERMISSION_DENIED``) or, for the
    Identity Toolkit, the error code (``EMAIL_EXISTS``).
    """

    def __init__(self, status_code: int, reason: str, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


@runtime_checkable
class JsonClient(Protocol):
    """Protocol for JSON request/response calls against Firebase endpoints."""

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Any = None,
        json: dict[str, Any] | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]: ...


class FirebaseHttpClient:
    """Async JSON client for Firestore, Firebase Storage and the Identity Toolkit.

    Wraps httpx.AsyncClient. When a token provider is given and returns a
    token, requests carry ``Authorization: Bearer <token>``. There is no retry:
    a failure is reported once and the caller decides what to do.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": f"readtrack/{__version__}"},
            "timeout": timeout,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.AsyncClient(**client_kwargs)
        self._token_provider = token_provider

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Any = None,
        json: dict[str, Any] | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method.
            url: Absolute endpoint URL.
            params: Query parameters (dict or list of pairs for repeated keys).
            json: JSON request body.
            content: Raw request body, for media uploads.
            headers: Extra request headers.

        Returns:
            Parsed JSON response body ({} for an empty body).

        Raises:
            FirebaseRequestError: On transport errors or non-2xx responses.
        """
        request_headers = dict(headers or {})
        token = self._token_provider() if self._token_provider else None
        if token:
            request_headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._client.request(
                method,
                url,
                params=params,
                json=json,
                content=content,
                headers=request_headers,
            )
        except httpx.HTTPError as exc:
            raise FirebaseRequestError(0, "UNAVAILABLE", f"Request failed: {exc}") from exc

        logger.debug("%s %s -> %d", method, url, response.status_code)

        if response.is_success:
            return response.json() if response.content else {}

        reason, message = _decode_error(response)
        raise FirebaseRequestError(response.status_code, reason, message)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "FirebaseHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def _decode_error(response: httpx.Response) -> tuple[str, str]:
    """Extract (reason, message) from a Google-style error body."""
    try:
        body = response.json()
    except ValueError:
        body = {}

    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        return "UNKNOWN", f"HTTP {response.status_code}"

    message = str(error.get("message") or f"HTTP {response.status_code}")
    reason = error.get("status") or message.split(" ", 1)[0] or "UNKNOWN"
    return str(reason), message
