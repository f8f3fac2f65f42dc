# ABOUTME: Identity context: who the current user is, plus login/logout/register.
# ABOUTME: StaticIdentity serves the local backend; FirebaseIdentity talks to the Identity Toolkit REST API.

import json
import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable
from urllib.parse import quote

from readtrack.books.clock import format_timestamp, utc_now
from readtrack.errors import AuthError
from readtrack.store.firestore_codec import encode_value
from readtrack.store.http import FirebaseRequestError, JsonClient

logger = logging.getLogger(__name__)

_IDENTITY_BASE = "https://identitytoolkit.googleapis.com/v1"
_SECURE_TOKEN_URL = "https://securetoken.googleapis.com/v1/token"
_FIRESTORE_BASE = "https://firestore.googleapis.com/v1"

# Refresh a little before the token actually expires.
_EXPIRY_MARGIN_SECONDS = 60

_ERROR_MESSAGES = {
    "EMAIL_EXISTS": "This email is already in use.",
    "INVALID_EMAIL": "Invalid email address.",
    "OPERATION_NOT_ALLOWED": "Operation not allowed. Please try again.",
    "WEAK_PASSWORD": "Password is too weak. Use at least 6 characters.",
    "USER_DISABLED": "This account has been disabled.",
    "EMAIL_NOT_FOUND": "Email or password is wrong.",
    "INVALID_PASSWORD": "Email or password is wrong.",
    "INVALID_LOGIN_CREDENTIALS": "Email or password is wrong.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many login attempts. Please try again later.",
}
_DEFAULT_ERROR_MESSAGE = "An error occurred. Please try again."


def auth_error_message(code: str) -> str:
    """Map an Identity Toolkit error code to a message safe to show the user."""
    return _ERROR_MESSAGES.get(code, _DEFAULT_ERROR_MESSAGE)


@dataclass
class Session:
    """A signed-in user and the tokens that authorize their requests."""

    user_id: str
    email: str
    id_token: str
    refresh_token: str | None = None
    expires_at: float = 0.0
    display_name: str | None = None

    @property
    def expired(self) -> bool:
        return time.time() >= self.expires_at - _EXPIRY_MARGIN_SECONDS


@dataclass
class UserProfile:
    """The profile document stored at users/{uid}."""

    uid: str
    email: str
    display_name: str
    created_at: str
    updated_at: str


@runtime_checkable
class IdentityContext(Protocol):
    """Supplies the owner id for every repository call and owns the session."""

    @property
    def current_user_id(self) -> str | None: ...

    async def login(self, email: str, password: str) -> Session: ...

    async def logout(self) -> None: ...

    async def ensure_fresh(self) -> None: ...


class StaticIdentity:
    """A fixed user, for the local backend where there is nothing to sign in to."""

    def __init__(self, user_id: str) -> None:
        self._user_id = user_id

    @property
    def current_user_id(self) -> str | None:
        return self._user_id

    async def login(self, email: str, password: str) -> Session:
        raise AuthError("Sign-in is only available with the firebase backend.")

    async def logout(self) -> None:
        return None

    async def ensure_fresh(self) -> None:
        return None


class FirebaseIdentity:
    """Email/password identity backed by Firebase Authentication.

    The session is persisted as JSON at ``session_path`` so later commands
    stay signed in, and removed again on logout.
    """

    def __init__(
        self,
        client: JsonClient,
        api_key: str,
        *,
        project_id: str,
        session_path: Path,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._project_id = project_id
        self._session_path = session_path
        self._session = self._load_session()

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def current_user_id(self) -> str | None:
        return self._session.user_id if self._session else None

    def id_token(self) -> str | None:
        """Token provider for the data-plane HTTP client."""
        return self._session.id_token if self._session else None

    async def login(self, email: str, password: str) -> Session:
        """Sign in with email and password and persist the session.

        Raises:
            AuthError: With a user-facing message when sign-in fails.
        """
        data = await self._identity_call(
            "accounts:signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        session = self._store_session(data, email)
        await self._ensure_profile(session)
        logger.info("Signed in as %s", session.email)
        return session

    async def register(
        self, email: str, password: str, display_name: str | None = None
    ) -> Session:
        """Create an account, write its profile document, and sign in.

        Raises:
            AuthError: With a user-facing message when registration fails.
        """
        data = await self._identity_call(
            "accounts:signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        session = self._store_session(data, email)
        profile = _new_profile(session, display_name)
        try:
            await self._write_profile(session, profile)
        except FirebaseRequestError as exc:
            raise AuthError(auth_error_message(exc.reason)) from exc
        session.display_name = profile.display_name
        self._save_session(session)
        logger.info("Registered %s", session.email)
        return session

    async def logout(self) -> None:
        self._session = None
        self._session_path.unlink(missing_ok=True)

    async def ensure_fresh(self) -> None:
        """Exchange the refresh token for a new ID token if the current one expired.

        Raises:
            AuthError: If the refresh is rejected; the stale session is dropped.
        """
        session = self._session
        if session is None or not session.expired or not session.refresh_token:
            return

        try:
            data = await self._client.request(
                "POST",
                _SECURE_TOKEN_URL,
                params={"key": self._api_key},
                json={"grant_type": "refresh_token", "refresh_token": session.refresh_token},
            )
        except FirebaseRequestError as exc:
            await self.logout()
            raise AuthError("Your session has expired. Please log in again.") from exc

        session.id_token = data["id_token"]
        session.refresh_token = data.get("refresh_token", session.refresh_token)
        session.expires_at = time.time() + float(data.get("expires_in", 3600))
        self._save_session(session)

    async def _identity_call(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self._client.request(
                "POST",
                f"{_IDENTITY_BASE}/{endpoint}",
                params={"key": self._api_key},
                json=payload,
            )
        except FirebaseRequestError as exc:
            raise AuthError(auth_error_message(exc.reason)) from exc

    def _profile_url(self, uid: str) -> str:
        return (
            f"{_FIRESTORE_BASE}/projects/{self._project_id}/databases/(default)"
            f"/documents/users/{quote(uid, safe='')}"
        )

    async def _write_profile(self, session: Session, profile: UserProfile) -> None:
        fields = {
            "uid": encode_value(profile.uid),
            "email": encode_value(profile.email),
            "displayName": encode_value(profile.display_name),
            "createdAt": {"timestampValue": profile.created_at},
            "updatedAt": {"timestampValue": profile.updated_at},
        }
        await self._client.request(
            "PATCH",
            self._profile_url(profile.uid),
            json={"fields": fields},
            headers={"Authorization": f"Bearer {session.id_token}"},
        )

    async def _ensure_profile(self, session: Session) -> None:
        """Create the profile document on first login if it is missing. Best effort."""
        try:
            await self._client.request(
                "GET",
                self._profile_url(session.user_id),
                headers={"Authorization": f"Bearer {session.id_token}"},
            )
            return
        except FirebaseRequestError as exc:
            if exc.status_code != 404:
                logger.warning("Could not check profile for %s: %s", session.user_id, exc)
                return

        try:
            await self._write_profile(session, _new_profile(session, session.display_name))
        except FirebaseRequestError as exc:
            logger.warning("Could not create profile for %s: %s", session.user_id, exc)

    def _store_session(self, data: dict[str, Any], email: str) -> Session:
        session = Session(
            user_id=data["localId"],
            email=data.get("email") or email,
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken"),
            expires_at=time.time() + float(data.get("expiresIn", 3600)),
            display_name=data.get("displayName") or None,
        )
        self._save_session(session)
        return session

    def _save_session(self, session: Session) -> None:
        self._session = session
        self._session_path.parent.mkdir(parents=True, exist_ok=True)
        self._session_path.write_text(json.dumps(asdict(session)))

    def _load_session(self) -> Session | None:
        if not self._session_path.exists():
            return None
        try:
            return Session(**json.loads(self._session_path.read_text()))
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self._session_path, exc)
            return None


def _new_profile(session: Session, display_name: str | None) -> UserProfile:
    now = format_timestamp(utc_now())
    email = session.email
    return UserProfile(
        uid=session.user_id,
        email=email,
        display_name=display_name or email.split("@")[0] or "User",
        created_at=now,
        updated_at=now,
    )
