# spiral_journal/services/auth.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from spiral_journal.config import firebase_api_key, firebase_auth_url, auth_timeout_s
from spiral_journal.services import storage

log = logging.getLogger(__name__)

AUTH_UID_KEY = "auth_local_id"


class AuthError(Exception):
    """Raised when anonymous sign-in cannot be completed."""
    pass


@dataclass
class AuthSession:
    local_id: str
    id_token: str
    refresh_token: str
    expires_in: int


def _error_message(resp: requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}"
    err = data.get("error") if isinstance(data, dict) else None
    if isinstance(err, dict) and err.get("message"):
        return f"HTTP {resp.status_code}: {err['message']}"
    return f"HTTP {resp.status_code}"


class FirebaseAuthService:
    """
    Anonymous sign-in through the Firebase Identity Toolkit REST API.

    A successful sign-in creates (or reuses) a local anonymous user profile and
    remembers its uid in settings, so `current_user()` works after a restart.
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else firebase_api_key()
        self._base_url = (base_url or firebase_auth_url()).rstrip("/")
        self._timeout_s = timeout_s if timeout_s is not None else auth_timeout_s()
        self._http = session or requests
        self.last_session: Optional[AuthSession] = None

    def authenticate_anonymously(self) -> AuthSession:
        if not self._api_key:
            raise AuthError("Missing Firebase web API key (set FIREBASE_API_KEY)")

        try:
            resp = self._http.post(
                f"{self._base_url}/accounts:signUp",
                params={"key": self._api_key},
                json={"returnSecureToken": True},
                timeout=self._timeout_s,
            )
        except requests.exceptions.RequestException as e:
            raise AuthError(f"Failed to sign in anonymously: {e}") from e

        if resp.status_code >= 400:
            raise AuthError(f"Failed to sign in anonymously: {_error_message(resp)}")

        try:
            data: Dict[str, Any] = resp.json()
            session = AuthSession(
                local_id=str(data["localId"]),
                id_token=str(data["idToken"]),
                refresh_token=str(data.get("refreshToken") or ""),
                expires_in=int(data.get("expiresIn") or 0),
            )
        except (ValueError, KeyError, TypeError) as e:
            raise AuthError("Failed to sign in anonymously: malformed response") from e

        storage.get_or_create_anonymous_user(session.local_id)
        storage.set_setting(AUTH_UID_KEY, session.local_id)
        self.last_session = session
        log.info("Anonymous sign-in ok (uid=%s)", session.local_id)
        return session

    def current_user(self) -> Dict[str, Any] | None:
        uid = storage.get_setting(AUTH_UID_KEY)
        if not uid:
            return None
        return storage.get_user_by_auth_uid(uid)

    def sign_out(self) -> None:
        storage.delete_setting(AUTH_UID_KEY)
        self.last_session = None
