"""Session storage backends for the admin's authenticated session.

The session holds the bearer token sent with every backend call and the
signed-in admin user. It is read by the API client and written only on
login/logout and when the backend reports the session as expired (401).

Example:
    store = FileSessionStore(
        path=settings.session_path,
        login_route=settings.login_route,
    )

    store.set_token("eyJhbGciOi...")
    store.set_user({"email": "admin@example.com", "role": "admin"})

    # On 401
    store.clear()
    store.redirect_to_login()
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, TypedDict

logger = logging.getLogger(__name__)


class SessionUser(TypedDict, total=False):
    """Signed-in admin user as persisted in the session.

    Attributes:
        id: Backend user identifier
        email: Admin email address
        role: Backend role name
    """

    id: str
    email: str
    role: str


class SessionStoreError(Exception):
    """Base exception for session store errors."""


class SessionStore(ABC):
    """Abstract base class for session storage backends.

    Subclasses implement token/user persistence. ``clear()`` and
    ``redirect_to_login()`` are shared: clearing removes both entries and
    redirecting hands the login route to the ``on_redirect`` callback.
    """

    def __init__(
        self,
        login_route: str = "/login",
        on_redirect: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize session store.

        Args:
            login_route: Route the admin is sent to when the session expires
            on_redirect: Callback invoked with the login route on redirect
        """
        self.login_route = login_route
        self.on_redirect = on_redirect
        self.redirected_to: str | None = None

    @abstractmethod
    def get_token(self) -> str | None:
        """Return the stored bearer token, or None if signed out."""

    @abstractmethod
    def set_token(self, token: str) -> None:
        """Persist the bearer token."""

    @abstractmethod
    def remove_token(self) -> None:
        """Remove the bearer token (no-op if absent)."""

    @abstractmethod
    def get_user(self) -> SessionUser | None:
        """Return the stored admin user, or None if signed out."""

    @abstractmethod
    def set_user(self, user: SessionUser) -> None:
        """Persist the admin user."""

    @abstractmethod
    def remove_user(self) -> None:
        """Remove the admin user (no-op if absent)."""

    def clear(self) -> None:
        """Remove both the token and the user."""
        self.remove_token()
        self.remove_user()
        logger.info("Session cleared")

    def redirect_to_login(self) -> None:
        """Send the admin to the login entry point."""
        self.redirected_to = self.login_route
        logger.info("Redirecting to login", extra={"operation": "redirect"})
        if self.on_redirect is not None:
            self.on_redirect(self.login_route)


class InMemorySessionStore(SessionStore):
    """Session store kept in process memory (tests and embedding)."""

    def __init__(
        self,
        token: str | None = None,
        user: SessionUser | None = None,
        login_route: str = "/login",
        on_redirect: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__(login_route=login_route, on_redirect=on_redirect)
        self._token = token
        self._user = user

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token

    def remove_token(self) -> None:
        self._token = None

    def get_user(self) -> SessionUser | None:
        return self._user

    def set_user(self, user: SessionUser) -> None:
        self._user = user

    def remove_user(self) -> None:
        self._user = None


class FileSessionStore(SessionStore):
    """Session store backed by a JSON file.

    The file holds ``{"token": ..., "user": {...}}`` and is rewritten on
    every change. It is created with owner-only permissions since it
    contains a bearer token.
    """

    def __init__(
        self,
        path: Path | str,
        login_route: str = "/login",
        on_redirect: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize file-backed session store.

        Args:
            path: Location of the session JSON file
            login_route: Route the admin is sent to when the session expires
            on_redirect: Callback invoked with the login route on redirect
        """
        super().__init__(login_route=login_route, on_redirect=on_redirect)
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            raise SessionStoreError(f"Failed to read session file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise SessionStoreError(f"Session file {self.path} does not contain an object")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            os.chmod(self.path, 0o600)
        except OSError as e:
            raise SessionStoreError(f"Failed to write session file {self.path}: {e}") from e

    def _update(self, key: str, value: Any) -> None:
        data = self._load()
        if value is None:
            if key not in data:
                return
            data.pop(key)
        else:
            data[key] = value
        self._save(data)

    def get_token(self) -> str | None:
        token = self._load().get("token")
        return token if isinstance(token, str) and token else None

    def set_token(self, token: str) -> None:
        self._update("token", token)

    def remove_token(self) -> None:
        self._update("token", None)

    def get_user(self) -> SessionUser | None:
        user = self._load().get("user")
        return user if isinstance(user, dict) else None

    def set_user(self, user: SessionUser) -> None:
        self._update("user", dict(user))

    def remove_user(self) -> None:
        self._update("user", None)
