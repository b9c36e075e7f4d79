"""Login, logout and session restore.

The backend issues the token; this service only stores it, attaches it
to the shared ``ApiClient`` and clears it again.  A rejected login
surfaces as the ``ApiClient`` error (``Unauthorized`` / ``Conflict``).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog

from modules.auth.exceptions import InvalidCredentials
from modules.core.http import ApiClient, unwrap_entity
from modules.core.session import (
    CredentialStore,
    InMemoryCredentialStore,
    UserSession,
    clear_session,
    load_session,
    save_session,
)

logger = structlog.get_logger(__name__)


class AuthService:
    login_path = "/api/auth/login"
    me_path = "/api/auth/me"

    def __init__(self, api: ApiClient, store: Optional[CredentialStore] = None) -> None:
        self._api = api
        self._store = store if store is not None else InMemoryCredentialStore()

    @property
    def session(self) -> Optional[UserSession]:
        return self._api.session

    def login(self, email: str, password: str) -> UserSession:
        """Authenticate and make the session current.

        Raises:
            InvalidCredentials: blank email/password (nothing is sent) or a
                response without token/user.
        """
        email = (email or "").strip()
        if not email or not password:
            raise InvalidCredentials("Email and password are required.")

        body = self._api.post(
            self.login_path,
            json={"email": email, "password": password},
            auth=False,
        )
        token = body.get("token")
        user = unwrap_entity(body, "user")
        if not token or user is None:
            raise InvalidCredentials("Login response carries no token.")
        try:
            session = UserSession.from_login(token, user)
        except ValueError as exc:
            raise InvalidCredentials(str(exc)) from exc

        save_session(self._store, session)
        self._api.session = session
        logger.info("auth.logged_in", user_id=session.user_id, role=session.role)
        return session

    def current_user(self) -> Dict[str, Any]:
        """Profile of the logged-in user as the server sees it now."""
        body = self._api.get(self.me_path)
        return unwrap_entity(body, "user") or {}

    def restore(self) -> Optional[UserSession]:
        """Re-attach a stored session; expired or incomplete ones are dropped."""
        session = load_session(self._store)
        if session is None:
            return None
        if session.is_expired:
            logger.info("auth.stored_session_expired", user_id=session.user_id)
            clear_session(self._store)
            return None
        self._api.session = session
        logger.info("auth.session_restored", user_id=session.user_id)
        return session

    def logout(self) -> None:
        user_id = self._api.session.user_id if self._api.session else None
        clear_session(self._store)
        self._api.session = None
        logger.info("auth.logged_out", user_id=user_id)
