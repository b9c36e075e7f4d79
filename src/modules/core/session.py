"""Viewer session and credential storage.

The backend issues an HS256 JWT whose payload carries the user id
(``{"id": ..., "exp": ...}``).  The client never holds the signing
secret, so the token is only decoded **without** signature
verification, and only to read ``exp`` / ``id``.  The server remains
the authority on whether a token is valid.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional, Protocol

import jwt as pyjwt
import structlog
from jwt.exceptions import PyJWTError
from pydantic import BaseModel, ConfigDict, field_validator

from config.settings import TOKEN_KEY, USER_KEY

logger = structlog.get_logger(__name__)


def decode_claims(token: str) -> Dict[str, Any]:
    """Return the unverified JWT claims, or ``{}`` if the token is malformed."""
    try:
        return pyjwt.decode(
            token,
            options={
                "verify_signature": False,
                "verify_exp": False,
                "verify_aud": False,
                "verify_iss": False,
            },
        )
    except PyJWTError:
        return {}


def token_is_expired(token: str, leeway: int = 0) -> bool:
    """True if the token carries an ``exp`` claim that has passed.

    Opaque (non-JWT) tokens and tokens without ``exp`` are left for the
    server to judge.
    """
    exp = decode_claims(token).get("exp")
    if not isinstance(exp, (int, float)):
        return False
    return exp + leeway < time.time()


class UserSession(BaseModel):
    """Immutable identity of the viewer driving the client."""

    model_config = ConfigDict(frozen=True)

    token: str
    user_id: str
    role: str
    user: Dict[str, Any] = {}

    @field_validator("role")
    @classmethod
    def role_is_lowercase(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def is_expired(self) -> bool:
        return token_is_expired(self.token)

    @classmethod
    def from_login(cls, token: str, user: Dict[str, Any]) -> UserSession:
        """Build a session from the ``{token, user}`` pair returned by login.

        The user id falls back to the token's ``id`` claim when the user
        object does not carry one.
        """
        user_id = user.get("_id") or user.get("id") or decode_claims(token).get("id")
        if not user_id:
            raise ValueError("Login response carries no user id.")
        return cls(
            token=token,
            user_id=str(user_id),
            role=str(user.get("role") or ""),
            user=user,
        )


class CredentialStore(Protocol):
    """Key-value store holding the ``token`` and ``user`` entries."""

    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryCredentialStore:
    """Process-local ``CredentialStore``."""

    def __init__(self) -> None:
        self._items: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        return self._items.get(key)

    def set(self, key: str, value: Any) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)


def save_session(store: CredentialStore, session: UserSession) -> None:
    store.set(TOKEN_KEY, session.token)
    store.set(USER_KEY, dict(session.user) or {"_id": session.user_id, "role": session.role})


def load_session(store: CredentialStore) -> Optional[UserSession]:
    """Rebuild the session from the store, or ``None`` if incomplete."""
    token = store.get(TOKEN_KEY)
    user = store.get(USER_KEY)
    if not token or not isinstance(user, dict):
        return None
    try:
        return UserSession.from_login(token, user)
    except ValueError:
        logger.warning("session.restore_failed", reason="missing_user_id")
        return None


def clear_session(store: CredentialStore) -> None:
    store.remove(TOKEN_KEY)
    store.remove(USER_KEY)
