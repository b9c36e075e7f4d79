"""Client-side error taxonomy for backend calls.

Raised by ``ApiClient`` and the repositories built on it.  Callers
(services, screens) catch these to decide between a re-authentication
prompt, a retry banner or a refresh of stale data.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ApiError(Exception):
    """Base class for every failure talking to the backend."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}


class NetworkError(ApiError):
    """The request could not complete or the response body was unreadable."""


class Unauthorized(ApiError):
    """The credential is missing, expired or rejected (HTTP 401).

    The caller should prompt the user to authenticate again.
    """


class Conflict(ApiError):
    """The server refused the requested change (HTTP 400, 403 or 409).

    Typically the order was already moved by another actor.
    """


class NotFound(ApiError):
    """The requested resource does not exist (HTTP 404)."""


class ServerError(ApiError):
    """Any other non-2xx answer, or a 2xx envelope with ``success: false``."""
