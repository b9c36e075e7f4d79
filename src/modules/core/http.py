"""JSON-over-HTTP client for the trading backend.

Every call:

* carries ``Authorization: Bearer <token>`` from the current session
  (unless ``auth=False``), and fails fast with ``Unauthorized`` when the
  token's ``exp`` claim has already passed;
* carries a fresh ``X-Request-ID`` which is also bound into the
  structlog context, so every log line of the call can be correlated
  with the server's logs;
* is translated into the ``modules.core.exceptions`` taxonomy.  No
  retries are attempted; the caller decides whether to retry.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Iterable, List, Optional

import requests
import structlog

from config.settings import API_BASE_URL, HTTP_TIMEOUT, REQUEST_ID_HEADER
from modules.core.exceptions import (
    Conflict,
    NetworkError,
    NotFound,
    ServerError,
    Unauthorized,
)
from modules.core.session import UserSession

logger = structlog.get_logger(__name__)

CONFLICT_STATUS_CODES = {400, 403, 409}


def unwrap_collection(body: Dict[str, Any], *keys: str) -> List[Dict[str, Any]]:
    """Extract a list from an envelope, trying ``keys`` then ``data``.

    The backend is inconsistent about where it puts collections
    (``orders``, ``transporters``, ``data``, ``data.orders``), so each
    candidate is tried in turn and ``[]`` is returned when none holds a
    list.
    """
    candidates: Iterable[str] = (*keys, "data")
    for key in candidates:
        value = body.get(key)
        if isinstance(value, list):
            return value
        if isinstance(value, dict):
            for inner in keys:
                nested = value.get(inner)
                if isinstance(nested, list):
                    return nested
    return []


def unwrap_entity(body: Dict[str, Any], *keys: str) -> Optional[Dict[str, Any]]:
    """Extract a single object from an envelope, trying ``keys`` then ``data``."""
    for key in (*keys, "data"):
        value = body.get(key)
        if isinstance(value, dict) and value:
            return value
    return None


class ApiClient:
    """Thin wrapper around ``requests.Session`` speaking the backend envelope.

    ``session`` is the authenticated viewer; it is swapped in by the auth
    service on login/logout and read on every call.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        session: Optional[UserSession] = None,
        http: Optional[requests.Session] = None,
        timeout: float = HTTP_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self._http = http or requests.Session()

    # ------------------------------------------------------------------
    # Verbs
    # ------------------------------------------------------------------

    def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
        return self.request("PUT", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Dict[str, Any]:
        return self.request("DELETE", path, **kwargs)

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        auth: bool = True,
    ) -> Dict[str, Any]:
        """Send one request and return the decoded envelope.

        Raises:
            Unauthorized: no session, expired token, or HTTP 401.
            Conflict: HTTP 400, 403 or 409.
            NotFound: HTTP 404.
            NetworkError: transport failure or unreadable body.
            ServerError: any other failure, including ``success: false``.
        """
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if auth:
            headers["Authorization"] = f"Bearer {self._require_token()}"

        cid = str(uuid.uuid4())
        headers[REQUEST_ID_HEADER] = cid
        url = f"{self.base_url}{path}"

        with structlog.contextvars.bound_contextvars(correlation_id=cid):
            log = logger.bind(method=method, path=path)
            log.info("http.request_started")
            try:
                response = self._http.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=headers,
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                log.warning("http.request_failed", error=str(exc))
                raise NetworkError(f"{method} {path} failed: {exc}") from exc

            log.info("http.request_finished", status_code=response.status_code)
            return self._handle_response(response, method, path)

    def _require_token(self) -> str:
        if self.session is None or not self.session.token:
            raise Unauthorized("Authentication required. Please log in again.")
        if self.session.is_expired:
            logger.warning("http.session_expired", user_id=self.session.user_id)
            raise Unauthorized("Session expired. Please log in again.")
        return self.session.token

    @staticmethod
    def _handle_response(
        response: requests.Response, method: str, path: str
    ) -> Dict[str, Any]:
        status_code = response.status_code
        try:
            body = response.json()
        except ValueError:
            body = None

        payload = body if isinstance(body, dict) else {}
        message = payload.get("message") or f"{method} {path} returned {status_code}"

        if status_code == 401:
            raise Unauthorized(
                payload.get("message") or "Session expired. Please log in again.",
                status_code=status_code,
                payload=payload,
            )

        if not response.ok:
            if body is None:
                raise NetworkError(message, status_code=status_code)
            if status_code in CONFLICT_STATUS_CODES:
                raise Conflict(message, status_code=status_code, payload=payload)
            if status_code == 404:
                raise NotFound(message, status_code=status_code, payload=payload)
            raise ServerError(message, status_code=status_code, payload=payload)

        if body is None:
            if not response.content:
                return {}
            raise NetworkError(
                f"{method} {path} returned an unreadable body",
                status_code=status_code,
            )

        if isinstance(body, list):
            return {"success": True, "data": body}

        if payload.get("success") is False:
            raise ServerError(message, status_code=status_code, payload=payload)

        return payload
