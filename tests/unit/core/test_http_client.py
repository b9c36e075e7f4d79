"""Unit tests for ApiClient: headers, envelope handling and error mapping."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
import requests

from modules.core.exceptions import (
    ApiError,
    Conflict,
    NetworkError,
    NotFound,
    ServerError,
    Unauthorized,
)
from modules.core.http import ApiClient, unwrap_collection, unwrap_entity

pytestmark = pytest.mark.unit


def _response(status_code, body=None, raw=None):
    response = requests.Response()
    response.status_code = status_code
    response.url = "https://api.test/api/x"
    if body is not None:
        response._content = json.dumps(body).encode()
    else:
        response._content = raw if raw is not None else b""
    return response


@pytest.fixture()
def http():
    return MagicMock(spec=requests.Session)


@pytest.fixture()
def client(http, wholesaler_session):
    return ApiClient(base_url="https://api.test/", session=wholesaler_session, http=http)


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------


class TestRequestShape:
    def test_sends_bearer_token_and_json_headers(self, client, http, wholesaler_session):
        http.request.return_value = _response(200, {"success": True})

        client.get("/api/retailer-orders/wholesaler", params={"status": "pending"})

        args, kwargs = http.request.call_args
        assert args == ("GET", "https://api.test/api/retailer-orders/wholesaler")
        assert kwargs["params"] == {"status": "pending"}
        assert kwargs["headers"]["Authorization"] == f"Bearer {wholesaler_session.token}"
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["timeout"] == client.timeout

    def test_put_sends_json_body(self, client, http):
        http.request.return_value = _response(200, {"success": True})

        client.put("/api/wholesaler-orders/o-1/status", json={"status": "cancelled"})

        assert http.request.call_args.kwargs["json"] == {"status": "cancelled"}
        assert http.request.call_args.args[0] == "PUT"

    def test_unauthenticated_call_has_no_authorization_header(self, http):
        http.request.return_value = _response(200, {"success": True, "token": "t"})
        client = ApiClient(base_url="https://api.test", http=http)

        client.post("/api/auth/login", json={"email": "a@b.c"}, auth=False)

        assert "Authorization" not in http.request.call_args.kwargs["headers"]

    def test_missing_session_raises_before_sending(self, http):
        client = ApiClient(base_url="https://api.test", http=http)

        with pytest.raises(Unauthorized):
            client.get("/api/auth/me")
        http.request.assert_not_called()

    def test_expired_token_raises_before_sending(self, http, session_factory):
        expired = session_factory("w-1", "wholesaler", expires_in=-60)
        client = ApiClient(base_url="https://api.test", session=expired, http=http)

        with pytest.raises(Unauthorized, match="expired"):
            client.get("/api/auth/me")
        http.request.assert_not_called()


# ---------------------------------------------------------------------------
# Response handling
# ---------------------------------------------------------------------------


class TestResponseHandling:
    def test_returns_envelope(self, client, http):
        http.request.return_value = _response(200, {"success": True, "orders": [{"_id": "1"}]})

        assert client.get("/x") == {"success": True, "orders": [{"_id": "1"}]}

    def test_wraps_bare_list(self, client, http):
        http.request.return_value = _response(200, [{"_id": "1"}])

        assert client.get("/x") == {"success": True, "data": [{"_id": "1"}]}

    def test_empty_body_is_empty_dict(self, client, http):
        http.request.return_value = _response(204)

        assert client.delete("/x") == {}

    def test_success_false_raises_server_error(self, client, http):
        http.request.return_value = _response(200, {"success": False, "message": "Nope"})

        with pytest.raises(ServerError, match="Nope"):
            client.get("/x")

    def test_unreadable_ok_body_raises_network_error(self, client, http):
        http.request.return_value = _response(200, raw=b"<html>oops</html>")

        with pytest.raises(NetworkError):
            client.get("/x")


class TestErrorMapping:
    @pytest.mark.parametrize(
        "status_code, exc_class",
        [
            (401, Unauthorized),
            (400, Conflict),
            (403, Conflict),
            (409, Conflict),
            (404, NotFound),
            (500, ServerError),
            (502, ServerError),
        ],
    )
    def test_status_code_mapping(self, client, http, status_code, exc_class):
        http.request.return_value = _response(
            status_code, {"success": False, "message": "Order already updated"}
        )

        with pytest.raises(exc_class) as exc_info:
            client.put("/x", json={"status": "accepted"})

        assert exc_info.value.status_code == status_code
        assert isinstance(exc_info.value, ApiError)

    def test_conflict_carries_server_message(self, client, http):
        http.request.return_value = _response(409, {"message": "Order already accepted"})

        with pytest.raises(Conflict) as exc_info:
            client.put("/x", json={})

        assert exc_info.value.message == "Order already accepted"
        assert exc_info.value.payload == {"message": "Order already accepted"}

    def test_non_2xx_without_parseable_body_is_network_error(self, client, http):
        http.request.return_value = _response(502, raw=b"Bad Gateway")

        with pytest.raises(NetworkError) as exc_info:
            client.get("/x")

        assert exc_info.value.status_code == 502

    def test_401_without_body_is_still_unauthorized(self, client, http):
        http.request.return_value = _response(401, raw=b"")

        with pytest.raises(Unauthorized):
            client.get("/x")

    def test_transport_failure_is_network_error(self, client, http):
        http.request.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(NetworkError, match="connection refused"):
            client.get("/x")

    def test_timeout_is_network_error(self, client, http):
        http.request.side_effect = requests.Timeout("read timed out")

        with pytest.raises(NetworkError):
            client.get("/x")


# ---------------------------------------------------------------------------
# Envelope helpers
# ---------------------------------------------------------------------------


class TestUnwrap:
    def test_collection_prefers_named_key(self):
        body = {"orders": [{"_id": "1"}], "data": [{"_id": "2"}]}
        assert unwrap_collection(body, "orders") == [{"_id": "1"}]

    def test_collection_falls_back_to_data(self):
        assert unwrap_collection({"data": [{"_id": "2"}]}, "orders") == [{"_id": "2"}]

    def test_collection_nested_in_data(self):
        body = {"data": {"orders": [{"_id": "3"}]}}
        assert unwrap_collection(body, "orders") == [{"_id": "3"}]

    def test_collection_defaults_to_empty(self):
        assert unwrap_collection({"success": True}, "orders") == []
        assert unwrap_collection({"orders": None}, "orders") == []

    def test_entity(self):
        assert unwrap_entity({"order": {"_id": "1"}}, "order") == {"_id": "1"}
        assert unwrap_entity({"data": {"_id": "2"}}, "order") == {"_id": "2"}
        assert unwrap_entity({"success": True}, "order") is None
        assert unwrap_entity({"order": {}}, "order") is None
