import json
import logging
import uuid
from unittest.mock import MagicMock

import pytest
import requests
import structlog

from modules.core.http import ApiClient


def _ok(body):
    response = requests.Response()
    response.status_code = 200
    response.url = "https://api.test/api/ping"
    response._content = json.dumps(body).encode()
    return response


@pytest.fixture()
def client(wholesaler_session):
    http = MagicMock(spec=requests.Session)
    http.request.return_value = _ok({"success": True})
    return ApiClient(base_url="https://api.test", session=wholesaler_session, http=http)


class TestRequestCorrelationId:
    def test_sends_uuid4_request_id(self, client):
        client.get("/api/ping")

        headers = client._http.request.call_args.kwargs["headers"]
        request_id = headers["X-Request-ID"]
        assert str(uuid.UUID(request_id, version=4)) == request_id

    def test_each_call_gets_a_new_id(self, client):
        client.get("/api/ping")
        first = client._http.request.call_args.kwargs["headers"]["X-Request-ID"]
        client.get("/api/ping")
        second = client._http.request.call_args.kwargs["headers"]["X-Request-ID"]

        assert first != second

    def test_correlation_id_unbound_after_call(self, client):
        client.get("/api/ping")

        assert "correlation_id" not in structlog.contextvars.get_contextvars()

    def test_correlation_id_in_logs(self, client, caplog):
        with caplog.at_level(logging.INFO):
            client.get("/api/ping")
        request_id = client._http.request.call_args.kwargs["headers"]["X-Request-ID"]

        found = any(request_id in record.getMessage() for record in caplog.records)
        assert found, (
            f"correlation_id '{request_id}' not found in log records: "
            f"{[r.getMessage() for r in caplog.records]}"
        )

    def test_bearer_token_never_logged(self, client, caplog, wholesaler_session):
        with caplog.at_level(logging.DEBUG):
            client.get("/api/ping")

        assert all(
            wholesaler_session.token not in record.getMessage() for record in caplog.records
        )


class TestLoggingConfig:
    def test_configure_logging_installs_console_handler(self):
        from config.settings import LOGGING, configure_logging

        configure_logging()

        assert LOGGING["root"]["handlers"] == ["console"]
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_json_formatter_is_processor_formatter(self):
        import structlog

        from config.settings import LOGGING

        assert LOGGING["formatters"]["json"]["()"] is structlog.stdlib.ProcessorFormatter
