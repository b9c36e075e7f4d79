import pytest

from config.settings import mask_sensitive_data

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_password_key_masked(self):
        event_dict = {"event": "auth.login", "password": "s3cret123"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["password"] == "***MASKED***"

    def test_password_in_text_masked(self):
        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_in_text_masked(self):
        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_bearer_credential_masked(self):
        event_dict = {"event": "test", "header": "Bearer eyJhbGciOi.eyJpZCI6.sig"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "eyJhbGciOi" not in result["header"]

    def test_authorization_header_value_masked(self):
        event_dict = {"event": "test", "data": "authorization: Bearer abc.def.ghi"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc.def.ghi" not in result["data"]

    def test_authorization_key_masked(self):
        event_dict = {"event": "test", "Authorization": "Bearer abc"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["Authorization"] == "***MASKED***"

    def test_non_sensitive_data_unchanged(self):
        event_dict = {"event": "order.action_dispatched", "order_id": "ORD-001", "count": 3}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["order_id"] == "ORD-001"
        assert result["event"] == "order.action_dispatched"
        assert result["count"] == 3
