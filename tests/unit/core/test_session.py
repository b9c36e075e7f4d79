"""Unit tests for token inspection and session storage."""

from __future__ import annotations

import pytest

from modules.core.session import (
    InMemoryCredentialStore,
    UserSession,
    clear_session,
    decode_claims,
    load_session,
    save_session,
    token_is_expired,
)

pytestmark = pytest.mark.unit


class TestTokenInspection:
    def test_decode_claims_without_secret(self, token_factory):
        token = token_factory("u-42")
        assert decode_claims(token)["id"] == "u-42"

    def test_malformed_token_has_no_claims(self):
        assert decode_claims("not-a-jwt") == {}

    def test_expired_token(self, token_factory):
        assert token_is_expired(token_factory(expires_in=-10)) is True

    def test_live_token(self, token_factory):
        assert token_is_expired(token_factory(expires_in=600)) is False

    def test_token_without_exp_is_left_to_server(self, token_factory):
        assert token_is_expired(token_factory(expires_in=None)) is False
        assert token_is_expired("opaque-token") is False


class TestUserSession:
    def test_from_login_reads_mongo_id(self, token_factory):
        session = UserSession.from_login(
            token_factory("u-1"), {"_id": "u-1", "role": "Wholesaler"}
        )
        assert session.user_id == "u-1"
        assert session.role == "wholesaler"

    def test_from_login_falls_back_to_token_claim(self, token_factory):
        session = UserSession.from_login(token_factory("u-9"), {"role": "transporter"})
        assert session.user_id == "u-9"

    def test_from_login_without_any_id_raises(self):
        with pytest.raises(ValueError):
            UserSession.from_login("opaque", {"role": "retailer"})

    def test_is_expired(self, session_factory):
        assert session_factory(expires_in=-5).is_expired is True
        assert session_factory(expires_in=300).is_expired is False


class TestCredentialStore:
    def test_save_and_load_round_trip(self, wholesaler_session):
        store = InMemoryCredentialStore()

        save_session(store, wholesaler_session)
        restored = load_session(store)

        assert restored == wholesaler_session

    def test_load_from_empty_store(self):
        assert load_session(InMemoryCredentialStore()) is None

    def test_load_with_user_missing_id(self):
        store = InMemoryCredentialStore()
        store.set("token", "opaque")
        store.set("user", {"role": "retailer"})

        assert load_session(store) is None

    def test_clear_session(self, wholesaler_session):
        store = InMemoryCredentialStore()
        save_session(store, wholesaler_session)

        clear_session(store)

        assert store.get("token") is None
        assert store.get("user") is None
