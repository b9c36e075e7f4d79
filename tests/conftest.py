import time

import jwt
import pytest

import config.settings  # noqa: F401  (configures structlog for caplog)
from modules.core.session import UserSession
from modules.orders.dtos import OrderDTO
from shared.infrastructure.bus import InMemoryEventBus

TEST_SECRET = "test-signing-secret-0123456789abcdef"


def make_token(user_id="u-1", expires_in=3600, **claims):
    """HS256 token shaped like the backend's (``{"id", "exp"}``)."""
    payload = {"id": user_id, **claims}
    if expires_in is not None:
        payload["exp"] = int(time.time()) + expires_in
    return jwt.encode(payload, TEST_SECRET, algorithm="HS256")


def make_session(user_id="u-1", role="wholesaler", expires_in=3600):
    return UserSession(
        token=make_token(user_id, expires_in=expires_in),
        user_id=user_id,
        role=role,
        user={"_id": user_id, "role": role},
    )


@pytest.fixture()
def token_factory():
    return make_token


@pytest.fixture()
def session_factory():
    return make_session


@pytest.fixture()
def wholesaler_session():
    return make_session("w-1", "wholesaler")


@pytest.fixture()
def transporter_session():
    return make_session("t-1", "transporter")


@pytest.fixture()
def bus():
    """Isolated bus so tests never touch the global singleton."""
    return InMemoryEventBus()


@pytest.fixture()
def order_factory():
    def _make(order_id="o-1", status="pending", **fields):
        return OrderDTO.model_validate({"_id": order_id, "status": status, **fields})

    return _make
