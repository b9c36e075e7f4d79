"""Unit tests for Order DTOs (Pydantic v2)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from modules.orders.constants import AssignmentType
from modules.orders.dtos import OrderDTO, StatusUpdateDTO, reference_id

pytestmark = pytest.mark.unit


class TestOrderDTO:
    def test_parses_backend_order(self):
        order = OrderDTO.model_validate(
            {
                "_id": "665f1c",
                "status": "processing",
                "orderNumber": "ORD-7",
                "totalPrice": 120.5,
                "deliveryPlace": "Kigali",
                "transporter": {"_id": "t-1", "firstName": "Ana"},
                "unexpected": "ignored",
            }
        )

        assert order.id == "665f1c"
        assert order.order_number == "ORD-7"
        assert order.total_price == 120.5
        assert order.delivery_place == "Kigali"
        assert order.transporter_id == "t-1"

    def test_plain_id_accepted(self):
        assert OrderDTO.model_validate({"id": 12, "status": "pending"}).id == "12"

    def test_unknown_status_survives(self):
        order = OrderDTO.model_validate({"_id": "a", "status": "teleported"})
        assert order.status == "teleported"
        assert order.is_terminal is False

    def test_non_string_status_becomes_empty(self):
        assert OrderDTO.model_validate({"_id": "a", "status": None}).status == ""

    @pytest.mark.parametrize("payload", [{"status": "pending"}, {"_id": None}, {"_id": ""}])
    def test_missing_id_rejected(self, payload):
        with pytest.raises(ValidationError):
            OrderDTO.model_validate(payload)

    def test_is_frozen(self):
        order = OrderDTO.model_validate({"_id": "a", "status": "pending"})
        with pytest.raises(ValidationError):
            order.status = "accepted"

    def test_terminal_status(self):
        assert OrderDTO.model_validate({"_id": "a", "status": "certified"}).is_terminal is True


class TestReferenceId:
    @pytest.mark.parametrize(
        "ref, expected",
        [
            (None, None),
            ("", None),
            ("  t-1 ", "t-1"),
            ({}, None),
            ({"_id": "t-2"}, "t-2"),
            ({"id": 5}, "5"),
        ],
    )
    def test_reference_id(self, ref, expected):
        assert reference_id(ref) == expected


class TestStatusUpdateDTO:
    def test_reason_is_stripped(self):
        dto = StatusUpdateDTO(order_id="a", target_status="rejected", reason="  late  ")
        assert dto.reason == "late"

    def test_blank_reason_becomes_none(self):
        dto = StatusUpdateDTO(order_id="a", target_status="rejected", reason="   ")
        assert dto.reason is None

    def test_blank_target_rejected(self):
        with pytest.raises(ValidationError):
            StatusUpdateDTO(order_id="a", target_status=" ")

    def test_specific_assignment_needs_transporter(self):
        with pytest.raises(ValidationError):
            StatusUpdateDTO(
                order_id="a",
                target_status="assigned_to_transporter",
                assignment_type=AssignmentType.SPECIFIC,
            )

    def test_free_assignment(self):
        dto = StatusUpdateDTO(
            order_id="a", target_status="assigned_to_transporter", assignment_type="free"
        )
        assert dto.assignment_type == AssignmentType.FREE
