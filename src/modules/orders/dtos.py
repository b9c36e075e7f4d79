"""Order DTOs.

Pydantic v2 models for the data the client reads from, and sends to,
the backend.  All DTOs are immutable (``frozen=True``).

- ``OrderDTO``: an order as returned by any of the three order books.
- ``ActionDTO``: one action offered by the status/action policy.
- ``StatusUpdateDTO``: a validated mutation request, before it is
  translated into a book-specific payload.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.orders.constants import TERMINAL_STATES, AssignmentType


def reference_id(ref: Any) -> Optional[str]:
    """Normalise a backend reference (``None``, id string or populated object)."""
    if ref is None:
        return None
    if isinstance(ref, dict):
        value = ref.get("_id") or ref.get("id")
        return str(value) if value else None
    value = str(ref).strip()
    return value or None


# ---------------------------------------------------------------------------
# Read models
# ---------------------------------------------------------------------------


class OrderDTO(BaseModel):
    """Immutable view of a server order.

    Only ``id`` and ``status`` have meaning to the client; everything
    else is passthrough display data.  Unknown statuses are kept as-is.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(alias="_id")
    status: str = ""
    transporter: Union[str, Dict[str, Any], None] = None
    order_number: Optional[str] = Field(default=None, alias="orderNumber")
    retailer: Union[str, Dict[str, Any], None] = None
    wholesaler: Union[str, Dict[str, Any], None] = None
    supplier: Union[str, Dict[str, Any], None] = None
    client: Union[str, Dict[str, Any], None] = None
    product: Union[str, Dict[str, Any], None] = None
    items: List[Dict[str, Any]] = Field(default_factory=list)
    products: List[Dict[str, Any]] = Field(default_factory=list)
    quantity: Optional[float] = None
    total_price: Optional[float] = Field(default=None, alias="totalPrice")
    total_amount: Optional[float] = Field(default=None, alias="totalAmount")
    delivery_place: Optional[str] = Field(default=None, alias="deliveryPlace")
    tracking_number: Optional[str] = Field(default=None, alias="trackingNumber")
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    @model_validator(mode="before")
    @classmethod
    def accept_plain_id(cls, data: Any) -> Any:
        """Some endpoints send ``id`` instead of ``_id``."""
        if isinstance(data, dict) and "_id" not in data and "id" in data:
            data = {**data, "_id": data["id"]}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> str:
        if v is None or v == "":
            raise ValueError("Order id is missing.")
        return str(v)

    @field_validator("status", mode="before")
    @classmethod
    def status_as_string(cls, v: Any) -> str:
        return v if isinstance(v, str) else ""

    @property
    def transporter_id(self) -> Optional[str]:
        return reference_id(self.transporter)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES


class ActionDTO(BaseModel):
    """An action the viewer may take, and the status it requests."""

    model_config = ConfigDict(frozen=True)

    name: str
    target_status: Optional[str]
    label: str
    requires_reason: bool = False
    destructive: bool = False


# ---------------------------------------------------------------------------
# Write models
# ---------------------------------------------------------------------------


class StatusUpdateDTO(BaseModel):
    """Immutable mutation request.

    Validates:
    - ``order_id`` and ``target_status`` are non-blank.
    - ``reason`` is stripped; blank becomes ``None``.
    - ``assignment_type`` ``specific`` needs a ``transporter_id``.
    """

    model_config = ConfigDict(frozen=True)

    order_id: str
    target_status: str
    reason: Optional[str] = None
    transporter_id: Optional[str] = None
    assignment_type: Optional[AssignmentType] = None

    @field_validator("order_id", "target_status")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Value must not be blank.")
        return v.strip()

    @field_validator("reason")
    @classmethod
    def blank_reason_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @model_validator(mode="after")
    def specific_assignment_needs_transporter(self):
        if self.assignment_type == AssignmentType.SPECIFIC and not self.transporter_id:
            raise ValueError("A specific assignment requires a transporter id.")
        return self
