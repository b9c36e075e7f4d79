"""Status display table: one label, color and icon per status.

Icons are Feather icon names.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, NamedTuple

from modules.orders.constants import OrderStatus


class StatusDisplay(NamedTuple):
    label: str
    color: str
    icon: str


_CANCELLED = StatusDisplay("Cancelled", "#374151", "x-circle")

STATUS_DISPLAY: Dict[str, StatusDisplay] = {
    OrderStatus.PENDING.value: StatusDisplay("Pending", "#92400e", "clock"),
    OrderStatus.ACCEPTED.value: StatusDisplay("Accepted", "#1e40af", "check-circle"),
    OrderStatus.REJECTED.value: StatusDisplay("Rejected", "#991b1b", "x-octagon"),
    OrderStatus.PROCESSING.value: StatusDisplay("Processing", "#7e22ce", "settings"),
    OrderStatus.ASSIGNED_TO_TRANSPORTER.value: StatusDisplay(
        "Assigned to Transporter", "#3730a3", "user-check"
    ),
    OrderStatus.ACCEPTED_BY_TRANSPORTER.value: StatusDisplay(
        "Accepted by Transporter", "#0f766e", "thumbs-up"
    ),
    OrderStatus.REJECTED_BY_TRANSPORTER.value: StatusDisplay(
        "Rejected by Transporter", "#991b1b", "thumbs-down"
    ),
    OrderStatus.IN_TRANSIT.value: StatusDisplay("In Transit", "#9a3412", "truck"),
    OrderStatus.DELIVERED.value: StatusDisplay("Delivered", "#166534", "check-square"),
    OrderStatus.CERTIFIED.value: StatusDisplay("Certified", "#065f46", "award"),
    OrderStatus.DISPUTED.value: StatusDisplay("Disputed", "#be123c", "alert-triangle"),
    OrderStatus.RETURN_TO_WHOLESALER.value: StatusDisplay(
        "Returning to Wholesaler", "#92400e", "corner-up-left"
    ),
    OrderStatus.RETURN_ACCEPTED.value: StatusDisplay("Return Accepted", "#1e40af", "check"),
    OrderStatus.RETURN_REJECTED.value: StatusDisplay("Return Rejected", "#991b1b", "x"),
    OrderStatus.RETURN_REQUESTED.value: StatusDisplay(
        "Return Requested", "#92400e", "refresh-ccw"
    ),
    OrderStatus.CANCELLED_BY_RETAILER.value: _CANCELLED._replace(label="Cancelled by Retailer"),
    OrderStatus.CANCELLED_BY_WHOLESALER.value: _CANCELLED._replace(
        label="Cancelled by Wholesaler"
    ),
    OrderStatus.CANCELLED_BY_TRANSPORTER.value: _CANCELLED._replace(
        label="Cancelled by Transporter"
    ),
    OrderStatus.CANCELLED.value: _CANCELLED,
    OrderStatus.CONFIRMED.value: StatusDisplay("Confirmed", "#1e40af", "check-circle"),
    OrderStatus.IN_PRODUCTION.value: StatusDisplay("In Production", "#3730a3", "package"),
    OrderStatus.READY_FOR_DELIVERY.value: StatusDisplay(
        "Ready for Delivery", "#5b21b6", "box"
    ),
    OrderStatus.SHIPPED.value: StatusDisplay("Shipped", "#7c3aed", "send"),
}

UNKNOWN_COLOR = "#374151"
UNKNOWN_ICON = "file-text"


def humanize_status(status: str) -> str:
    """``return_to_wholesaler`` -> ``Return To Wholesaler``."""
    return " ".join(part.capitalize() for part in status.split("_") if part)


def status_display(status: Any) -> StatusDisplay:
    """Display entry for ``status``; unknown statuses get a neutral entry."""
    if isinstance(status, Enum):
        status = status.value
    if not isinstance(status, str) or not status:
        return StatusDisplay("Unknown", UNKNOWN_COLOR, UNKNOWN_ICON)
    entry = STATUS_DISPLAY.get(status)
    if entry is not None:
        return entry
    return StatusDisplay(humanize_status(status), UNKNOWN_COLOR, UNKNOWN_ICON)
