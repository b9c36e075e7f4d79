"""Order domain constants.

Status values are owned by the backend; the client reads them as
opaque strings and only compares them against these names.
"""

from enum import Enum


class OrderStatus(str, Enum):
    # Retailer -> wholesaler orders
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    PROCESSING = "processing"
    ASSIGNED_TO_TRANSPORTER = "assigned_to_transporter"
    ACCEPTED_BY_TRANSPORTER = "accepted_by_transporter"
    REJECTED_BY_TRANSPORTER = "rejected_by_transporter"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CERTIFIED = "certified"
    DISPUTED = "disputed"
    RETURN_TO_WHOLESALER = "return_to_wholesaler"
    RETURN_ACCEPTED = "return_accepted"
    RETURN_REJECTED = "return_rejected"
    CANCELLED_BY_RETAILER = "cancelled_by_retailer"
    CANCELLED_BY_WHOLESALER = "cancelled_by_wholesaler"
    CANCELLED_BY_TRANSPORTER = "cancelled_by_transporter"

    # Wholesaler -> supplier orders
    CONFIRMED = "confirmed"
    IN_PRODUCTION = "in_production"
    READY_FOR_DELIVERY = "ready_for_delivery"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"
    RETURN_REQUESTED = "return_requested"


class Role(str, Enum):
    RETAILER = "retailer"
    WHOLESALER = "wholesaler"
    TRANSPORTER = "transporter"
    SUPPLIER = "supplier"
    ADMIN = "admin"


class OrderBook(str, Enum):
    """Backend collection an order lives in."""

    RETAILER_ORDERS = "retailer_orders"
    WHOLESALER_ORDERS = "wholesaler_orders"
    SUPPLIER_ORDERS = "supplier_orders"


class Assignment(str, Enum):
    """Relationship between a transporter viewer and an order."""

    SPECIFIC = "specific"
    FREE = "free"
    OTHER = "other"


class AssignmentType(str, Enum):
    """How a wholesaler hands an order to transporters."""

    SPECIFIC = "specific"
    FREE = "free"


ALL_FILTER = "all"

TERMINAL_STATES: frozenset[str] = frozenset(
    status.value
    for status in (
        OrderStatus.CERTIFIED,
        OrderStatus.REJECTED,
        OrderStatus.RETURN_ACCEPTED,
        OrderStatus.RETURN_REJECTED,
        OrderStatus.CANCELLED_BY_RETAILER,
        OrderStatus.CANCELLED_BY_WHOLESALER,
        OrderStatus.CANCELLED,
    )
)

TRACKING_NUMBER_PREFIX = "TRK-"
