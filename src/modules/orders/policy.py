"""Status-driven action policy.

Given an order's current status, the viewer's role and (for
transporters) the viewer's relationship to the order, decide which
actions the client offers and which status each action requests.

This is presentation policy, not a state machine: the backend validates
and applies every transition.  The functions here are pure, do no I/O
and never raise; anything they do not recognise yields no actions.

Rows are listed affirmative first, destructive last, and that order is
preserved in the result so every screen lays buttons out the same way.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

from modules.orders.constants import Assignment, OrderBook, OrderStatus, Role
from modules.orders.dtos import ActionDTO, OrderDTO, reference_id

Rule = Tuple[ActionDTO, Optional[FrozenSet[str]]]

_ANY_HOLDER = frozenset({Assignment.SPECIFIC.value, Assignment.FREE.value})
_OWNER_ONLY = frozenset({Assignment.SPECIFIC.value})


def _action(
    name: str,
    target: Optional[OrderStatus],
    label: str,
    reason: bool = False,
    destructive: bool = False,
) -> ActionDTO:
    return ActionDTO(
        name=name,
        target_status=target.value if target is not None else None,
        label=label,
        requires_reason=reason,
        destructive=destructive,
    )


def _key(book: OrderBook, role: Role, status: OrderStatus) -> Tuple[str, str, str]:
    return book.value, role.value, status.value


_RETAILER = OrderBook.RETAILER_ORDERS
_OUTGOING = OrderBook.WHOLESALER_ORDERS
_SUPPLIER = OrderBook.SUPPLIER_ORDERS

S = OrderStatus

POLICY: Dict[Tuple[str, str, str], Tuple[Rule, ...]] = {
    # -- Wholesaler handling retailer orders ---------------------------------
    _key(_RETAILER, Role.WHOLESALER, S.PENDING): (
        (_action("accept", S.ACCEPTED, "Accept"), None),
        (_action("reject", S.REJECTED, "Reject", destructive=True), None),
    ),
    _key(_RETAILER, Role.WHOLESALER, S.ACCEPTED): (
        (_action("processing", S.PROCESSING, "Start Processing"), None),
        (
            _action("cancel", S.CANCELLED_BY_WHOLESALER, "Cancel", reason=True, destructive=True),
            None,
        ),
    ),
    _key(_RETAILER, Role.WHOLESALER, S.PROCESSING): (
        (_action("assign", S.ASSIGNED_TO_TRANSPORTER, "Assign Transporter"), None),
    ),
    _key(_RETAILER, Role.WHOLESALER, S.RETURN_TO_WHOLESALER): (
        (_action("accept", S.RETURN_ACCEPTED, "Accept Return"), None),
        (
            _action("reject", S.RETURN_REJECTED, "Reject Return", reason=True, destructive=True),
            None,
        ),
    ),
    _key(_RETAILER, Role.WHOLESALER, S.DELIVERED): (
        (_action("certify", S.CERTIFIED, "Certify"), None),
        (_action("return", S.RETURN_REQUESTED, "Return", reason=True, destructive=True), None),
    ),
    # -- Transporter handling retailer orders --------------------------------
    _key(_RETAILER, Role.TRANSPORTER, S.ASSIGNED_TO_TRANSPORTER): (
        (_action("accept", S.ACCEPTED_BY_TRANSPORTER, "Accept Order"), _ANY_HOLDER),
        (
            _action(
                "reject", S.REJECTED_BY_TRANSPORTER, "Reject Order", reason=True, destructive=True
            ),
            _ANY_HOLDER,
        ),
    ),
    _key(_RETAILER, Role.TRANSPORTER, S.ACCEPTED_BY_TRANSPORTER): (
        (_action("start", S.IN_TRANSIT, "Start Delivery"), _ANY_HOLDER),
        (
            _action(
                "cancel",
                S.CANCELLED_BY_TRANSPORTER,
                "Cancel Delivery",
                reason=True,
                destructive=True,
            ),
            _ANY_HOLDER,
        ),
    ),
    _key(_RETAILER, Role.TRANSPORTER, S.IN_TRANSIT): (
        (_action("deliver", S.DELIVERED, "Mark as Delivered"), _ANY_HOLDER),
        (
            _action(
                "cancel",
                S.CANCELLED_BY_TRANSPORTER,
                "Cancel Delivery",
                reason=True,
                destructive=True,
            ),
            _ANY_HOLDER,
        ),
    ),
    _key(_RETAILER, Role.TRANSPORTER, S.DISPUTED): (
        (_action("return", S.RETURN_TO_WHOLESALER, "Return to Wholesaler", reason=True), _OWNER_ONLY),
    ),
    # -- Retailer on its own orders ------------------------------------------
    _key(_RETAILER, Role.RETAILER, S.PENDING): (
        (_action("cancel", S.CANCELLED_BY_RETAILER, "Cancel", reason=True, destructive=True), None),
        (_action("delete", None, "Delete", destructive=True), None),
    ),
    _key(_RETAILER, Role.RETAILER, S.ACCEPTED): (
        (_action("cancel", S.CANCELLED_BY_RETAILER, "Cancel", reason=True, destructive=True), None),
    ),
    _key(_RETAILER, Role.RETAILER, S.PROCESSING): (
        (_action("cancel", S.CANCELLED_BY_RETAILER, "Cancel", reason=True, destructive=True), None),
    ),
    _key(_RETAILER, Role.RETAILER, S.DELIVERED): (
        (_action("certify", S.CERTIFIED, "Certify"), None),
        (_action("dispute", S.DISPUTED, "Dispute", reason=True, destructive=True), None),
    ),
    _key(_RETAILER, Role.RETAILER, S.REJECTED): (
        (_action("delete", None, "Delete", destructive=True), None),
    ),
    _key(_RETAILER, Role.RETAILER, S.RETURN_ACCEPTED): (
        (_action("delete", None, "Delete", destructive=True), None),
    ),
    _key(_RETAILER, Role.RETAILER, S.RETURN_REJECTED): (
        (_action("delete", None, "Delete", destructive=True), None),
    ),
    _key(_RETAILER, Role.RETAILER, S.CANCELLED_BY_WHOLESALER): (
        (_action("delete", None, "Delete", destructive=True), None),
    ),
    # -- Wholesaler's outgoing orders to suppliers ---------------------------
    _key(_OUTGOING, Role.WHOLESALER, S.DELIVERED): (
        (_action("certify", S.CERTIFIED, "Certify"), None),
        (_action("return", S.RETURN_REQUESTED, "Return", reason=True, destructive=True), None),
    ),
    _key(_OUTGOING, Role.WHOLESALER, S.PENDING): (
        (_action("cancel", S.CANCELLED, "Cancel Order", reason=True, destructive=True), None),
        (_action("delete", None, "Delete", destructive=True), None),
    ),
    _key(_OUTGOING, Role.WHOLESALER, S.CONFIRMED): (
        (_action("cancel", S.CANCELLED, "Cancel Order", reason=True, destructive=True), None),
    ),
    # -- Supplier fulfilling orders ------------------------------------------
    _key(_SUPPLIER, Role.SUPPLIER, S.PENDING): (
        (_action("confirm", S.CONFIRMED, "Confirm Order"), None),
    ),
    _key(_SUPPLIER, Role.SUPPLIER, S.CONFIRMED): (
        (_action("start_production", S.IN_PRODUCTION, "Start Production"), None),
    ),
    _key(_SUPPLIER, Role.SUPPLIER, S.IN_PRODUCTION): (
        (_action("mark_ready", S.READY_FOR_DELIVERY, "Mark Ready"), None),
    ),
    _key(_SUPPLIER, Role.SUPPLIER, S.READY_FOR_DELIVERY): (
        (_action("assign", S.ASSIGNED_TO_TRANSPORTER, "Assign Transporter"), None),
    ),
    _key(_SUPPLIER, Role.SUPPLIER, S.ASSIGNED_TO_TRANSPORTER): (
        (_action("ship", S.SHIPPED, "Mark as Shipped"), None),
    ),
    _key(_SUPPLIER, Role.SUPPLIER, S.SHIPPED): (
        (_action("deliver", S.DELIVERED, "Mark as Delivered"), None),
    ),
}


def _plain(value: Any) -> Optional[str]:
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    return value or None


def classify_assignment(transporter_ref: Any, viewer_id: Optional[str]) -> Assignment:
    """Classify an order relative to a transporter viewer.

    ``specific``: the reference points at the viewer.
    ``free``: no reference (``None``, empty string or empty object).
    ``other``: the reference points at someone else, or the viewer is
    unknown.
    """
    ref_id = reference_id(transporter_ref)
    if ref_id is None:
        return Assignment.FREE
    if viewer_id and ref_id == str(viewer_id):
        return Assignment.SPECIFIC
    return Assignment.OTHER


def allowed_actions(
    status: Any,
    role: Any,
    assignment: Any = None,
    book: Any = OrderBook.RETAILER_ORDERS,
) -> Tuple[ActionDTO, ...]:
    """Return the actions offered for ``status`` to ``role``, in table order.

    ``assignment`` only matters for transporters; a transporter with no
    assignment, or with ``other``, is offered nothing.
    """
    status_key = _plain(status)
    role_key = _plain(role)
    book_key = _plain(book)
    if status_key is None or role_key is None or book_key is None:
        return ()

    assignment_key = _plain(assignment)
    if role_key == Role.TRANSPORTER.value and assignment_key not in _ANY_HOLDER:
        return ()

    rules = POLICY.get((book_key, role_key, status_key), ())
    return tuple(
        action
        for action, holders in rules
        if holders is None or assignment_key in holders
    )


def actions_for(
    order: Optional[OrderDTO],
    viewer_id: Optional[str],
    role: Any,
    book: Any = OrderBook.RETAILER_ORDERS,
) -> Tuple[ActionDTO, ...]:
    """Actions offered on ``order`` to the viewer ``(viewer_id, role)``."""
    if order is None or not viewer_id:
        return ()
    assignment = None
    if _plain(role) == Role.TRANSPORTER.value:
        assignment = classify_assignment(order.transporter, viewer_id)
    return allowed_actions(order.status, role, assignment, book)


def find_action(actions: Tuple[ActionDTO, ...], name: str) -> Optional[ActionDTO]:
    for action in actions:
        if action.name == name:
            return action
    return None
