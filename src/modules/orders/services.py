"""Order service layer (Use Cases).

``OrderActionService`` is the mutation dispatcher behind every order
screen: it lists a book, tells the caller which actions the viewer may
take, and submits the chosen action to the backend.

Rules enforced client-side, before anything is sent:
- The action must be offered by the status/action policy for the
  viewer's role and assignment (``ActionNotAllowed``).
- Actions flagged "reason required" need a non-blank reason
  (``ActionValidationError``).

Everything else (transition validity, permissions, concurrent edits)
is decided by the backend and surfaces as ``Conflict``,
``Unauthorized`` or ``NetworkError`` from ``modules.core.exceptions``.
After each successful mutation an event is published so subscribed
lists re-fetch in full; no list is patched in place.
"""

from __future__ import annotations

import secrets
import string
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import structlog
from pydantic import ValidationError

from modules.core.exceptions import ApiError
from modules.core.session import UserSession
from modules.orders.constants import (
    ALL_FILTER,
    TRACKING_NUMBER_PREFIX,
    Assignment,
    AssignmentType,
    OrderBook,
    OrderStatus,
    Role,
)
from modules.orders.dtos import ActionDTO, OrderDTO, StatusUpdateDTO
from modules.orders.events import OrderDeleted, OrderStatusChanged
from modules.orders.exceptions import (
    ActionNotAllowed,
    ActionValidationError,
    OrderNotFound,
)
from modules.orders.filters import OrderFilter
from modules.orders.handlers import RefetchOnChangeHandler
from modules.orders.policy import actions_for, classify_assignment, find_action
from modules.orders.repositories.interfaces import IOrderRepository
from shared.domain.bus import IEventBus
from shared.infrastructure.bus import event_bus as default_bus

logger = structlog.get_logger(__name__)

_CANCELLATION_TARGETS = {
    OrderStatus.REJECTED.value,
    OrderStatus.REJECTED_BY_TRANSPORTER.value,
    OrderStatus.CANCELLED_BY_TRANSPORTER.value,
    OrderStatus.CANCELLED_BY_WHOLESALER.value,
    OrderStatus.CANCELLED_BY_RETAILER.value,
}

_RETURN_TARGETS = {
    OrderStatus.RETURN_TO_WHOLESALER.value,
    OrderStatus.RETURN_REQUESTED.value,
}

_RETURN_HANDLING = {
    OrderStatus.RETURN_ACCEPTED.value: "accept",
    OrderStatus.RETURN_REJECTED.value: "reject",
}


def generate_tracking_number(length: int = 9) -> str:
    alphabet = string.ascii_uppercase + string.digits
    return TRACKING_NUMBER_PREFIX + "".join(secrets.choice(alphabet) for _ in range(length))


def reason_field(book: OrderBook, target_status: str) -> str:
    """Name of the body field the backend reads the reason from."""
    if book == OrderBook.WHOLESALER_ORDERS:
        return "reason"
    if book == OrderBook.RETAILER_ORDERS:
        if target_status in _CANCELLATION_TARGETS:
            return "cancellationReason"
        if target_status in _RETURN_TARGETS:
            return "returnReason"
        if target_status == OrderStatus.DISPUTED.value:
            return "disputeReason"
        if target_status in _RETURN_HANDLING:
            return "rejectionReason"
    return "notes"


class OrderActionService:
    """Application service for order actions.

    Receives the book repositories, the viewer session and the event
    bus via constructor injection (DIP).
    """

    def __init__(
        self,
        repositories: Mapping[OrderBook, IOrderRepository],
        session: UserSession,
        bus: IEventBus = default_bus,
    ) -> None:
        self._repositories = dict(repositories)
        self._session = session
        self._bus = bus

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_orders(
        self,
        book: OrderBook,
        status: Optional[str] = None,
        query: Optional[str] = None,
        include_free: bool = True,
    ) -> List[OrderDTO]:
        """Fetch a book and filter it client-side.

        ``status`` is also sent to the server, which may or may not
        honour it; the client-side filter makes the result exact.
        """
        filters: Dict[str, Any] = {}
        if status and status != ALL_FILTER:
            filters["status"] = status
        if book == OrderBook.RETAILER_ORDERS:
            filters["include_free"] = include_free
        orders = self._repository(book).list(filters)
        return OrderFilter(status=status, query=query).apply(orders)

    def get_order(self, book: OrderBook, order_id: str) -> OrderDTO:
        """Raises:
        OrderNotFound: the server does not know ``order_id``.
        """
        order = self._repository(book).get_by_id(order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def available_actions(
        self, order: OrderDTO, book: OrderBook = OrderBook.RETAILER_ORDERS
    ) -> Tuple[ActionDTO, ...]:
        return actions_for(order, self._session.user_id, self._session.role, book)

    def watch(
        self,
        book: OrderBook,
        on_refresh: Callable[[List[OrderDTO]], None],
        status: Optional[str] = None,
        query: Optional[str] = None,
        on_error: Optional[Callable[[ApiError], None]] = None,
    ) -> RefetchOnChangeHandler:
        """Re-fetch ``book`` after every mutation and hand the list to ``on_refresh``.

        A failed re-fetch never fails the mutation that triggered it; it
        is logged and passed to ``on_error``.  Returns the handler so the
        caller can ``unwatch`` it.
        """
        handler = RefetchOnChangeHandler(
            book=book.value,
            fetch=lambda: self.list_orders(book, status=status, query=query),
            on_refresh=on_refresh,
            on_error=on_error,
        )
        self._bus.subscribe(OrderStatusChanged, handler)
        self._bus.subscribe(OrderDeleted, handler)
        return handler

    def unwatch(self, handler: RefetchOnChangeHandler) -> None:
        self._bus.unsubscribe(OrderStatusChanged, handler)
        self._bus.unsubscribe(OrderDeleted, handler)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def perform(
        self,
        order: OrderDTO,
        action_name: str,
        reason: Optional[str] = None,
        transporter_id: Optional[str] = None,
        book: OrderBook = OrderBook.RETAILER_ORDERS,
    ) -> Optional[OrderDTO]:
        """Run a policy action on ``order``.

        Returns the server's updated order, or ``None`` for ``delete``.

        Raises:
            ActionNotAllowed: the policy does not offer ``action_name``.
            ActionValidationError: a required reason is blank.
            Unauthorized / Conflict / NetworkError / ServerError: from the
                backend call.
        """
        action = find_action(self.available_actions(order, book), action_name)
        log = logger.bind(
            order_id=order.id,
            book=book.value,
            action=action_name,
            current_status=order.status,
        )
        if action is None:
            log.warning("order.action_not_allowed", role=self._session.role)
            raise ActionNotAllowed(
                f"Action '{action_name}' is not available for order {order.id} "
                f"in status '{order.status}'."
            )
        self._check_reason(action.requires_reason, reason)

        if action.target_status is None:
            self._repository(book).delete(order.id)
            log.info("order.action_dispatched")
            self._bus.publish(OrderDeleted(aggregate_id=order.id, book=book.value))
            return None

        assignment_type: Optional[AssignmentType] = None
        if action.target_status == OrderStatus.ASSIGNED_TO_TRANSPORTER.value:
            assignment_type = AssignmentType.SPECIFIC if transporter_id else AssignmentType.FREE
        elif (
            action.target_status == OrderStatus.ACCEPTED_BY_TRANSPORTER.value
            and self._session.role == Role.TRANSPORTER.value
            and classify_assignment(order.transporter, self._session.user_id) == Assignment.FREE
        ):
            transporter_id = self._session.user_id

        update = self._build_update(
            order.id, action.target_status, reason, transporter_id, assignment_type
        )
        return self._send(book, update, old_status=order.status)

    def dispatch(
        self,
        order_id: str,
        target_status: str,
        reason: Optional[str] = None,
        *,
        book: OrderBook = OrderBook.RETAILER_ORDERS,
        requires_reason: bool = False,
        transporter_id: Optional[str] = None,
        assignment_type: Optional[AssignmentType] = None,
    ) -> OrderDTO:
        """Submit a status change for ``order_id`` without consulting the policy.

        Raises:
            ActionValidationError: incomplete request (blank id/status,
                blank required reason, specific assignment without
                transporter); nothing is sent.
            Unauthorized / Conflict / NetworkError / ServerError: from the
                backend call.
        """
        self._check_reason(requires_reason, reason)
        update = self._build_update(
            order_id, target_status, reason, transporter_id, assignment_type
        )
        return self._send(book, update)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _repository(self, book: OrderBook) -> IOrderRepository:
        try:
            return self._repositories[book]
        except KeyError:
            raise ValueError(f"No repository configured for book '{book.value}'.") from None

    @staticmethod
    def _build_update(
        order_id: str,
        target_status: str,
        reason: Optional[str],
        transporter_id: Optional[str],
        assignment_type: Optional[AssignmentType],
    ) -> StatusUpdateDTO:
        try:
            return StatusUpdateDTO(
                order_id=order_id,
                target_status=target_status,
                reason=reason,
                transporter_id=transporter_id,
                assignment_type=assignment_type,
            )
        except ValidationError as exc:
            raise ActionValidationError(str(exc)) from exc

    @staticmethod
    def _check_reason(requires_reason: bool, reason: Optional[str]) -> None:
        if requires_reason and (reason is None or not reason.strip()):
            raise ActionValidationError("A reason is required for this action.")

    def _send(
        self,
        book: OrderBook,
        update: StatusUpdateDTO,
        old_status: Optional[str] = None,
    ) -> OrderDTO:
        repository = self._repository(book)
        log = logger.bind(
            order_id=update.order_id,
            book=book.value,
            new_status=update.target_status,
        )
        log.info("order.action_requested")

        target = update.target_status
        if book == OrderBook.RETAILER_ORDERS and target in _RETURN_HANDLING:
            updated = repository.handle_return(  # type: ignore[attr-defined]
                update.order_id,
                {"action": _RETURN_HANDLING[target], "rejectionReason": update.reason or ""},
            )
        elif book == OrderBook.SUPPLIER_ORDERS and target == OrderStatus.SHIPPED.value:
            updated = repository.ship(  # type: ignore[attr-defined]
                update.order_id,
                {
                    "trackingNumber": generate_tracking_number(),
                    "shippedAt": datetime.now(timezone.utc).isoformat(),
                },
            )
        else:
            updated = repository.update_status(update.order_id, self._payload(book, update))

        if updated is None:
            updated = repository.get_by_id(update.order_id)
            if updated is None:
                raise OrderNotFound(f"Order {update.order_id} not found after update.")

        log.info("order.action_dispatched", server_status=updated.status)
        self._bus.publish(
            OrderStatusChanged(
                aggregate_id=update.order_id,
                book=book.value,
                old_status=old_status,
                new_status=updated.status,
            )
        )
        return updated

    @staticmethod
    def _payload(book: OrderBook, update: StatusUpdateDTO) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"status": update.target_status}
        if update.reason is not None:
            payload[reason_field(book, update.target_status)] = update.reason
        if update.assignment_type is not None:
            payload["assignmentType"] = update.assignment_type.value
        if update.transporter_id is not None:
            payload["transporterId"] = update.transporter_id
        return payload
