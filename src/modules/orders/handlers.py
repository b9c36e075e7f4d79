"""Event handlers for Orders domain events."""

from __future__ import annotations

from typing import Any, Callable, Optional, Union

import structlog

from modules.core.exceptions import ApiError
from modules.orders.events import OrderDeleted, OrderStatusChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=event.aggregate_id,
            book=event.book,
            old_status=event.old_status,
            new_status=event.new_status,
        )


class OrderDeletedHandler(IEventHandler[OrderDeleted]):
    def handle(self, event: OrderDeleted) -> None:
        logger.info("order.event.deleted", order_id=event.aggregate_id, book=event.book)


class RefetchOnChangeHandler:
    """Re-fetch a whole order list whenever one of its orders changes.

    ``fetch`` is called with no arguments; its result is handed to
    ``on_refresh``.  Events for other books are ignored.

    The mutation that triggered the event has already been applied, so a
    failed re-fetch is logged and handed to ``on_error`` instead of being
    raised to the publisher.
    """

    def __init__(
        self,
        book: str,
        fetch: Callable[[], Any],
        on_refresh: Callable[[Any], None],
        on_error: Optional[Callable[[ApiError], None]] = None,
    ) -> None:
        self.book = book
        self._fetch = fetch
        self._on_refresh = on_refresh
        self._on_error = on_error

    def handle(self, event: Union[OrderStatusChanged, OrderDeleted]) -> None:
        if event.book != self.book:
            return
        logger.info("order.list_refetch", book=self.book, order_id=event.aggregate_id)
        try:
            orders = self._fetch()
        except ApiError as exc:
            logger.warning(
                "order.list_refetch_failed",
                book=self.book,
                order_id=event.aggregate_id,
                error=exc.message,
                status_code=exc.status_code,
            )
            if self._on_error is not None:
                self._on_error(exc)
            return
        self._on_refresh(orders)


order_status_changed_handler = OrderStatusChangedHandler()
order_deleted_handler = OrderDeletedHandler()
