"""Wiring for the Orders module."""

from __future__ import annotations

from shared.domain.bus import IEventBus
from shared.infrastructure.bus import event_bus as default_bus


def register_handlers(bus: IEventBus = default_bus) -> None:
    """Subscribe the Orders logging handlers; safe to call more than once."""
    from modules.orders.events import OrderDeleted, OrderStatusChanged
    from modules.orders.handlers import (
        order_deleted_handler,
        order_status_changed_handler,
    )

    bus.subscribe(OrderStatusChanged, order_status_changed_handler)
    bus.subscribe(OrderDeleted, order_deleted_handler)


def build_order_service(api, bus: IEventBus = default_bus):
    """Build an ``OrderActionService`` for the session currently held by ``api``.

    The retailer-orders list endpoint depends on the viewer, so the
    repository is created for the session's role.
    """
    from modules.core.exceptions import Unauthorized
    from modules.orders.constants import OrderBook, Role
    from modules.orders.repositories import (
        RetailerOrderHttpRepository,
        SupplierOrderHttpRepository,
        WholesalerOrderHttpRepository,
    )
    from modules.orders.services import OrderActionService

    session = api.session
    if session is None:
        raise Unauthorized("Authentication required. Please log in again.")

    viewer_roles = {Role.RETAILER.value, Role.WHOLESALER.value, Role.TRANSPORTER.value}
    viewer_role = session.role if session.role in viewer_roles else Role.WHOLESALER.value

    register_handlers(bus)
    return OrderActionService(
        repositories={
            OrderBook.RETAILER_ORDERS: RetailerOrderHttpRepository(api, viewer_role=viewer_role),
            OrderBook.WHOLESALER_ORDERS: WholesalerOrderHttpRepository(api),
            OrderBook.SUPPLIER_ORDERS: SupplierOrderHttpRepository(api),
        },
        session=session,
        bus=bus,
    )
