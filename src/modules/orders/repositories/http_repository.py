"""HTTP implementations of the Order repository, one per order book.

Each repository is a read-through view of the backend: nothing is
cached, and every mutation is expected to be followed by a fresh
``list()`` (see ``OrderActionService``).

Endpoints
---------
* ``retailer_orders``: ``/api/retailer-orders``; the list endpoint
  depends on the viewer (``/wholesaler``, ``/transporter``,
  ``/retailer``), status changes go to ``/{id}/status`` and return
  handling to ``/{id}/handle-return``.
* ``wholesaler_orders``: ``/api/wholesaler-orders``, status changes to
  ``/{id}/status``.
* ``supplier_orders``: ``/api/supplier/orders``, status changes are a
  plain ``PUT /{id}`` and shipping goes to ``/{id}/ship``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog
from pydantic import ValidationError

from modules.core.exceptions import NotFound
from modules.core.http import ApiClient, unwrap_collection, unwrap_entity
from modules.orders.constants import OrderBook, Role
from modules.orders.dtos import OrderDTO
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


def parse_orders(items: Iterable[Any], book: OrderBook) -> List[OrderDTO]:
    """Validate raw order dicts, skipping (and logging) malformed entries."""
    orders: List[OrderDTO] = []
    for raw in items:
        try:
            orders.append(OrderDTO.model_validate(raw))
        except ValidationError as exc:
            logger.warning(
                "order.malformed_entry_skipped",
                book=book.value,
                errors=exc.error_count(),
            )
    return orders


class HttpOrderRepository(IOrderRepository):
    """Shared plumbing for the book-specific repositories."""

    base_path: str = ""
    book: OrderBook

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def list_path(self) -> str:
        return self.base_path

    def detail_path(self, id: str) -> str:
        return f"{self.base_path}/{id}"

    def status_path(self, id: str) -> str:
        return f"{self.base_path}/{id}/status"

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[OrderDTO]:
        try:
            body = self._api.get(self.detail_path(id))
        except NotFound:
            return None
        return self._order_from(body, id)

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[OrderDTO]:
        params = {k: v for k, v in (filters or {}).items() if v is not None}
        body = self._api.get(self.list_path(), params=params or None)
        orders = parse_orders(unwrap_collection(body, "orders"), self.book)
        logger.info("order.list_fetched", book=self.book.value, count=len(orders))
        return orders

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def update_status(self, id: str, payload: Dict[str, Any]) -> Optional[OrderDTO]:
        body = self._api.put(self.status_path(id), json=payload)
        return self._order_from(body, id)

    def delete(self, id: str) -> bool:
        self._api.delete(self.detail_path(id))
        logger.info("order.deleted", book=self.book.value, order_id=id)
        return True

    def _order_from(self, body: Dict[str, Any], id: str) -> Optional[OrderDTO]:
        entity = unwrap_entity(body, "order")
        if entity is None:
            return None
        try:
            return OrderDTO.model_validate(entity)
        except ValidationError:
            # Some endpoints answer with a partial summary instead of the order.
            logger.info("order.partial_order_response", book=self.book.value, order_id=id)
            return None


class RetailerOrderHttpRepository(HttpOrderRepository):
    """Retailer -> wholesaler orders, as seen by ``viewer_role``."""

    base_path = "/api/retailer-orders"
    book = OrderBook.RETAILER_ORDERS

    def __init__(self, api: ApiClient, viewer_role: str = Role.WHOLESALER.value) -> None:
        super().__init__(api)
        self.viewer_role = viewer_role

    def list_path(self) -> str:
        return f"{self.base_path}/{self.viewer_role}"

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[OrderDTO]:
        filters = dict(filters or {})
        include_free = filters.pop("include_free", None)
        if self.viewer_role == Role.TRANSPORTER.value:
            filters["includeFree"] = "false" if include_free is False else "true"
        return super().list(filters)

    def handle_return(self, id: str, payload: Dict[str, Any]) -> Optional[OrderDTO]:
        """Accept or reject a return (``{"action": "accept"|"reject", ...}``)."""
        body = self._api.put(f"{self.base_path}/{id}/handle-return", json=payload)
        return self._order_from(body, id)


class WholesalerOrderHttpRepository(HttpOrderRepository):
    """Wholesaler's outgoing orders to suppliers."""

    base_path = "/api/wholesaler-orders"
    book = OrderBook.WHOLESALER_ORDERS


class SupplierOrderHttpRepository(HttpOrderRepository):
    """Orders received by a supplier."""

    base_path = "/api/supplier/orders"
    book = OrderBook.SUPPLIER_ORDERS

    def status_path(self, id: str) -> str:
        return self.detail_path(id)

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[OrderDTO]:
        filters = dict(filters or {})
        status = filters.get("status")
        if isinstance(status, (list, tuple, set)):
            filters["status"] = ",".join(status)
        return super().list(filters)

    def ship(self, id: str, payload: Dict[str, Any]) -> Optional[OrderDTO]:
        """Mark as shipped with ``trackingNumber`` and ``shippedAt``."""
        body = self._api.put(f"{self.detail_path(id)}/ship", json=payload)
        return self._order_from(body, id)
