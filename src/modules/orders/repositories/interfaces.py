"""Order repository interface.

Extends ``IRepository[OrderDTO]`` with the mutations the order books
expose.  Each implementation is bound to one ``OrderBook`` and speaks
that book's endpoint conventions; the Service Layer depends
exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository
from modules.orders.constants import OrderBook
from modules.orders.dtos import OrderDTO


class IOrderRepository(IRepository[OrderDTO]):
    """Repository contract for one order book."""

    book: OrderBook

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[OrderDTO]:
        """Fetch one order; ``None`` if the server does not know it."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[OrderDTO]:
        """Fetch the viewer's orders; ``filters`` become query params."""

    @abstractmethod
    def update_status(self, id: str, payload: Dict[str, Any]) -> Optional[OrderDTO]:
        """Request a status change.

        Returns the server's updated order, or ``None`` when the
        response does not include it.
        """

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Delete an order; ``True`` once the server confirmed it."""
