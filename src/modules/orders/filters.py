"""Client-side filtering of a fetched order list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional

from modules.orders.constants import ALL_FILTER
from modules.orders.dtos import OrderDTO

_NAME_FIELDS = ("businessName", "firstName", "lastName", "name")


def _names(ref: Any) -> Iterator[str]:
    if isinstance(ref, dict):
        for field in _NAME_FIELDS:
            value = ref.get(field)
            if isinstance(value, str) and value:
                yield value


def _searchable_text(order: OrderDTO) -> Iterator[str]:
    if order.order_number:
        yield order.order_number
    for ref in (order.retailer, order.wholesaler, order.supplier, order.client, order.product):
        yield from _names(ref)
    for line in (*order.items, *order.products):
        yield from _names(line.get("product"))
        yield from _names(line)


@dataclass(frozen=True)
class OrderFilter:
    """Status + free-text filter applied after a fetch.

    ``status`` of ``None``, ``""`` or ``"all"`` keeps every status.
    ``query`` matches case-insensitively against order number,
    counterparty names and product names.
    """

    status: Optional[str] = None
    query: Optional[str] = None

    @property
    def _status(self) -> Optional[str]:
        if not self.status or self.status == ALL_FILTER:
            return None
        return self.status

    @property
    def _query(self) -> Optional[str]:
        if not self.query or not self.query.strip():
            return None
        return self.query.strip().lower()

    def matches(self, order: OrderDTO) -> bool:
        status = self._status
        if status is not None and order.status != status:
            return False
        query = self._query
        if query is None:
            return True
        return any(query in text.lower() for text in _searchable_text(order))

    def apply(self, orders: Iterable[OrderDTO]) -> List[OrderDTO]:
        return [order for order in orders if self.matches(order)]
