"""Order repositories package."""

from modules.orders.repositories.http_repository import (
    RetailerOrderHttpRepository,
    SupplierOrderHttpRepository,
    WholesalerOrderHttpRepository,
)
from modules.orders.repositories.interfaces import IOrderRepository

__all__ = [
    "IOrderRepository",
    "RetailerOrderHttpRepository",
    "SupplierOrderHttpRepository",
    "WholesalerOrderHttpRepository",
]
