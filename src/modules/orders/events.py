"""Domain events for the Orders module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised after the server accepted a status change."""

    book: str = ""
    old_status: Optional[str] = None
    new_status: Optional[str] = None


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised after the server deleted an order."""

    book: str = ""
