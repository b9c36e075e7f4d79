"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that the
book-specific order repositories extend.  Service-layer code depends
on this abstraction, never on the HTTP client directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the entity managed by the
    repository (e.g. ``OrderDTO``).  The backend owns the entities; a
    repository is a read-through view of the server's last answer.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its server-assigned identifier."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """List entities, passing ``filters`` to the server as query params."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove an entity by ID."""
