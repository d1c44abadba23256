"""
Domain Repository Interface - Order

Read-only contract over the external order store.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from src.domain.entities.order import Order, OrderPage


class IOrderRepository(ABC):
    """Interface for reading orders."""

    @abstractmethod
    async def find_by_id(self, order_id: str) -> Optional[Order]:
        """Get an order by ID, or None when it does not exist."""
        pass

    @abstractmethod
    async def find_by_ids(self, order_ids: Sequence[str]) -> List[Order]:
        """Get every existing order among the given IDs, in any order."""
        pass

    @abstractmethod
    async def find_delivered(self, skip: int = 0, limit: int = 100) -> OrderPage:
        """
        Page through orders that have an actual delivery timestamp.

        Pages are stable: ordering is by creation time, then ID. The page
        reports how many raw documents were read so paging stays aligned
        when some of them are malformed.
        """
        pass
