"""
Domain Entities - Order

Read-only view of a shipment owned by the external order store.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Order:
    """Shipment attributes consumed by the prediction engine."""

    id: str
    origin: str
    destination: str
    created_at: datetime
    weight: float = 0.0
    volume: float = 0.0
    carrier: str = ""
    priority: Optional[str] = None
    actual_delivery: Optional[datetime] = None
    estimated_delivery: Optional[datetime] = None
    order_number: Optional[str] = None
    status: Optional[str] = None

    @property
    def is_delivered(self) -> bool:
        return self.actual_delivery is not None

    def actual_transit_hours(self) -> Optional[float]:
        """Elapsed hours between creation and delivery, if delivered."""
        if self.actual_delivery is None:
            return None
        return (self.actual_delivery - self.created_at).total_seconds() / 3600

    def feature_snapshot(self) -> Dict[str, Any]:
        return {
            "origin": self.origin,
            "destination": self.destination,
            "weight": self.weight,
            "volume": self.volume,
            "carrier": self.carrier,
            "priority": self.priority,
        }


@dataclass(frozen=True)
class OrderPage:
    """
    One page read from the order store.

    ``fetched`` counts the raw documents read, including those that could not
    be parsed into ``orders``; callers advance their offset by it.
    """

    orders: List[Order]
    fetched: int
