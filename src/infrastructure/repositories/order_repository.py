"""
Infrastructure Repository - Order MongoDB Implementation

Read-only access to the orders collection owned by the order service.
"""

from typing import Any, Dict, List, Optional, Sequence

import structlog
from pymongo.errors import PyMongoError

from src.domain.entities.errors import OrderStoreError
from src.domain.entities.order import Order, OrderPage
from src.domain.repositories.order_repository import IOrderRepository
from src.infrastructure.database import MongoDatabase, as_float, as_utc_datetime

logger = structlog.get_logger(__name__)


class OrderRepository(IOrderRepository):
    """MongoDB implementation of the order repository."""

    def __init__(self, database: MongoDatabase):
        self.database = database
        self.collection_name = database.orders_collection

    async def find_by_id(self, order_id: str) -> Optional[Order]:
        try:
            document = await self.database.find_one(
                self.collection_name, {"id": order_id}
            )
        except PyMongoError as e:
            logger.error("orders.find_failed", order_id=order_id, error=str(e))
            raise OrderStoreError(f"Failed to read order {order_id}") from e

        if not document:
            return None
        return self._to_entity_or_none(document)

    async def find_by_ids(self, order_ids: Sequence[str]) -> List[Order]:
        ids = list(order_ids)
        if not ids:
            return []
        try:
            documents = await self.database.find_many(
                self.collection_name, {"id": {"$in": ids}}, limit=len(ids)
            )
        except PyMongoError as e:
            logger.error("orders.find_many_failed", order_count=len(ids), error=str(e))
            raise OrderStoreError("Failed to read orders") from e

        return self._to_entities(documents)

    async def find_delivered(self, skip: int = 0, limit: int = 100) -> OrderPage:
        try:
            documents = await self.database.find_many(
                self.collection_name,
                {"actual_delivery": {"$ne": None}},
                sort_by=[("created_at", 1), ("id", 1)],
                skip=skip,
                limit=limit,
            )
        except PyMongoError as e:
            logger.error("orders.find_delivered_failed", skip=skip, error=str(e))
            raise OrderStoreError("Failed to read delivered orders") from e

        return OrderPage(orders=self._to_entities(documents), fetched=len(documents))

    def _to_entities(self, documents: List[Dict[str, Any]]) -> List[Order]:
        orders = []
        for document in documents:
            order = self._to_entity_or_none(document)
            if order is not None:
                orders.append(order)
        return orders

    def _to_entity_or_none(self, document: Dict[str, Any]) -> Optional[Order]:
        try:
            return self._to_entity(document)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                "orders.document_invalid", order_id=document.get("id"), error=str(e)
            )
            return None

    def _to_entity(self, document: Dict[str, Any]) -> Order:
        """Convert a MongoDB document to an Order entity."""
        created_at = as_utc_datetime(document["created_at"])
        if created_at is None:
            raise ValueError("created_at is required")

        return Order(
            id=str(document["id"]),
            origin=document.get("origin") or "",
            destination=document.get("destination") or "",
            created_at=created_at,
            weight=as_float(document.get("weight")),
            volume=as_float(document.get("volume")),
            carrier=document.get("carrier") or "",
            priority=document.get("priority"),
            actual_delivery=as_utc_datetime(document.get("actual_delivery")),
            estimated_delivery=as_utc_datetime(document.get("estimated_delivery")),
            order_number=document.get("order_number"),
            status=document.get("status"),
        )
