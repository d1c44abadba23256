"""
Infrastructure Repository - Training Record MongoDB Implementation

Append-only storage of audit comparisons.
"""

from typing import Any, Dict, List, Sequence
from uuid import UUID

import structlog
from pymongo.errors import PyMongoError

from src.domain.entities.errors import PersistenceError
from src.domain.entities.training_record import TrainingRecord
from src.domain.repositories.training_record_repository import (
    ITrainingRecordRepository,
)
from src.infrastructure.database import MongoDatabase, as_utc_datetime

logger = structlog.get_logger(__name__)


class TrainingRecordRepository(ITrainingRecordRepository):
    """MongoDB implementation of the training record repository."""

    def __init__(self, database: MongoDatabase):
        self.database = database
        self.collection_name = database.training_collection

    async def save_many(self, records: Sequence[TrainingRecord]) -> int:
        documents = [self._to_document(record) for record in records]
        try:
            inserted = await self.database.insert_many(self.collection_name, documents)
        except PyMongoError as e:
            logger.error(
                "training_records.insert_many_failed",
                record_count=len(documents),
                error=str(e),
            )
            raise PersistenceError(
                "Failed to persist training records", {"count": len(documents)}
            ) from e
        return inserted

    async def find_recent(self, limit: int = 1000) -> List[TrainingRecord]:
        try:
            documents = await self.database.find_many(
                self.collection_name,
                {},
                sort_by="created_at",
                sort_direction=-1,
                limit=limit,
            )
        except PyMongoError as e:
            logger.error("training_records.find_recent_failed", error=str(e))
            raise PersistenceError("Failed to read training records") from e

        return [self._to_entity(document) for document in documents]

    def _to_document(self, record: TrainingRecord) -> Dict[str, Any]:
        return {
            "id": str(record.id),
            "order_id": record.order_id,
            "features": record.features,
            "actual_delivery": record.actual_delivery,
            "predicted_delivery": record.predicted_delivery,
            "prediction_error_hours": record.prediction_error_hours,
            "model_version": record.model_version,
            "created_at": record.created_at,
        }

    def _to_entity(self, document: Dict[str, Any]) -> TrainingRecord:
        return TrainingRecord(
            id=UUID(document["id"]),
            order_id=str(document["order_id"]),
            features=document.get("features") or {},
            actual_delivery=as_utc_datetime(document["actual_delivery"]),
            predicted_delivery=as_utc_datetime(document["predicted_delivery"]),
            prediction_error_hours=float(document.get("prediction_error_hours") or 0),
            model_version=document.get("model_version") or "",
            created_at=as_utc_datetime(document["created_at"]),
        )
