"""
Infrastructure Repository - Prediction MongoDB Implementation

Append-only storage of delivery predictions. Factor breakdowns are stored
with the same camelCase keys the API returns.
"""

from typing import Any, Dict, List, Sequence
from uuid import UUID

import structlog
from pymongo.errors import PyMongoError

from src.domain.entities.errors import PersistenceError
from src.domain.entities.prediction import FactorBreakdown, Prediction
from src.domain.repositories.prediction_repository import IPredictionRepository
from src.infrastructure.database import MongoDatabase, as_float, as_utc_datetime

logger = structlog.get_logger(__name__)


def factors_from_document(data: Dict[str, Any]) -> FactorBreakdown:
    """Rebuild a factor breakdown from its stored camelCase form."""
    return FactorBreakdown(
        distance=as_float(data.get("distance")),
        distance_category=data.get("distanceCategory") or "",
        distance_resolved=bool(data.get("distanceResolved", False)),
        base_hours=as_float(data.get("baseHours")),
        carrier_factor=as_float(data.get("carrierFactor"), 1.0),
        seasonal_factor=as_float(data.get("seasonalFactor"), 1.0),
        season=data.get("season") or "",
        weight_factor=as_float(data.get("weightFactor"), 1.0),
        volume_factor=as_float(data.get("volumeFactor"), 1.0),
        priority_factor=as_float(data.get("priorityFactor"), 1.0),
        random_factor=as_float(data.get("randomFactor"), 1.0),
        use_real_time=bool(data.get("useRealTime", False)),
        weather_condition=data.get("weatherCondition") or "unknown",
        temperature=data.get("temperature"),
        wind_speed=data.get("windSpeed"),
        weather_factor=as_float(data.get("weatherFactor"), 1.0),
        traffic_level=data.get("trafficLevel") or "unknown",
        traffic_factor=as_float(data.get("trafficFactor"), 1.0),
        time_of_day_factor=as_float(data.get("timeOfDayFactor"), 1.0),
    )


class PredictionRepository(IPredictionRepository):
    """MongoDB implementation of the prediction repository."""

    def __init__(self, database: MongoDatabase):
        self.database = database
        self.collection_name = database.predictions_collection

    async def save(self, prediction: Prediction) -> Prediction:
        try:
            await self.database.insert_one(
                self.collection_name, self._to_document(prediction)
            )
        except PyMongoError as e:
            logger.error(
                "predictions.insert_failed",
                prediction_id=str(prediction.id),
                order_id=prediction.order_id,
                error=str(e),
            )
            raise PersistenceError(
                "Failed to persist prediction", {"order_id": prediction.order_id}
            ) from e

        logger.debug(
            "predictions.inserted",
            prediction_id=str(prediction.id),
            order_id=prediction.order_id,
        )
        return prediction

    async def save_many(self, predictions: Sequence[Prediction]) -> int:
        documents = [self._to_document(prediction) for prediction in predictions]
        try:
            inserted = await self.database.insert_many(self.collection_name, documents)
        except PyMongoError as e:
            logger.error(
                "predictions.insert_many_failed",
                prediction_count=len(documents),
                error=str(e),
            )
            raise PersistenceError(
                "Failed to persist predictions", {"count": len(documents)}
            ) from e

        logger.debug("predictions.inserted_many", prediction_count=inserted)
        return inserted

    async def find_recent(self, limit: int = 20) -> List[Prediction]:
        try:
            documents = await self.database.find_many(
                self.collection_name,
                {},
                sort_by="created_at",
                sort_direction=-1,
                limit=limit,
            )
        except PyMongoError as e:
            logger.error("predictions.find_recent_failed", error=str(e))
            raise PersistenceError("Failed to read predictions") from e

        return [self._to_entity(document) for document in documents]

    def _to_document(self, prediction: Prediction) -> Dict[str, Any]:
        return {
            "id": str(prediction.id),
            "order_id": prediction.order_id,
            "predicted_delivery": prediction.predicted_delivery,
            "predicted_hours": prediction.predicted_hours,
            "confidence_score": prediction.confidence_score,
            "factors": prediction.factors.to_dict(),
            "model_version": prediction.model_version,
            "created_at": prediction.created_at,
        }

    def _to_entity(self, document: Dict[str, Any]) -> Prediction:
        return Prediction(
            id=UUID(document["id"]),
            order_id=str(document["order_id"]),
            predicted_delivery=as_utc_datetime(document["predicted_delivery"]),
            predicted_hours=float(document["predicted_hours"]),
            confidence_score=float(document["confidence_score"]),
            factors=factors_from_document(document.get("factors") or {}),
            model_version=document.get("model_version") or "",
            created_at=as_utc_datetime(document["created_at"]),
        )
