"""
Application Use Cases - Prediction Insights

Read-only views over persisted predictions and training records, as shown on
the delivery-time dashboard.
"""

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

import structlog

from src.application.dtos.prediction_dto import (
    ModelMetricsDTO,
    RecentPredictionDTO,
    RecentPredictionsResponseDTO,
)
from src.application.use_cases.delivery_prediction_use_case import (
    PredictionDependencyError,
    PredictionValidationError,
    utc_now,
)
from src.domain.entities.errors import OrderStoreError
from src.domain.entities.order import Order
from src.domain.entities.training_record import ErrorAccumulator
from src.domain.repositories.order_repository import IOrderRepository
from src.domain.repositories.prediction_repository import IPredictionRepository
from src.domain.repositories.training_record_repository import (
    ITrainingRecordRepository,
)

logger = structlog.get_logger(__name__)

MAX_RECENT_LIMIT = 100


class GetModelMetricsUseCase:
    """Summarizes accuracy over the latest training records."""

    def __init__(
        self, training_record_repository: ITrainingRecordRepository, window: int = 1000
    ):
        self.training_record_repository = training_record_repository
        self.window = window

    async def execute(self) -> Optional[ModelMetricsDTO]:
        records = await self.training_record_repository.find_recent(limit=self.window)
        if not records:
            return None

        accumulator = ErrorAccumulator()
        for record in records:
            accumulator.add(record.prediction_error_hours)

        return ModelMetricsDTO(
            accuracy=round(accumulator.accuracy * 100, 2),
            average_error=round(accumulator.mean_error_hours, 2),
            total_predictions=accumulator.samples,
            last_trained=records[0].created_at,
        )


class GetRecentPredictionsUseCase:
    """Lists the latest predictions with their order's display fields."""

    def __init__(
        self,
        prediction_repository: IPredictionRepository,
        order_repository: IOrderRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.prediction_repository = prediction_repository
        self.order_repository = order_repository
        self._clock = clock or utc_now

    async def execute(self, limit: int = 20) -> RecentPredictionsResponseDTO:
        if limit < 1 or limit > MAX_RECENT_LIMIT:
            raise PredictionValidationError(
                f"limit must be between 1 and {MAX_RECENT_LIMIT}"
            )

        predictions = await self.prediction_repository.find_recent(limit=limit)
        orders = await self._orders_for([p.order_id for p in predictions])
        now = self._clock()

        items: List[RecentPredictionDTO] = []
        for prediction in predictions:
            order = orders.get(prediction.order_id)
            remaining = self._hours_until(prediction.predicted_delivery, now)
            items.append(
                RecentPredictionDTO(
                    order_id=prediction.order_id,
                    order_number=order.order_number if order else None,
                    origin=order.origin if order else None,
                    destination=order.destination if order else None,
                    status=order.status if order else None,
                    predicted_delivery=prediction.predicted_delivery,
                    predicted_hours=remaining,
                    confidence_score=prediction.confidence_score,
                    factors=prediction.factors.to_dict(),
                    model_version=prediction.model_version,
                    created_at=prediction.created_at,
                )
            )
        return RecentPredictionsResponseDTO(predictions=items)

    async def _orders_for(self, order_ids: List[str]) -> Dict[str, Order]:
        if not order_ids:
            return {}
        try:
            orders = await self.order_repository.find_by_ids(
                list(dict.fromkeys(order_ids))
            )
        except OrderStoreError as exc:
            logger.error("prediction.recent.order_store_failed", error=str(exc))
            raise PredictionDependencyError("Order store is unavailable") from exc
        return {order.id: order for order in orders}

    @staticmethod
    def _hours_until(moment: datetime, now: datetime) -> float:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return max(0.0, (moment - now).total_seconds() / 3600)
