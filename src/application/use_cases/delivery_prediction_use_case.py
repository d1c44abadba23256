"""
Application Use Case - Delivery Prediction

Runs the Parametric Duration Model for one order or a batch of orders.
Every call is two-phase: the estimate is computed first, then persisted on a
best-effort basis. Storage failures are reported on the persistence log
channel and never invalidate a computed estimate.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

import structlog

from src.application.dtos.prediction_dto import (
    BatchPredictionResponseDTO,
    PredictionResultDTO,
)
from src.domain.entities.errors import OrderStoreError
from src.domain.entities.order import Order
from src.domain.entities.prediction import Prediction, delivery_after
from src.domain.repositories.order_repository import IOrderRepository
from src.domain.repositories.prediction_repository import IPredictionRepository
from src.domain.services.fusion_predictor import FusionPredictor
from src.shared.concurrency import bounded_gather
from src.shared.logging import get_persistence_logger

logger = structlog.get_logger(__name__)
persistence_logger = get_persistence_logger()


class PredictionError(Exception):
    """Base exception for prediction failures."""

    pass


class PredictionNotFoundError(PredictionError):
    """Raised when a referenced order does not exist."""

    pass


class PredictionValidationError(PredictionError):
    """Raised when a request is missing or carries invalid fields."""

    pass


class PredictionDependencyError(PredictionError):
    """Raised when the order store cannot be read."""

    pass


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DeliveryPredictionUseCase:
    """Computes and records delivery-time estimates for live orders."""

    def __init__(
        self,
        order_repository: IOrderRepository,
        prediction_repository: IPredictionRepository,
        predictor: FusionPredictor,
        max_batch_size: int = 100,
        batch_concurrency: int = 10,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.order_repository = order_repository
        self.prediction_repository = prediction_repository
        self.predictor = predictor
        self.max_batch_size = max_batch_size
        self.batch_concurrency = batch_concurrency
        self._clock = clock or utc_now

    async def predict_single(
        self, order_id: Optional[str], use_real_time: bool = True
    ) -> PredictionResultDTO:
        if not order_id:
            raise PredictionValidationError("orderId is required for predict_single")

        order = await self._get_order(order_id)
        prediction = await self._compute(order, use_real_time)
        await self._persist_prediction(prediction)

        logger.info(
            "prediction.single.completed",
            order_id=order_id,
            predicted_hours=prediction.predicted_hours,
            confidence_score=prediction.confidence_score,
            model_version=prediction.model_version,
        )
        return PredictionResultDTO.from_domain(prediction)

    async def predict_batch(
        self, order_ids: Optional[Sequence[str]], use_real_time: bool = True
    ) -> BatchPredictionResponseDTO:
        requested = self._validate_batch(order_ids)

        orders_by_id = await self._get_orders(requested)
        missing = [order_id for order_id in requested if order_id not in orders_by_id]
        if missing:
            logger.warning(
                "prediction.batch.orders_missing",
                missing_count=len(missing),
                missing_ids=missing,
            )

        orders = [
            orders_by_id[order_id] for order_id in requested if order_id in orders_by_id
        ]
        predictions = await bounded_gather(
            orders,
            lambda order: self._compute(order, use_real_time),
            self.batch_concurrency,
        )
        await self._persist_predictions(predictions)

        logger.info(
            "prediction.batch.completed",
            requested=len(requested),
            predicted=len(predictions),
            use_real_time=use_real_time,
        )
        return BatchPredictionResponseDTO(
            predictions=[PredictionResultDTO.from_domain(p) for p in predictions]
        )

    def _validate_batch(self, order_ids: Optional[Sequence[str]]) -> List[str]:
        if not order_ids:
            raise PredictionValidationError(
                "batchOrderIds is required for predict_batch"
            )
        if any(not order_id for order_id in order_ids):
            raise PredictionValidationError(
                "batchOrderIds must not contain empty ids"
            )

        # Duplicates are predicted once, at their first position.
        requested = list(dict.fromkeys(order_ids))
        if len(requested) > self.max_batch_size:
            raise PredictionValidationError(
                f"batchOrderIds accepts at most {self.max_batch_size} ids"
            )
        return requested

    async def _get_order(self, order_id: str) -> Order:
        try:
            order = await self.order_repository.find_by_id(order_id)
        except OrderStoreError as exc:
            logger.error(
                "prediction.order_store_failed", order_id=order_id, error=str(exc)
            )
            raise PredictionDependencyError("Order store is unavailable") from exc

        if order is None:
            logger.warning("prediction.order_not_found", order_id=order_id)
            raise PredictionNotFoundError(f"Order {order_id} was not found")
        return order

    async def _get_orders(self, order_ids: Sequence[str]) -> Dict[str, Order]:
        try:
            orders = await self.order_repository.find_by_ids(order_ids)
        except OrderStoreError as exc:
            logger.error(
                "prediction.order_store_failed",
                order_count=len(order_ids),
                error=str(exc),
            )
            raise PredictionDependencyError("Order store is unavailable") from exc
        return {order.id: order for order in orders}

    async def _compute(self, order: Order, use_real_time: bool) -> Prediction:
        reference_time = self._clock()
        result = await self.predictor.predict(order, use_real_time, reference_time)
        return Prediction(
            order_id=order.id,
            predicted_delivery=delivery_after(reference_time, result.predicted_hours),
            predicted_hours=result.predicted_hours,
            confidence_score=result.confidence_score,
            factors=result.factors,
            model_version=result.model_version,
            created_at=reference_time,
        )

    async def _persist_prediction(self, prediction: Prediction) -> bool:
        try:
            await self.prediction_repository.save(prediction)
        except Exception as exc:
            persistence_logger.error(
                "persistence.prediction.failed",
                order_id=prediction.order_id,
                prediction_id=str(prediction.id),
                error=str(exc),
            )
            return False
        return True

    async def _persist_predictions(self, predictions: Sequence[Prediction]) -> bool:
        if not predictions:
            return True
        try:
            await self.prediction_repository.save_many(predictions)
        except Exception as exc:
            persistence_logger.error(
                "persistence.prediction_batch.failed",
                prediction_count=len(predictions),
                order_ids=[p.order_id for p in predictions],
                error=str(exc),
            )
            return False
        return True
