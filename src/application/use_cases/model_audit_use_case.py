"""
Application Use Case - Model Audit

Replays the Parametric Duration Model over delivered orders and compares each
recomputed estimate with the observed transit time. Orders are paged in
bounded chunks; the error aggregate is updated incrementally and each chunk's
training records are appended on a best-effort basis.
"""

from __future__ import annotations

from typing import Sequence

import structlog

from src.application.dtos.prediction_dto import TrainingResponseDTO
from src.application.use_cases.delivery_prediction_use_case import (
    PredictionDependencyError,
)
from src.domain.entities.errors import OrderStoreError
from src.domain.entities.order import Order, OrderPage
from src.domain.entities.prediction import delivery_after
from src.domain.entities.training_record import (
    AuditSummary,
    ErrorAccumulator,
    TrainingRecord,
)
from src.domain.repositories.order_repository import IOrderRepository
from src.domain.repositories.training_record_repository import (
    ITrainingRecordRepository,
)
from src.domain.services.fusion_predictor import FusionPredictor
from src.shared.concurrency import bounded_gather
from src.shared.logging import get_persistence_logger

logger = structlog.get_logger(__name__)
persistence_logger = get_persistence_logger()


class ModelAuditUseCase:
    """Measures the model's error against historical deliveries."""

    def __init__(
        self,
        order_repository: IOrderRepository,
        training_record_repository: ITrainingRecordRepository,
        predictor: FusionPredictor,
        chunk_size: int = 200,
        max_samples: int = 10000,
        concurrency: int = 10,
    ):
        self.order_repository = order_repository
        self.training_record_repository = training_record_repository
        self.predictor = predictor
        self.chunk_size = max(1, chunk_size)
        self.max_samples = max(0, max_samples)
        self.concurrency = concurrency

    async def execute(self, use_real_time: bool = True) -> TrainingResponseDTO:
        logger.info(
            "audit.start",
            use_real_time=use_real_time,
            chunk_size=self.chunk_size,
            max_samples=self.max_samples,
        )

        accumulator = ErrorAccumulator()
        skip = 0
        chunks = 0
        while skip < self.max_samples:
            limit = min(self.chunk_size, self.max_samples - skip)
            page = await self._load_chunk(skip, limit)
            if page.fetched == 0:
                break

            skipped = page.fetched - len(page.orders)
            if skipped:
                logger.warning("audit.orders_skipped", skip=skip, skipped=skipped)

            records = await bounded_gather(
                page.orders,
                lambda order: self._audit_order(order, use_real_time),
                self.concurrency,
            )
            for record in records:
                accumulator.add(record.prediction_error_hours)
            await self._persist_records(records)

            chunks += 1
            skip += page.fetched
            if page.fetched < limit:
                break

        summary = AuditSummary(
            training_samples=accumulator.samples,
            average_error_hours=accumulator.mean_error_hours,
            model_accuracy=accumulator.accuracy,
            use_real_time_features=use_real_time,
        )

        logger.info(
            "audit.completed",
            training_samples=summary.training_samples,
            average_error_hours=summary.average_error_hours,
            model_accuracy=summary.model_accuracy,
            chunks=chunks,
        )
        return TrainingResponseDTO.from_summary(summary)

    async def _load_chunk(self, skip: int, limit: int) -> OrderPage:
        try:
            return await self.order_repository.find_delivered(skip=skip, limit=limit)
        except OrderStoreError as exc:
            logger.error("audit.order_store_failed", skip=skip, error=str(exc))
            raise PredictionDependencyError("Order store is unavailable") from exc

    async def _audit_order(self, order: Order, use_real_time: bool) -> TrainingRecord:
        result = await self.predictor.predict(order, use_real_time, order.created_at)
        actual_hours = order.actual_transit_hours() or 0.0
        features = order.feature_snapshot()
        features["factors"] = result.factors.to_dict()

        return TrainingRecord(
            order_id=order.id,
            features=features,
            actual_delivery=order.actual_delivery or order.created_at,
            predicted_delivery=delivery_after(order.created_at, result.predicted_hours),
            prediction_error_hours=abs(actual_hours - result.predicted_hours),
            model_version=result.model_version,
        )

    async def _persist_records(self, records: Sequence[TrainingRecord]) -> bool:
        if not records:
            return True
        try:
            await self.training_record_repository.save_many(records)
        except Exception as exc:
            persistence_logger.error(
                "persistence.training_records.failed",
                record_count=len(records),
                error=str(exc),
            )
            return False
        return True
