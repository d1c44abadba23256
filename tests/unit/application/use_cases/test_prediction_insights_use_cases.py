from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.application.use_cases.delivery_prediction_use_case import (
    PredictionDependencyError,
    PredictionValidationError,
)
from src.application.use_cases.prediction_insights_use_cases import (
    GetModelMetricsUseCase,
    GetRecentPredictionsUseCase,
)
from src.domain.entities.prediction import FactorBreakdown, Prediction
from src.domain.entities.training_record import TrainingRecord
from tests.conftest import (
    InMemoryOrderRepository,
    InMemoryPredictionRepository,
    InMemoryTrainingRecordRepository,
)

NOW = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)

FACTORS = FactorBreakdown(
    distance=1200.0,
    distance_category="long",
    distance_resolved=True,
    base_hours=31.2,
    carrier_factor=0.85,
    seasonal_factor=1.15,
    season="summer",
    weight_factor=1.05,
    volume_factor=1.001,
    priority_factor=1.0,
    random_factor=1.0,
    use_real_time=False,
)


def _record(error: float, minutes: int) -> TrainingRecord:
    return TrainingRecord(
        order_id=f"ord-{minutes}",
        features={},
        actual_delivery=NOW,
        predicted_delivery=NOW,
        prediction_error_hours=error,
        model_version="PDM_v2.0_static",
        created_at=NOW + timedelta(minutes=minutes),
    )


def _prediction(order_id: str, delivery_in_hours: float, minutes: int) -> Prediction:
    return Prediction(
        order_id=order_id,
        predicted_delivery=NOW + timedelta(hours=delivery_in_hours),
        predicted_hours=32.0,
        confidence_score=0.92,
        factors=FACTORS,
        model_version="PDM_v2.0_static",
        created_at=NOW - timedelta(minutes=minutes),
    )


@pytest.mark.asyncio
async def test_metrics_summarize_training_records() -> None:
    repository = InMemoryTrainingRecordRepository(
        [_record(2.0, 0), _record(4.0, 5), _record(3.0, 10)]
    )

    metrics = await GetModelMetricsUseCase(repository).execute()

    assert metrics is not None
    assert metrics.total_predictions == 3
    assert metrics.average_error == 3.0
    assert metrics.accuracy == 87.5
    assert metrics.last_trained == NOW + timedelta(minutes=10)


@pytest.mark.asyncio
async def test_metrics_window_limits_records() -> None:
    repository = InMemoryTrainingRecordRepository([_record(30.0, 0), _record(6.0, 5)])

    metrics = await GetModelMetricsUseCase(repository, window=1).execute()

    assert metrics is not None
    assert metrics.total_predictions == 1
    assert metrics.accuracy == 75.0


@pytest.mark.asyncio
async def test_metrics_without_records_is_none() -> None:
    use_case = GetModelMetricsUseCase(InMemoryTrainingRecordRepository())
    assert await use_case.execute() is None


@pytest.mark.asyncio
async def test_recent_predictions_join_orders(sample_order) -> None:
    predictions = InMemoryPredictionRepository()
    predictions.saved = [
        _prediction(sample_order.id, 10.0, minutes=5),
        _prediction("gone", -3.0, minutes=1),
    ]
    use_case = GetRecentPredictionsUseCase(
        predictions, InMemoryOrderRepository([sample_order]), clock=lambda: NOW
    )

    response = await use_case.execute(limit=10)

    newest, older = response.predictions
    assert newest.order_id == "gone"
    assert newest.order_number is None
    assert newest.predicted_hours == 0.0
    assert older.order_number == sample_order.order_number
    assert older.origin == sample_order.origin
    assert older.status == "in_transit"
    assert older.predicted_hours == pytest.approx(10.0)
    assert older.factors["carrierFactor"] == 0.85


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [0, 101])
async def test_recent_predictions_validate_limit(limit) -> None:
    use_case = GetRecentPredictionsUseCase(
        InMemoryPredictionRepository(), InMemoryOrderRepository()
    )
    with pytest.raises(PredictionValidationError):
        await use_case.execute(limit=limit)


@pytest.mark.asyncio
async def test_recent_predictions_order_store_failure() -> None:
    predictions = InMemoryPredictionRepository()
    predictions.saved = [_prediction("a", 1.0, minutes=0)]
    use_case = GetRecentPredictionsUseCase(
        predictions, InMemoryOrderRepository(fail=True)
    )

    with pytest.raises(PredictionDependencyError):
        await use_case.execute()
