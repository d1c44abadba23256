from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pymongo.errors import PyMongoError

from src.domain.entities.errors import PersistenceError
from src.domain.entities.prediction import FactorBreakdown, Prediction
from src.domain.entities.training_record import TrainingRecord
from src.infrastructure.repositories.prediction_repository import (
    PredictionRepository,
    factors_from_document,
)
from src.infrastructure.repositories.training_record_repository import (
    TrainingRecordRepository,
)
from tests.conftest import FakeMongoDatabase

BASE = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

FACTORS = FactorBreakdown(
    distance=150.0,
    distance_category="short",
    distance_resolved=True,
    base_hours=19.2,
    carrier_factor=1.0,
    seasonal_factor=1.15,
    season="summer",
    weight_factor=1.0,
    volume_factor=1.0,
    priority_factor=1.0,
    random_factor=1.02,
    use_real_time=True,
    weather_condition="rain",
    weather_factor=1.25,
    traffic_level="slow",
    traffic_factor=1.15,
    time_of_day_factor=0.9,
)


def _prediction(order_id: str, minutes: int) -> Prediction:
    created_at = BASE + timedelta(minutes=minutes)
    return Prediction(
        order_id=order_id,
        predicted_delivery=created_at + timedelta(hours=30),
        predicted_hours=30.0,
        confidence_score=0.9,
        factors=FACTORS,
        model_version="PDM_v2.0_realtime",
        created_at=created_at,
    )


class _FailingDatabase(FakeMongoDatabase):
    async def insert_one(self, collection_name, document):
        raise PyMongoError("write concern")

    async def insert_many(self, collection_name, documents):
        raise PyMongoError("write concern")


@pytest.mark.asyncio
async def test_save_stores_camel_case_factors(
    fake_mongo_database: FakeMongoDatabase,
) -> None:
    repository = PredictionRepository(fake_mongo_database)
    prediction = _prediction("ord-1", 0)

    await repository.save(prediction)

    stored = fake_mongo_database.get_collection("delivery_predictions").inserts[0]
    assert stored["id"] == str(prediction.id)
    assert stored["order_id"] == "ord-1"
    assert stored["factors"]["weatherFactor"] == 1.25
    assert stored["factors"]["combinedRealTimeFactor"] == pytest.approx(1.25 * 1.15)


@pytest.mark.asyncio
async def test_save_many_uses_one_batched_write(
    fake_mongo_database: FakeMongoDatabase,
) -> None:
    repository = PredictionRepository(fake_mongo_database)

    inserted = await repository.save_many(
        [_prediction("ord-1", 0), _prediction("ord-2", 1)]
    )

    collection = fake_mongo_database.get_collection("delivery_predictions")
    assert inserted == 2
    assert collection.insert_many_calls == 1


@pytest.mark.asyncio
async def test_find_recent_returns_newest_first(
    fake_mongo_database: FakeMongoDatabase,
) -> None:
    repository = PredictionRepository(fake_mongo_database)
    for minutes, order_id in enumerate(["ord-1", "ord-2", "ord-3"]):
        await repository.save(_prediction(order_id, minutes))

    recent = await repository.find_recent(limit=2)

    assert [prediction.order_id for prediction in recent] == ["ord-3", "ord-2"]
    assert recent[0].factors == FACTORS


@pytest.mark.asyncio
async def test_write_failures_raise_persistence_error() -> None:
    repository = PredictionRepository(_FailingDatabase())

    with pytest.raises(PersistenceError):
        await repository.save(_prediction("ord-1", 0))
    with pytest.raises(PersistenceError):
        await repository.save_many([_prediction("ord-1", 0)])


def test_factors_from_document_fills_defaults() -> None:
    factors = factors_from_document({"distance": 100, "useRealTime": False})
    assert factors.distance == 100.0
    assert factors.carrier_factor == 1.0
    assert factors.weather_condition == "unknown"


@pytest.mark.asyncio
async def test_training_records_round_trip(
    fake_mongo_database: FakeMongoDatabase,
) -> None:
    repository = TrainingRecordRepository(fake_mongo_database)
    older = TrainingRecord(
        order_id="ord-1",
        features={"carrier": "ZTO Express"},
        actual_delivery=BASE,
        predicted_delivery=BASE + timedelta(hours=2),
        prediction_error_hours=2.0,
        model_version="PDM_v2.0_static",
        created_at=BASE,
    )
    newer = TrainingRecord(
        order_id="ord-2",
        features={},
        actual_delivery=BASE,
        predicted_delivery=BASE,
        prediction_error_hours=0.0,
        model_version="PDM_v2.0_static",
        created_at=BASE + timedelta(minutes=5),
    )

    assert await repository.save_many([older, newer]) == 2
    records = await repository.find_recent(limit=10)

    assert [record.order_id for record in records] == ["ord-2", "ord-1"]
    assert records[1] == older
