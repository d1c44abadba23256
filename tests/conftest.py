from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from src.domain.entities.errors import OrderStoreError, PersistenceError  # noqa: E402
from src.domain.entities.factor_tables import FactorTables  # noqa: E402
from src.domain.entities.order import Order, OrderPage  # noqa: E402
from src.domain.entities.prediction import Prediction  # noqa: E402
from src.domain.entities.realtime import TrafficReading, WeatherReading  # noqa: E402
from src.domain.entities.training_record import TrainingRecord  # noqa: E402
from src.domain.gateways.traffic_gateway import ITrafficGateway  # noqa: E402
from src.domain.gateways.weather_gateway import IWeatherGateway  # noqa: E402
from src.domain.repositories.order_repository import IOrderRepository  # noqa: E402
from src.domain.repositories.prediction_repository import (  # noqa: E402
    IPredictionRepository,
)
from src.domain.repositories.training_record_repository import (  # noqa: E402
    ITrainingRecordRepository,
)
from src.domain.services.factor_model import StaticFactorModel  # noqa: E402
from src.domain.services.fusion_predictor import FusionPredictor  # noqa: E402
from src.domain.services.realtime_features import (  # noqa: E402
    RealTimeFeatureProvider,
)


class FixedRandomSource:
    """Returns ``value`` when it lies in the range, else the range midpoint."""

    def __init__(self, value: Optional[float] = None) -> None:
        self.value = value
        self.calls: List[Tuple[float, float]] = []

    def uniform(self, low: float, high: float) -> float:
        self.calls.append((low, high))
        if self.value is not None and low <= self.value <= high:
            return self.value
        return (low + high) / 2


class StubWeatherGateway(IWeatherGateway):
    def __init__(
        self,
        reading: Optional[WeatherReading] = None,
        *,
        enabled: bool = True,
        error: Optional[Exception] = None,
    ) -> None:
        self._reading = reading or WeatherReading(condition="clear")
        self._enabled = enabled
        self._error = error
        self.calls: List[str] = []

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def current_weather(self, city: str) -> WeatherReading:
        self.calls.append(city)
        if self._error is not None:
            raise self._error
        return self._reading


class StubTrafficGateway(ITrafficGateway):
    def __init__(
        self,
        reading: Optional[TrafficReading] = None,
        *,
        enabled: bool = True,
        error: Optional[Exception] = None,
    ) -> None:
        self._reading = reading or TrafficReading(level="smooth")
        self._enabled = enabled
        self._error = error
        self.calls: List[Tuple[str, Optional[str]]] = []

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def traffic_status(
        self, address: str, city: Optional[str] = None
    ) -> TrafficReading:
        self.calls.append((address, city))
        if self._error is not None:
            raise self._error
        return self._reading


def build_predictor(
    *,
    weather: Optional[IWeatherGateway] = None,
    traffic: Optional[ITrafficGateway] = None,
    random_value: Optional[float] = None,
    tables: Optional[FactorTables] = None,
    timeout_seconds: float = 5.0,
) -> FusionPredictor:
    tables = tables or FactorTables()
    provider = RealTimeFeatureProvider(
        weather_gateway=weather or StubWeatherGateway(enabled=False),
        traffic_gateway=traffic or StubTrafficGateway(enabled=False),
        tables=tables,
        timeout_seconds=timeout_seconds,
        utc_offset_hours=0.0,
    )
    return FusionPredictor(
        factor_model=StaticFactorModel(tables),
        feature_provider=provider,
        random_source=FixedRandomSource(random_value),
    )


class InMemoryOrderRepository(IOrderRepository):
    def __init__(self, orders: Sequence[Order] = (), *, fail: bool = False) -> None:
        self.orders: Dict[str, Order] = {order.id: order for order in orders}
        self.fail = fail

    async def find_by_id(self, order_id: str) -> Optional[Order]:
        if self.fail:
            raise OrderStoreError("order store offline")
        return self.orders.get(order_id)

    async def find_by_ids(self, order_ids: Sequence[str]) -> List[Order]:
        if self.fail:
            raise OrderStoreError("order store offline")
        return [self.orders[i] for i in order_ids if i in self.orders]

    async def find_delivered(self, skip: int = 0, limit: int = 100) -> OrderPage:
        if self.fail:
            raise OrderStoreError("order store offline")
        delivered = sorted(
            (order for order in self.orders.values() if order.is_delivered),
            key=lambda order: (order.created_at, order.id),
        )
        page = delivered[skip : skip + limit]
        return OrderPage(orders=page, fetched=len(page))


class InMemoryPredictionRepository(IPredictionRepository):
    def __init__(self, *, fail: bool = False) -> None:
        self.saved: List[Prediction] = []
        self.batches: List[List[Prediction]] = []
        self.fail = fail

    async def save(self, prediction: Prediction) -> Prediction:
        if self.fail:
            raise PersistenceError("prediction store offline")
        self.saved.append(prediction)
        return prediction

    async def save_many(self, predictions: Sequence[Prediction]) -> int:
        if self.fail:
            raise PersistenceError("prediction store offline")
        self.batches.append(list(predictions))
        self.saved.extend(predictions)
        return len(predictions)

    async def find_recent(self, limit: int = 20) -> List[Prediction]:
        newest = sorted(self.saved, key=lambda p: p.created_at, reverse=True)
        return newest[:limit]


class InMemoryTrainingRecordRepository(ITrainingRecordRepository):
    def __init__(
        self, records: Sequence[TrainingRecord] = (), *, fail: bool = False
    ) -> None:
        self.records: List[TrainingRecord] = list(records)
        self.batches: List[List[TrainingRecord]] = []
        self.fail = fail

    async def save_many(self, records: Sequence[TrainingRecord]) -> int:
        if self.fail:
            raise PersistenceError("training store offline")
        self.batches.append(list(records))
        self.records.extend(records)
        return len(records)

    async def find_recent(self, limit: int = 1000) -> List[TrainingRecord]:
        newest = sorted(self.records, key=lambda r: r.created_at, reverse=True)
        return newest[:limit]


@pytest.fixture()
def sample_order() -> Order:
    return Order(
        id="ord-001",
        origin="88 Nanjing Road, Shanghai",
        destination="1 Chang'an Avenue, Beijing",
        created_at=datetime(2024, 7, 1, 8, 0, tzinfo=timezone.utc),
        weight=500.0,
        volume=2.0,
        carrier="SF Express",
        order_number="SO-2024-0001",
        status="in_transit",
    )


@pytest.fixture()
def delivered_order(sample_order: Order) -> Order:
    return Order(
        id="ord-002",
        origin=sample_order.origin,
        destination=sample_order.destination,
        created_at=datetime(2024, 7, 1, 8, 0, tzinfo=timezone.utc),
        weight=sample_order.weight,
        volume=sample_order.volume,
        carrier=sample_order.carrier,
        actual_delivery=datetime(2024, 7, 2, 20, 0, tzinfo=timezone.utc),
    )


@pytest.fixture()
def static_predictor() -> FusionPredictor:
    return build_predictor(random_value=1.0)


def _sort_value(value: Any) -> Tuple[bool, Any]:
    return (value is None, value if value is not None else 0)


class FakeCursor:
    def __init__(self, documents: Sequence[Dict[str, Any]]):
        self._documents = list(documents)
        self._skip = 0
        self._limit: int | None = None
        self.sort_spec: List[Tuple[str, int]] = []

    def sort(self, key: Any, direction: int = 1) -> "FakeCursor":
        if isinstance(key, str):
            self.sort_spec = [(key, direction)]
        elif key:
            self.sort_spec = list(key)
        for field, field_direction in reversed(self.sort_spec):
            self._documents.sort(
                key=lambda doc: _sort_value(doc.get(field)),
                reverse=field_direction < 0,
            )
        return self

    def skip(self, amount: int) -> "FakeCursor":
        self._skip = amount
        return self

    def limit(self, amount: int) -> "FakeCursor":
        self._limit = amount
        return self

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        docs = self._documents[self._skip :]
        if self._limit:
            docs = docs[: self._limit]
        return iter(docs)


class FakeCollection:
    def __init__(self) -> None:
        self.documents: Dict[str, Dict[str, Any]] = {}
        self.inserts: List[Dict[str, Any]] = []
        self.insert_many_calls = 0
        self.last_query: Dict[str, Any] | None = None
        self.dropped_indexes: List[str] = []
        self.created_indexes: List[tuple[Any, ...]] = []

    def find_one(self, query: Dict[str, Any]) -> Dict[str, Any] | None:
        self.last_query = query
        key = query.get("id")
        if not isinstance(key, str):
            return None
        return self.documents.get(key)

    def find(self, query: Dict[str, Any]) -> FakeCursor:
        self.last_query = query
        results = [doc for doc in self.documents.values() if self._matches(doc, query)]
        return FakeCursor(results)

    def insert_one(self, document: Dict[str, Any]) -> Any:
        self.inserts.append(document)
        self.documents[document["id"]] = document
        return SimpleNamespace(acknowledged=True, inserted_id=document["id"])

    def insert_many(self, documents: List[Dict[str, Any]], **kwargs: Any) -> Any:
        self.insert_many_calls += 1
        for document in documents:
            self.inserts.append(document)
            self.documents[document["id"]] = document
        return SimpleNamespace(
            acknowledged=True, inserted_ids=[doc["id"] for doc in documents]
        )

    def drop_index(self, index_name: str) -> None:
        self.dropped_indexes.append(index_name)

    def create_index(self, keys: Any, name: str | None = None, **kwargs: Any) -> Any:
        self.created_indexes.append((keys, name, kwargs))
        return name or keys

    @staticmethod
    def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
        for key, condition in query.items():
            value = document.get(key)
            if isinstance(condition, dict):
                if "$in" in condition and value not in condition["$in"]:
                    return False
                if "$ne" in condition and value == condition["$ne"]:
                    return False
            elif value != condition:
                return False
        return True


class FakeMongoDatabase:
    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}
        self.orders_collection = "orders"
        self.predictions_collection = "delivery_predictions"
        self.training_collection = "prediction_training_data"
        self.db = SimpleNamespace(name="delivery_prediction")
        self.closed = False

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def find_one(self, collection_name: str, query: Dict[str, Any]) -> Any:
        return self.get_collection(collection_name).find_one(query)

    async def find_many(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort_by: Any = None,
        sort_direction: int = 1,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        cursor = self.get_collection(collection_name).find(query)
        if sort_by:
            cursor.sort(sort_by, sort_direction)
        cursor.skip(skip)
        cursor.limit(limit)
        return list(cursor)

    async def insert_one(self, collection_name: str, document: Dict[str, Any]) -> Any:
        result = self.get_collection(collection_name).insert_one(document)
        if not getattr(result, "acknowledged", True):
            raise Exception(f"Failed to insert document in {collection_name}")
        return document

    async def insert_many(
        self, collection_name: str, documents: Sequence[Dict[str, Any]]
    ) -> int:
        if not documents:
            return 0
        result = self.get_collection(collection_name).insert_many(list(documents))
        return len(result.inserted_ids)

    def ping(self) -> None:
        return None

    async def create_indexes(self) -> None:  # pragma: no cover - stub for tests
        pass

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_mongo_database() -> FakeMongoDatabase:
    return FakeMongoDatabase()


@pytest.fixture()
def dummy_now() -> datetime:
    return datetime.now(timezone.utc)
