from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.domain.entities.order import Order
from src.domain.entities.prediction import (
    MODEL_VERSION_REALTIME,
    MODEL_VERSION_STATIC,
    FactorBreakdown,
    delivery_after,
    model_version_for,
)
from src.domain.entities.training_record import ErrorAccumulator


def _breakdown(**overrides) -> FactorBreakdown:
    values = dict(
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
    values.update(overrides)
    return FactorBreakdown(**values)


def test_actual_transit_hours(delivered_order: Order, sample_order: Order) -> None:
    assert delivered_order.is_delivered is True
    assert delivered_order.actual_transit_hours() == pytest.approx(36.0)
    assert sample_order.actual_transit_hours() is None


def test_feature_snapshot_lists_order_attributes(sample_order: Order) -> None:
    snapshot = sample_order.feature_snapshot()
    assert snapshot["carrier"] == "SF Express"
    assert snapshot["weight"] == 500.0
    assert set(snapshot) == {
        "origin",
        "destination",
        "weight",
        "volume",
        "carrier",
        "priority",
    }


def test_model_version_tracks_real_time_flag() -> None:
    assert model_version_for(True) == MODEL_VERSION_REALTIME == "PDM_v2.0_realtime"
    assert model_version_for(False) == MODEL_VERSION_STATIC == "PDM_v2.0_static"


def test_static_breakdown_ignores_real_time_factors() -> None:
    breakdown = _breakdown(weather_factor=1.5, traffic_factor=1.3)
    assert breakdown.non_jitter_product() == pytest.approx(breakdown.static_product())


def test_real_time_breakdown_includes_time_of_day() -> None:
    breakdown = _breakdown(
        use_real_time=True,
        weather_factor=1.25,
        traffic_factor=1.15,
        time_of_day_factor=1.2,
    )

    assert breakdown.combined_real_time_factor == pytest.approx(1.25 * 1.15)
    assert breakdown.non_jitter_product() == pytest.approx(
        breakdown.static_product() * 1.25 * 1.15 * 1.2
    )


def test_breakdown_serializes_camel_case() -> None:
    data = _breakdown(use_real_time=True, weather_factor=1.25).to_dict()
    assert data["distanceCategory"] == "long"
    assert data["combinedRealTimeFactor"] == pytest.approx(1.25)
    assert data["timeOfDayFactor"] == 1.0
    assert data["useRealTime"] is True


def test_delivery_after_adds_hours() -> None:
    start = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
    assert delivery_after(start, 30.5) == datetime(
        2024, 1, 2, 6, 30, tzinfo=timezone.utc
    )


def test_error_accumulator_mean_and_accuracy() -> None:
    accumulator = ErrorAccumulator()
    assert accumulator.mean_error_hours == 0.0
    assert accumulator.accuracy == 0.0

    for error in (2.0, 4.0, 6.0):
        accumulator.add(error)

    assert accumulator.samples == 3
    assert accumulator.mean_error_hours == pytest.approx(4.0)
    assert accumulator.accuracy == pytest.approx(1 - 4.0 / 24)


def test_error_accumulator_accuracy_is_floored() -> None:
    accumulator = ErrorAccumulator()
    accumulator.add(48.0)
    assert accumulator.accuracy == 0.0
