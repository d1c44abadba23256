"""Domain entities for delivery-time predictions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

MODEL_NAME = "Parametric Duration Model"
MODEL_VERSION_REALTIME = "PDM_v2.0_realtime"
MODEL_VERSION_STATIC = "PDM_v2.0_static"


def model_version_for(use_real_time: bool) -> str:
    return MODEL_VERSION_REALTIME if use_real_time else MODEL_VERSION_STATIC


@dataclass(frozen=True)
class FactorBreakdown:
    """Snapshot of every multiplier and observation behind one estimate."""

    distance: float
    distance_category: str
    distance_resolved: bool
    base_hours: float
    carrier_factor: float
    seasonal_factor: float
    season: str
    weight_factor: float
    volume_factor: float
    priority_factor: float
    random_factor: float
    use_real_time: bool
    weather_condition: str = "unknown"
    temperature: Optional[float] = None
    wind_speed: Optional[float] = None
    weather_factor: float = 1.0
    traffic_level: str = "unknown"
    traffic_factor: float = 1.0
    time_of_day_factor: float = 1.0

    @property
    def combined_real_time_factor(self) -> float:
        return self.weather_factor * self.traffic_factor

    def static_product(self) -> float:
        return (
            self.base_hours
            * self.carrier_factor
            * self.seasonal_factor
            * self.weight_factor
            * self.volume_factor
            * self.priority_factor
        )

    def non_jitter_product(self) -> float:
        """Estimate reproduced from the recorded factors, without jitter."""
        product = self.static_product()
        if self.use_real_time:
            product *= (
                self.weather_factor * self.traffic_factor * self.time_of_day_factor
            )
        return product

    def to_dict(self) -> Dict[str, Any]:
        return {
            "distance": self.distance,
            "distanceCategory": self.distance_category,
            "distanceResolved": self.distance_resolved,
            "baseHours": self.base_hours,
            "carrierFactor": self.carrier_factor,
            "seasonalFactor": self.seasonal_factor,
            "season": self.season,
            "weightFactor": self.weight_factor,
            "volumeFactor": self.volume_factor,
            "priorityFactor": self.priority_factor,
            "weatherCondition": self.weather_condition,
            "temperature": self.temperature,
            "windSpeed": self.wind_speed,
            "weatherFactor": self.weather_factor,
            "trafficLevel": self.traffic_level,
            "trafficFactor": self.traffic_factor,
            "timeOfDayFactor": self.time_of_day_factor,
            "combinedRealTimeFactor": self.combined_real_time_factor,
            "randomFactor": self.random_factor,
            "useRealTime": self.use_real_time,
        }


@dataclass(frozen=True)
class Prediction:
    """A persisted estimate. Never updated; corrections are new rows."""

    order_id: str
    predicted_delivery: datetime
    predicted_hours: float
    confidence_score: float
    factors: FactorBreakdown
    model_version: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def delivery_after(reference_time: datetime, predicted_hours: float) -> datetime:
    return reference_time + timedelta(hours=predicted_hours)
