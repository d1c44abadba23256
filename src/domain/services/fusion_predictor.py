"""
Fusion predictor for the Parametric Duration Model.

Multiplies the static factors, the real-time factors (when requested) and a
bounded jitter, in a fixed order, into one duration estimate and a
confidence score.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

import structlog

from src.domain.entities.order import Order
from src.domain.entities.prediction import FactorBreakdown, model_version_for
from src.domain.entities.realtime import RealTimeFeatures
from src.domain.ports.random_source import IRandomSource
from src.domain.services.factor_model import StaticFactorModel, StaticFactors
from src.domain.services.realtime_features import RealTimeFeatureProvider

logger = structlog.get_logger(__name__)

STATIC_JITTER = (0.9, 1.1)
REALTIME_JITTER = (0.95, 1.05)
CONFIDENCE_JITTER = (0.95, 1.05)

STATIC_BASELINE_CONFIDENCE = 0.85
REALTIME_BASELINE_CONFIDENCE = 0.80
MAX_CONFIDENCE = 0.99

CARGO_DIMENSIONS_BONUS = 0.05
KNOWN_CARRIER_BONUS = 0.05
RESOLVED_DISTANCE_BONUS = 0.05
KNOWN_WEATHER_BONUS = 0.03
KNOWN_TRAFFIC_BONUS = 0.03


@dataclass(frozen=True)
class FusionResult:
    """Estimate for one order with its explanation."""

    predicted_hours: float
    confidence_score: float
    factors: FactorBreakdown
    model_version: str


class FusionPredictor:
    """Composes static and real-time factors into a final estimate."""

    def __init__(
        self,
        factor_model: StaticFactorModel,
        feature_provider: RealTimeFeatureProvider,
        random_source: IRandomSource,
    ):
        self.factor_model = factor_model
        self.feature_provider = feature_provider
        self.random_source = random_source

    async def predict(
        self, order: Order, use_real_time: bool, reference_time: datetime
    ) -> FusionResult:
        static = self.factor_model.compute(order, reference_time)
        features: Optional[RealTimeFeatures] = None
        if use_real_time:
            features = await self.feature_provider.fetch(order, reference_time)

        low, high = REALTIME_JITTER if use_real_time else STATIC_JITTER
        jitter = self.random_source.uniform(low, high)

        breakdown = self._breakdown(static, features, jitter, use_real_time)
        predicted_hours = breakdown.non_jitter_product() * jitter
        confidence = self._confidence(static, features, use_real_time)

        logger.debug(
            "fusion.predicted",
            order_id=order.id,
            predicted_hours=predicted_hours,
            confidence_score=confidence,
            use_real_time=use_real_time,
        )

        return FusionResult(
            predicted_hours=predicted_hours,
            confidence_score=confidence,
            factors=breakdown,
            model_version=model_version_for(use_real_time),
        )

    def _breakdown(
        self,
        static: StaticFactors,
        features: Optional[RealTimeFeatures],
        jitter: float,
        use_real_time: bool,
    ) -> FactorBreakdown:
        breakdown = FactorBreakdown(
            distance=static.distance,
            distance_category=static.distance_category,
            distance_resolved=static.distance_resolved,
            base_hours=static.base_hours,
            carrier_factor=static.carrier_factor,
            seasonal_factor=static.seasonal_factor,
            season=static.season,
            weight_factor=static.weight_factor,
            volume_factor=static.volume_factor,
            priority_factor=static.priority_factor,
            random_factor=jitter,
            use_real_time=use_real_time,
        )
        if features is None:
            return breakdown

        weather, traffic = features.weather, features.traffic
        return replace(
            breakdown,
            weather_condition=weather.condition,
            temperature=weather.temperature,
            wind_speed=weather.wind_speed,
            weather_factor=weather.weather_factor,
            traffic_level=traffic.level,
            traffic_factor=traffic.traffic_factor,
            time_of_day_factor=traffic.time_of_day_factor,
        )

    def _confidence(
        self,
        static: StaticFactors,
        features: Optional[RealTimeFeatures],
        use_real_time: bool,
    ) -> float:
        if use_real_time:
            baseline = REALTIME_BASELINE_CONFIDENCE
        else:
            baseline = STATIC_BASELINE_CONFIDENCE
        score = baseline
        if static.has_cargo_dimensions:
            score += CARGO_DIMENSIONS_BONUS
        if static.carrier_known:
            score += KNOWN_CARRIER_BONUS
        if static.distance_resolved:
            score += RESOLVED_DISTANCE_BONUS
        if features is not None:
            if features.weather.is_known:
                score += KNOWN_WEATHER_BONUS
            if features.traffic.is_known:
                score += KNOWN_TRAFFIC_BONUS

        score = min(score, MAX_CONFIDENCE)
        score *= self.random_source.uniform(*CONFIDENCE_JITTER)
        score = round(score, 4)
        return min(max(score, baseline), MAX_CONFIDENCE)
