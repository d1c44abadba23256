"""
Real-time feature provider.

Reads weather and traffic for an order's destination and turns them into
multipliers. Each signal is fetched independently and concurrently; a
missing credential, an error or a timeout on one signal yields its neutral
default and never touches the other. ``fetch`` never raises.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from src.domain.entities.factor_tables import FactorTables
from src.domain.entities.order import Order
from src.domain.entities.realtime import (
    UNKNOWN_CONDITION,
    UNKNOWN_TRAFFIC_LEVEL,
    RealTimeFeatures,
    TrafficObservation,
    TrafficReading,
    WeatherObservation,
    WeatherReading,
)
from src.domain.gateways.traffic_gateway import ITrafficGateway
from src.domain.gateways.weather_gateway import IWeatherGateway

logger = structlog.get_logger(__name__)

PEAK_HOURS = ((7, 9), (17, 19))
LATE_NIGHT_START = 22
LATE_NIGHT_END = 6
PEAK_FACTOR = 1.2
LATE_NIGHT_FACTOR = 0.9


def extract_city(address: Optional[str], tables: FactorTables) -> Optional[str]:
    """
    Guess the city of a free-form address.

    Known cities and aliases win; otherwise the first comma-separated segment
    without digits is taken (``"12 Main St, Springfield, USA"`` ->
    ``"Springfield"``).
    """
    if not address:
        return None
    known = tables.resolve_city(address)
    if known:
        return known
    for segment in address.replace("，", ",").split(","):
        candidate = segment.strip()
        if candidate and not any(ch.isdigit() for ch in candidate):
            return candidate
    return None


def time_of_day_factor(local_time: datetime) -> float:
    hour = local_time.hour
    if any(start <= hour < end for start, end in PEAK_HOURS):
        return PEAK_FACTOR
    if hour >= LATE_NIGHT_START or hour < LATE_NIGHT_END:
        return LATE_NIGHT_FACTOR
    return 1.0


def weather_factor(reading: WeatherReading, tables: FactorTables) -> float:
    factor = tables.weather_condition_factors.get(reading.condition, 1.0)
    temperature = reading.temperature
    if temperature is not None and (
        temperature < tables.extreme_cold_c or temperature > tables.extreme_heat_c
    ):
        factor *= tables.extreme_temperature_boost
    if reading.wind_speed is not None and reading.wind_speed > tables.high_wind_speed:
        factor *= tables.high_wind_boost
    return factor


class RealTimeFeatureProvider:
    """Combines the weather and traffic gateways with graceful fallback."""

    def __init__(
        self,
        weather_gateway: IWeatherGateway,
        traffic_gateway: ITrafficGateway,
        tables: FactorTables,
        timeout_seconds: float = 5.0,
        utc_offset_hours: float = 8.0,
    ):
        self.weather_gateway = weather_gateway
        self.traffic_gateway = traffic_gateway
        self.tables = tables
        self.timeout_seconds = timeout_seconds
        self._local_tz = timezone(timedelta(hours=utc_offset_hours))

    async def fetch(self, order: Order, reference_time: datetime) -> RealTimeFeatures:
        city = extract_city(order.destination, self.tables)
        local_factor = time_of_day_factor(self._to_local(reference_time))

        weather, traffic = await asyncio.gather(
            self._fetch_weather(order, city),
            self._fetch_traffic(order, city, local_factor),
        )
        return RealTimeFeatures(weather=weather, traffic=traffic)

    def _to_local(self, moment: datetime) -> datetime:
        if moment.tzinfo is None:
            return moment
        return moment.astimezone(self._local_tz)

    async def _fetch_weather(
        self, order: Order, city: Optional[str]
    ) -> WeatherObservation:
        if not self.weather_gateway.enabled:
            return WeatherObservation.neutral(city)
        if not city:
            logger.info("realtime.weather.no_city", order_id=order.id)
            return WeatherObservation.neutral()

        try:
            reading = await asyncio.wait_for(
                self.weather_gateway.current_weather(city),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "realtime.weather.timeout",
                order_id=order.id,
                city=city,
                timeout_seconds=self.timeout_seconds,
            )
            return WeatherObservation.neutral(city)
        except Exception as exc:
            logger.warning(
                "realtime.weather.unavailable",
                order_id=order.id,
                city=city,
                error=str(exc),
            )
            return WeatherObservation.neutral(city)

        condition = (
            reading.condition
            if reading.condition in self.tables.weather_condition_factors
            else UNKNOWN_CONDITION
        )
        return WeatherObservation(
            condition=condition,
            weather_factor=weather_factor(reading, self.tables),
            temperature=reading.temperature,
            wind_speed=reading.wind_speed,
            city=city,
        )

    async def _fetch_traffic(
        self, order: Order, city: Optional[str], local_factor: float
    ) -> TrafficObservation:
        if not self.traffic_gateway.enabled:
            return TrafficObservation.neutral(local_factor)

        try:
            reading: TrafficReading = await asyncio.wait_for(
                self.traffic_gateway.traffic_status(order.destination, city),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "realtime.traffic.timeout",
                order_id=order.id,
                timeout_seconds=self.timeout_seconds,
            )
            return TrafficObservation.neutral(local_factor)
        except Exception as exc:
            logger.warning(
                "realtime.traffic.unavailable", order_id=order.id, error=str(exc)
            )
            return TrafficObservation.neutral(local_factor)

        factor = self.tables.traffic_level_factors.get(reading.level)
        if factor is None:
            return TrafficObservation(
                level=UNKNOWN_TRAFFIC_LEVEL, time_of_day_factor=local_factor
            )
        return TrafficObservation(
            level=reading.level,
            traffic_factor=factor,
            time_of_day_factor=local_factor,
        )
