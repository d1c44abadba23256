"""Domain entities for live weather and traffic signals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

UNKNOWN_CONDITION = "unknown"
UNKNOWN_TRAFFIC_LEVEL = "unknown"
NEUTRAL_FACTOR = 1.0


@dataclass(frozen=True)
class WeatherReading:
    """Raw weather observation returned by a weather gateway."""

    condition: str
    temperature: Optional[float] = None
    wind_speed: Optional[float] = None


@dataclass(frozen=True)
class TrafficReading:
    """Raw traffic observation returned by a traffic gateway."""

    level: str
    description: Optional[str] = None


@dataclass(frozen=True)
class WeatherObservation:
    """Weather signal with the multiplier derived from it."""

    condition: str = UNKNOWN_CONDITION
    weather_factor: float = NEUTRAL_FACTOR
    temperature: Optional[float] = None
    wind_speed: Optional[float] = None
    city: Optional[str] = None

    @property
    def is_known(self) -> bool:
        return self.condition != UNKNOWN_CONDITION

    @classmethod
    def neutral(cls, city: Optional[str] = None) -> "WeatherObservation":
        return cls(city=city)


@dataclass(frozen=True)
class TrafficObservation:
    """Traffic signal with the live multiplier and the time-of-day multiplier."""

    level: str = UNKNOWN_TRAFFIC_LEVEL
    traffic_factor: float = NEUTRAL_FACTOR
    time_of_day_factor: float = NEUTRAL_FACTOR

    @property
    def is_known(self) -> bool:
        return self.level != UNKNOWN_TRAFFIC_LEVEL

    @classmethod
    def neutral(
        cls, time_of_day_factor: float = NEUTRAL_FACTOR
    ) -> "TrafficObservation":
        return cls(time_of_day_factor=time_of_day_factor)


@dataclass(frozen=True)
class RealTimeFeatures:
    """Combined live signals for one order."""

    weather: WeatherObservation
    traffic: TrafficObservation

    @property
    def combined_factor(self) -> float:
        return self.weather.weather_factor * self.traffic.traffic_factor
