"""
Domain Entities - Factor Tables

Lookup tables driving the Parametric Duration Model. The tables are plain
configuration: the defaults below can be replaced wholesale or partially
through ``with_overrides`` (see the JSON loader in the infrastructure layer).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

CityPair = Tuple[str, str]


def _default_carrier_factors() -> Dict[str, float]:
    return {
        "SF Express": 0.85,
        "ZTO Express": 1.0,
        "YTO Express": 1.05,
        "Yunda Express": 1.1,
        "STO Express": 1.15,
    }


def _default_city_distances() -> Dict[CityPair, float]:
    return {
        ("Shanghai", "Beijing"): 1200.0,
        ("Guangzhou", "Shenzhen"): 150.0,
        ("Hangzhou", "Shanghai"): 180.0,
        ("Beijing", "Shenzhen"): 2200.0,
    }


def _default_city_aliases() -> Dict[str, str]:
    return {
        "上海": "Shanghai",
        "北京": "Beijing",
        "广州": "Guangzhou",
        "深圳": "Shenzhen",
        "杭州": "Hangzhou",
    }


def _default_seasonal_factors() -> Dict[str, float]:
    return {"spring": 1.0, "summer": 1.15, "autumn": 0.95, "winter": 1.25}


def _default_distance_category_factors() -> Dict[str, float]:
    return {"short": 0.8, "medium": 1.0, "long": 1.3}


def _default_priority_factors() -> Dict[str, float]:
    return {"urgent": 0.5, "high": 0.7}


def _default_weather_factors() -> Dict[str, float]:
    return {
        "clear": 0.95,
        "cloudy": 1.0,
        "rain": 1.25,
        "snow": 1.5,
        "fog": 1.3,
        "storm": 1.6,
    }


def _default_traffic_factors() -> Dict[str, float]:
    return {"smooth": 1.0, "slow": 1.15, "congested": 1.3}


@dataclass(frozen=True)
class FactorTables:
    """Multiplier tables and thresholds used by the static and real-time models."""

    base_hours: float = 24.0
    default_distance_km: float = 800.0
    short_distance_km: float = 200.0
    long_distance_km: float = 800.0
    default_carrier_factor: float = 1.0

    weight_step_kg: float = 1000.0
    weight_step_factor: float = 0.1
    weight_cap: float = 1.5
    volume_step_m3: float = 100.0
    volume_step_factor: float = 0.05
    volume_cap: float = 1.3

    extreme_cold_c: float = -10.0
    extreme_heat_c: float = 40.0
    extreme_temperature_boost: float = 1.1
    high_wind_speed: float = 15.0
    high_wind_boost: float = 1.05

    carrier_factors: Dict[str, float] = field(default_factory=_default_carrier_factors)
    city_distances_km: Dict[CityPair, float] = field(
        default_factory=_default_city_distances
    )
    city_aliases: Dict[str, str] = field(default_factory=_default_city_aliases)
    seasonal_factors: Dict[str, float] = field(
        default_factory=_default_seasonal_factors
    )
    distance_category_factors: Dict[str, float] = field(
        default_factory=_default_distance_category_factors
    )
    priority_factors: Dict[str, float] = field(
        default_factory=_default_priority_factors
    )
    weather_condition_factors: Dict[str, float] = field(
        default_factory=_default_weather_factors
    )
    traffic_level_factors: Dict[str, float] = field(
        default_factory=_default_traffic_factors
    )

    def carrier_factor(self, carrier: Optional[str]) -> Optional[float]:
        """Factor for a known carrier, or None when the carrier is not listed."""
        if not carrier:
            return None
        return self.carrier_factors.get(carrier)

    def distance_between(self, origin: str, destination: str) -> Optional[float]:
        """Symmetric city-pair lookup on canonical city names."""
        distance = self.city_distances_km.get((origin, destination))
        if distance is None:
            distance = self.city_distances_km.get((destination, origin))
        return distance

    def known_cities(self) -> Dict[str, str]:
        """Lower-cased lookup name -> canonical city name."""
        names: Dict[str, str] = {}
        for first, second in self.city_distances_km:
            names[first.lower()] = first
            names[second.lower()] = second
        for alias, canonical in self.city_aliases.items():
            names[alias.lower()] = canonical
        return names

    def resolve_city(self, address: Optional[str]) -> Optional[str]:
        """Find the longest known city name or alias contained in an address."""
        if not address:
            return None
        names = self.known_cities()
        haystack = address.lower()
        matches = [name for name in names if name in haystack]
        if not matches:
            return None
        return names[max(matches, key=len)]

    def with_overrides(self, overrides: Mapping[str, Any]) -> "FactorTables":
        """
        Return a copy with selected tables or thresholds replaced.

        ``city_distances_km`` accepts a list of ``{"from", "to", "km"}`` objects
        so the tables can be expressed in JSON. Unknown keys are rejected.
        """
        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if key not in self.__dataclass_fields__:
                raise ValueError(f"Unknown factor table '{key}'")
            if key == "city_distances_km":
                changes[key] = _parse_city_distances(value)
            elif key == "city_aliases":
                changes[key] = {str(k): str(v) for k, v in value.items()}
            elif isinstance(value, Mapping):
                changes[key] = {str(k): _positive(k, v) for k, v in value.items()}
            elif key in _SIGNED_SCALARS:
                changes[key] = float(value)
            else:
                changes[key] = _positive(key, value)
        return replace(self, **changes)


_SIGNED_SCALARS = frozenset(
    {"extreme_cold_c", "extreme_heat_c", "default_distance_km"}
)


def _positive(name: Any, value: Any) -> float:
    number = float(value)
    if number <= 0:
        raise ValueError(f"Factor '{name}' must be positive")
    return number


def _parse_city_distances(value: Any) -> Dict[CityPair, float]:
    if isinstance(value, Mapping):
        entries = [
            {"from": pair.split("|")[0], "to": pair.split("|")[1], "km": km}
            for pair, km in value.items()
        ]
    else:
        entries = list(value)

    distances: Dict[CityPair, float] = {}
    for entry in entries:
        distances[(str(entry["from"]), str(entry["to"]))] = _positive(
            "km", entry["km"]
        )
    return distances


DEFAULT_FACTOR_TABLES = FactorTables()
