"""Static factor model: deterministic multipliers from order attributes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from src.domain.entities.factor_tables import FactorTables
from src.domain.entities.order import Order

_SEASON_BY_MONTH = {
    3: "spring",
    4: "spring",
    5: "spring",
    6: "summer",
    7: "summer",
    8: "summer",
    9: "autumn",
    10: "autumn",
    11: "autumn",
    12: "winter",
    1: "winter",
    2: "winter",
}


def season_for(moment: datetime) -> str:
    return _SEASON_BY_MONTH[moment.month]


def _non_negative(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    return max(float(value), 0.0)


@dataclass(frozen=True)
class StaticFactors:
    """Base duration and static multipliers for one order."""

    distance: float
    distance_category: str
    distance_resolved: bool
    base_hours: float
    carrier_factor: float
    carrier_known: bool
    seasonal_factor: float
    season: str
    weight_factor: float
    volume_factor: float
    priority_factor: float
    has_cargo_dimensions: bool

    def product(self) -> float:
        return (
            self.base_hours
            * self.carrier_factor
            * self.seasonal_factor
            * self.weight_factor
            * self.volume_factor
            * self.priority_factor
        )


class StaticFactorModel:
    """Computes the static part of the Parametric Duration Model."""

    def __init__(self, tables: FactorTables):
        self.tables = tables

    def compute(self, order: Order, reference_time: datetime) -> StaticFactors:
        """
        Derive the base duration and static multipliers.

        Args:
            order: Shipment to estimate
            reference_time: Moment whose calendar month selects the season

        Returns:
            StaticFactors; never raises for missing or unknown attributes
        """
        distance, resolved = self.resolve_distance(order.origin, order.destination)
        category = self.distance_category(distance)
        category_factor = self.tables.distance_category_factors[category]
        base_hours = self.tables.base_hours * category_factor

        known_carrier = self.tables.carrier_factor(order.carrier)
        season = season_for(reference_time)
        weight = _non_negative(order.weight)
        volume = _non_negative(order.volume)

        return StaticFactors(
            distance=distance,
            distance_category=category,
            distance_resolved=resolved,
            base_hours=base_hours,
            carrier_factor=(
                known_carrier
                if known_carrier is not None
                else self.tables.default_carrier_factor
            ),
            carrier_known=known_carrier is not None,
            seasonal_factor=self.tables.seasonal_factors[season],
            season=season,
            weight_factor=self.weight_factor(weight),
            volume_factor=self.volume_factor(volume),
            priority_factor=self.priority_factor(order.priority),
            has_cargo_dimensions=weight > 0 and volume > 0,
        )

    def resolve_distance(self, origin: str, destination: str) -> Tuple[float, bool]:
        """Distance in km and whether it came from the city-pair table."""
        origin_city = self.tables.resolve_city(origin)
        destination_city = self.tables.resolve_city(destination)
        if origin_city and destination_city:
            distance = self.tables.distance_between(origin_city, destination_city)
            if distance is not None:
                return distance, True
        return self.tables.default_distance_km, False

    def distance_category(self, distance: float) -> str:
        if distance < self.tables.short_distance_km:
            return "short"
        if distance < self.tables.long_distance_km:
            return "medium"
        return "long"

    def weight_factor(self, weight: float) -> float:
        tables = self.tables
        factor = 1 + weight / tables.weight_step_kg * tables.weight_step_factor
        return min(factor, tables.weight_cap)

    def volume_factor(self, volume: float) -> float:
        tables = self.tables
        factor = 1 + volume / tables.volume_step_m3 * tables.volume_step_factor
        return min(factor, tables.volume_cap)

    def priority_factor(self, priority: Optional[str]) -> float:
        if not priority:
            return 1.0
        return self.tables.priority_factors.get(priority.strip().lower(), 1.0)
