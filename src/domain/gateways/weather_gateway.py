"""
Domain Gateway - Weather

This module defines the gateway interface for reading current weather at a
shipment's destination.
"""

from abc import ABC, abstractmethod

from src.domain.entities.realtime import WeatherReading


class IWeatherGateway(ABC):
    """Interface for a current-weather provider."""

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether the provider has the credentials it needs."""
        pass

    @abstractmethod
    async def current_weather(self, city: str) -> WeatherReading:
        """
        Read the current weather for a city.

        Args:
            city: City name extracted from the destination address

        Returns:
            Normalised weather reading (condition label, temperature in
            degrees Celsius, wind speed in m/s)

        Raises:
            ExternalSignalUnavailableError: When the weather cannot be read
        """
        pass
