"""
Domain Gateway - Traffic

This module defines the gateway interface for reading live road traffic
around a shipment's destination.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities.realtime import TrafficReading


class ITrafficGateway(ABC):
    """Interface for a live traffic provider."""

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether the provider has the credentials it needs."""
        pass

    @abstractmethod
    async def traffic_status(
        self, address: str, city: Optional[str] = None
    ) -> TrafficReading:
        """
        Read the traffic level around an address.

        Args:
            address: Destination address of the shipment
            city: Resolved city, used to disambiguate geocoding

        Returns:
            Traffic reading with a level of ``smooth``, ``slow``,
            ``congested`` or ``unknown``

        Raises:
            ExternalSignalUnavailableError: When traffic cannot be read
        """
        pass
