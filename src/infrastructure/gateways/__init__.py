"""
Gateways Package - Infrastructure Layer

This package contains concrete implementations of the gateway
interfaces defined in the domain layer. These implementations
handle the details of external service communications.
"""

from .traffic_gateway import AMapTrafficGateway
from .weather_gateway import OpenWeatherGateway

__all__ = ["OpenWeatherGateway", "AMapTrafficGateway"]
