"""
Gateways Package - Domain Layer

This package contains interfaces defining gateway contracts for the
real-time signal providers. Specific implementations are provided by the
infrastructure layer.
"""

from .traffic_gateway import ITrafficGateway
from .weather_gateway import IWeatherGateway

__all__ = ["IWeatherGateway", "ITrafficGateway"]
