"""Domain ports package."""

from .health_check import IHealthCheckService
from .random_source import IRandomSource

__all__ = ["IHealthCheckService", "IRandomSource"]
