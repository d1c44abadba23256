"""Infrastructure services package."""

from .health_check_service import HealthCheckService
from .random_source import NumpyRandomSource

__all__ = ["HealthCheckService", "NumpyRandomSource"]
