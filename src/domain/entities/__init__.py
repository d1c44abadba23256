"""
Domain Entities Package

This package contains the core domain entities of the prediction engine.
"""

from .errors import (
    DomainError,
    ExternalSignalUnavailableError,
    OrderStoreError,
    PersistenceError,
)
from .factor_tables import DEFAULT_FACTOR_TABLES, FactorTables
from .health import ApplicationInfo, DependencyStatus, ServiceStatus, SystemHealth
from .order import Order, OrderPage
from .prediction import (
    MODEL_VERSION_REALTIME,
    MODEL_VERSION_STATIC,
    FactorBreakdown,
    Prediction,
)
from .realtime import (
    RealTimeFeatures,
    TrafficObservation,
    TrafficReading,
    WeatherObservation,
    WeatherReading,
)
from .training_record import AuditSummary, ErrorAccumulator, TrainingRecord

__all__ = [
    "Order",
    "OrderPage",
    "FactorTables",
    "DEFAULT_FACTOR_TABLES",
    "FactorBreakdown",
    "Prediction",
    "MODEL_VERSION_REALTIME",
    "MODEL_VERSION_STATIC",
    "TrainingRecord",
    "AuditSummary",
    "ErrorAccumulator",
    "WeatherReading",
    "TrafficReading",
    "WeatherObservation",
    "TrafficObservation",
    "RealTimeFeatures",
    "SystemHealth",
    "DependencyStatus",
    "ServiceStatus",
    "ApplicationInfo",
    "DomainError",
    "ExternalSignalUnavailableError",
    "OrderStoreError",
    "PersistenceError",
]
