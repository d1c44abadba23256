"""
Use Cases Package - Application Layer

This package contains use cases that implement the business logic
of the application. Use cases orchestrate the flow of data to and from
the entities and implement the business rules of the application.
"""

from .delivery_prediction_use_case import (
    DeliveryPredictionUseCase,
    PredictionDependencyError,
    PredictionError,
    PredictionNotFoundError,
    PredictionValidationError,
)
from .health_use_cases import GetApplicationInfoUseCase, GetHealthStatusUseCase
from .model_audit_use_case import ModelAuditUseCase
from .prediction_insights_use_cases import (
    GetModelMetricsUseCase,
    GetRecentPredictionsUseCase,
)
from .prediction_request_use_case import PredictionRequestUseCase

__all__ = [
    "DeliveryPredictionUseCase",
    "ModelAuditUseCase",
    "PredictionRequestUseCase",
    "GetModelMetricsUseCase",
    "GetRecentPredictionsUseCase",
    "GetHealthStatusUseCase",
    "GetApplicationInfoUseCase",
    "PredictionError",
    "PredictionNotFoundError",
    "PredictionValidationError",
    "PredictionDependencyError",
]
