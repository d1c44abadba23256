"""
DTOs Package - Application Layer

This package contains Data Transfer Objects (DTOs) used for data exchange
between the application layer and the presentation layer.
"""

from .health_dto import ApplicationInfoDTO, DependencyStatusDTO, SystemHealthDTO
from .prediction_dto import (
    BatchPredictionResponseDTO,
    ModelMetricsDTO,
    PredictionActionResponseDTO,
    PredictionRequestDTO,
    PredictionResultDTO,
    RecentPredictionDTO,
    RecentPredictionsResponseDTO,
    TrainingResponseDTO,
)

__all__ = [
    "SystemHealthDTO",
    "DependencyStatusDTO",
    "ApplicationInfoDTO",
    "PredictionRequestDTO",
    "PredictionResultDTO",
    "BatchPredictionResponseDTO",
    "TrainingResponseDTO",
    "PredictionActionResponseDTO",
    "ModelMetricsDTO",
    "RecentPredictionDTO",
    "RecentPredictionsResponseDTO",
]
