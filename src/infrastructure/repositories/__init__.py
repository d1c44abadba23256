"""
Repositories Package - Infrastructure Layer

This package contains concrete implementations of the repository
interfaces defined in the domain layer. These implementations
handle the details of data persistence.
"""

from .factor_tables_repository import load_factor_tables
from .order_repository import OrderRepository
from .prediction_repository import PredictionRepository
from .training_record_repository import TrainingRecordRepository

__all__ = [
    "OrderRepository",
    "PredictionRepository",
    "TrainingRecordRepository",
    "load_factor_tables",
]
