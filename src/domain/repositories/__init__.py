"""
Repositories Package

This package contains interfaces defining repository contracts
for data access operations. Specific implementations are provided
by the infrastructure layer.
"""

from .order_repository import IOrderRepository
from .prediction_repository import IPredictionRepository
from .training_record_repository import ITrainingRecordRepository

__all__ = [
    "IOrderRepository",
    "IPredictionRepository",
    "ITrainingRecordRepository",
]
