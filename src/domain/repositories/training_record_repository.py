"""
Domain Repository Interface - Training Record

Append-only persistence contract for audit comparisons.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from src.domain.entities.training_record import TrainingRecord


class ITrainingRecordRepository(ABC):
    """Interface for training record persistence."""

    @abstractmethod
    async def save_many(self, records: Sequence[TrainingRecord]) -> int:
        """Append records in a single batched write; returns rows written."""
        pass

    @abstractmethod
    async def find_recent(self, limit: int = 1000) -> List[TrainingRecord]:
        """Most recently created records first."""
        pass
