"""
Domain Repository Interface - Prediction

Append-only persistence contract for delivery predictions.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence

from src.domain.entities.prediction import Prediction


class IPredictionRepository(ABC):
    """Interface for prediction persistence."""

    @abstractmethod
    async def save(self, prediction: Prediction) -> Prediction:
        """Persist one prediction."""
        pass

    @abstractmethod
    async def save_many(self, predictions: Sequence[Prediction]) -> int:
        """Persist predictions in a single batched write; returns rows written."""
        pass

    @abstractmethod
    async def find_recent(self, limit: int = 20) -> List[Prediction]:
        """Most recently created predictions first."""
        pass
