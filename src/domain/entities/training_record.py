"""
Domain Entities - Training Record

Append-only comparison between a recomputed estimate and the observed
delivery duration of a historical order.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import UUID, uuid4


@dataclass(frozen=True)
class TrainingRecord:
    """One audited order."""

    order_id: str
    features: Dict[str, Any]
    actual_delivery: datetime
    predicted_delivery: datetime
    prediction_error_hours: float
    model_version: str
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class AuditSummary:
    """Aggregate accuracy of an audit pass."""

    training_samples: int
    average_error_hours: float
    model_accuracy: float
    use_real_time_features: bool


@dataclass
class ErrorAccumulator:
    """Running mean absolute error, fed chunk by chunk."""

    total_error_hours: float = 0.0
    samples: int = 0

    def add(self, error_hours: float) -> None:
        self.total_error_hours += error_hours
        self.samples += 1

    @property
    def mean_error_hours(self) -> float:
        if self.samples == 0:
            return 0.0
        return self.total_error_hours / self.samples

    @property
    def accuracy(self) -> float:
        """``1 - MAE/24`` floored at 0; no samples means no measured accuracy."""
        if self.samples == 0:
            return 0.0
        return max(0.0, 1.0 - self.mean_error_hours / 24.0)
