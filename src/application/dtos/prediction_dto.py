"""
Application DTOs - Prediction

Data Transfer Objects for the delivery-time prediction endpoint. Field names
are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.entities.prediction import Prediction
from src.domain.entities.training_record import AuditSummary


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, protected_namespaces=()
    )


class PredictionRequestDTO(CamelModel):
    """Single stateless request; ``action`` selects the mode."""

    action: Optional[str] = Field(
        default=None,
        description="One of predict_single, predict_batch or train_model",
    )
    order_id: Optional[str] = Field(
        default=None, description="Order to predict (predict_single)"
    )
    batch_order_ids: Optional[List[str]] = Field(
        default=None, description="Orders to predict (predict_batch)"
    )
    use_real_time: bool = Field(
        default=True, description="Fuse live weather and traffic signals"
    )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "action": "predict_single",
                "orderId": "ord-001",
                "useRealTime": True,
            }
        },
    )


class PredictionResultDTO(CamelModel):
    """Estimate for one order."""

    order_id: str
    predicted_delivery: datetime
    predicted_hours: float = Field(gt=0)
    confidence_score: float = Field(ge=0.8, le=0.99)
    factors: Dict[str, Any] = Field(default_factory=dict)
    use_real_time: bool
    model_version: str

    @classmethod
    def from_domain(cls, prediction: Prediction) -> "PredictionResultDTO":
        return cls(
            order_id=prediction.order_id,
            predicted_delivery=prediction.predicted_delivery,
            predicted_hours=prediction.predicted_hours,
            confidence_score=prediction.confidence_score,
            factors=prediction.factors.to_dict(),
            use_real_time=prediction.factors.use_real_time,
            model_version=prediction.model_version,
        )


class BatchPredictionResponseDTO(CamelModel):
    predictions: List[PredictionResultDTO] = Field(default_factory=list)


class TrainingResponseDTO(CamelModel):
    """Outcome of an audit pass over delivered orders."""

    message: str = "Model audit completed"
    training_samples: int = Field(ge=0)
    average_error_hours: float = Field(ge=0)
    model_accuracy: float = Field(ge=0, le=1)
    use_real_time_features: bool

    @classmethod
    def from_summary(cls, summary: AuditSummary) -> "TrainingResponseDTO":
        return cls(
            training_samples=summary.training_samples,
            average_error_hours=summary.average_error_hours,
            model_accuracy=summary.model_accuracy,
            use_real_time_features=summary.use_real_time_features,
        )


PredictionActionResponseDTO = Union[
    PredictionResultDTO, BatchPredictionResponseDTO, TrainingResponseDTO
]


class ModelMetricsDTO(CamelModel):
    """Accuracy derived from the most recent training records."""

    accuracy: float = Field(description="Accuracy in percent")
    average_error: float = Field(description="Mean absolute error in hours")
    total_predictions: int
    last_trained: datetime


class RecentPredictionDTO(CamelModel):
    """Persisted prediction joined with its order's display fields."""

    order_id: str
    order_number: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    status: Optional[str] = None
    predicted_delivery: datetime
    predicted_hours: float = Field(description="Hours remaining until delivery")
    confidence_score: float
    factors: Dict[str, Any] = Field(default_factory=dict)
    model_version: str
    created_at: datetime


class RecentPredictionsResponseDTO(CamelModel):
    predictions: List[RecentPredictionDTO] = Field(default_factory=list)
