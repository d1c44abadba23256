from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from src.application.dtos.prediction_dto import (
    PredictionRequestDTO,
    PredictionResultDTO,
    TrainingResponseDTO,
)
from src.domain.entities.prediction import FactorBreakdown, Prediction
from src.domain.entities.training_record import AuditSummary

NOW = datetime(2024, 7, 1, 12, 0, tzinfo=timezone.utc)


def _prediction(hours: float = 30.0, confidence: float = 0.9) -> Prediction:
    return Prediction(
        order_id="ord-1",
        predicted_delivery=NOW,
        predicted_hours=hours,
        confidence_score=confidence,
        factors=FactorBreakdown(
            distance=800.0,
            distance_category="long",
            distance_resolved=False,
            base_hours=31.2,
            carrier_factor=1.0,
            seasonal_factor=1.15,
            season="summer",
            weight_factor=1.0,
            volume_factor=1.0,
            priority_factor=1.0,
            random_factor=0.97,
            use_real_time=True,
        ),
        model_version="PDM_v2.0_realtime",
    )


def test_request_accepts_camel_case_and_defaults() -> None:
    request = PredictionRequestDTO.model_validate(
        {"action": "predict_batch", "batchOrderIds": ["a", "b"]}
    )
    assert request.batch_order_ids == ["a", "b"]
    assert request.use_real_time is True


def test_result_serializes_with_camel_case_aliases() -> None:
    dto = PredictionResultDTO.from_domain(_prediction())

    body = dto.model_dump(mode="json", by_alias=True)

    assert body["orderId"] == "ord-1"
    assert body["predictedHours"] == 30.0
    assert body["confidenceScore"] == 0.9
    assert body["useRealTime"] is True
    assert body["modelVersion"] == "PDM_v2.0_realtime"
    assert body["factors"]["randomFactor"] == 0.97


@pytest.mark.parametrize("confidence", [0.5, 1.0])
def test_result_rejects_out_of_range_confidence(confidence) -> None:
    with pytest.raises(ValidationError):
        PredictionResultDTO.from_domain(_prediction(confidence=confidence))


def test_training_response_from_summary() -> None:
    dto = TrainingResponseDTO.from_summary(
        AuditSummary(
            training_samples=4,
            average_error_hours=3.0,
            model_accuracy=0.875,
            use_real_time_features=False,
        )
    )

    body = dto.model_dump(by_alias=True)
    assert body == {
        "message": "Model audit completed",
        "trainingSamples": 4,
        "averageErrorHours": 3.0,
        "modelAccuracy": 0.875,
        "useRealTimeFeatures": False,
    }
