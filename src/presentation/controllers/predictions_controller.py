"""
Presentation Layer - Predictions Controller

Exposes the delivery-time prediction endpoint and the read-only views used by
the dashboard (model metrics and recent predictions).
"""

from typing import Any, Dict

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.application.dtos.prediction_dto import (
    ModelMetricsDTO,
    PredictionRequestDTO,
    RecentPredictionsResponseDTO,
)
from src.application.use_cases.delivery_prediction_use_case import (
    PredictionDependencyError,
    PredictionError,
    PredictionNotFoundError,
    PredictionValidationError,
)
from src.application.use_cases.prediction_insights_use_cases import (
    MAX_RECENT_LIMIT,
    GetModelMetricsUseCase,
    GetRecentPredictionsUseCase,
)
from src.application.use_cases.prediction_request_use_case import (
    PredictionRequestUseCase,
)
from src.main.container import AppContainer

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/delivery-time-prediction", tags=["Predictions"])

INTERNAL_ERROR_MESSAGE = "Internal server error"


@router.post(
    "",
    response_model=None,
    summary="Predict delivery times or audit the model",
    description="""
    Single stateless entry point selected by `action`:

    * `predict_single` - estimate one order (`orderId`)
    * `predict_batch` - estimate several orders (`batchOrderIds`)
    * `train_model` - replay delivered orders and report the model's accuracy

    `useRealTime` (default true) fuses live weather and traffic signals.
    """,
)
@inject
async def handle_prediction_request(
    payload: PredictionRequestDTO,
    request_use_case: PredictionRequestUseCase = Depends(
        Provide[AppContainer.prediction_request_use_case]
    ),
) -> Dict[str, Any]:
    try:
        result = await request_use_case.execute(payload)
    except PredictionNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except PredictionValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except PredictionDependencyError as exc:
        logger.error(
            "prediction.dependency_error",
            action=payload.action,
            error=str(exc),
            exc_info=exc,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR_MESSAGE,
        )
    except PredictionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except Exception as exc:
        logger.error(
            "prediction.unexpected_error",
            action=payload.action,
            error=str(exc),
            exc_info=exc,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR_MESSAGE,
        )

    return result.model_dump(mode="json", by_alias=True)


@router.get(
    "/metrics",
    response_model=ModelMetricsDTO,
    summary="Accuracy of the model over the latest training records",
)
@inject
async def get_model_metrics(
    metrics_use_case: GetModelMetricsUseCase = Depends(
        Provide[AppContainer.get_model_metrics_use_case]
    ),
) -> ModelMetricsDTO:
    try:
        metrics = await metrics_use_case.execute()
    except Exception as exc:
        logger.error(
            "prediction.metrics.unexpected_error", error=str(exc), exc_info=exc
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR_MESSAGE,
        )

    if metrics is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No training records available; run train_model first",
        )
    return metrics


@router.get(
    "/recent",
    response_model=RecentPredictionsResponseDTO,
    summary="Most recent predictions with their order details",
)
@inject
async def get_recent_predictions(
    limit: int = Query(
        default=20,
        ge=1,
        le=MAX_RECENT_LIMIT,
        description="Maximum number of predictions to return",
    ),
    recent_use_case: GetRecentPredictionsUseCase = Depends(
        Provide[AppContainer.get_recent_predictions_use_case]
    ),
) -> RecentPredictionsResponseDTO:
    try:
        return await recent_use_case.execute(limit=limit)
    except PredictionValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except Exception as exc:
        logger.error(
            "prediction.recent.unexpected_error", error=str(exc), exc_info=exc
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=INTERNAL_ERROR_MESSAGE,
        )
