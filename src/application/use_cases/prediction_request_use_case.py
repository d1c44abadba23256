"""
Application Use Case - Prediction Request

Single entry point for the delivery-time prediction endpoint: validates the
requested action and dispatches it.
"""

import structlog

from src.application.dtos.prediction_dto import (
    PredictionActionResponseDTO,
    PredictionRequestDTO,
)
from src.application.use_cases.delivery_prediction_use_case import (
    DeliveryPredictionUseCase,
    PredictionValidationError,
)
from src.application.use_cases.model_audit_use_case import ModelAuditUseCase
from src.shared.consts import EnumPredictionAction

logger = structlog.get_logger(__name__)

_VALID_ACTIONS = ", ".join(action.value for action in EnumPredictionAction)


class PredictionRequestUseCase:
    """Dispatches predict_single, predict_batch and train_model requests."""

    def __init__(
        self,
        prediction_use_case: DeliveryPredictionUseCase,
        audit_use_case: ModelAuditUseCase,
    ):
        self.prediction_use_case = prediction_use_case
        self.audit_use_case = audit_use_case

    async def execute(
        self, request: PredictionRequestDTO
    ) -> PredictionActionResponseDTO:
        action = self._parse_action(request.action)
        logger.info(
            "prediction.request.received",
            action=action.value,
            use_real_time=request.use_real_time,
        )

        if action is EnumPredictionAction.PREDICT_SINGLE:
            return await self.prediction_use_case.predict_single(
                request.order_id, request.use_real_time
            )
        if action is EnumPredictionAction.PREDICT_BATCH:
            return await self.prediction_use_case.predict_batch(
                request.batch_order_ids, request.use_real_time
            )
        return await self.audit_use_case.execute(request.use_real_time)

    @staticmethod
    def _parse_action(action) -> EnumPredictionAction:
        if not action:
            raise PredictionValidationError(
                f"action is required; expected one of: {_VALID_ACTIONS}"
            )
        try:
            return EnumPredictionAction(action)
        except ValueError as exc:
            raise PredictionValidationError(
                f"Invalid action '{action}'; expected one of: {_VALID_ACTIONS}"
            ) from exc
