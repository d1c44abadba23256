"""
Dependency container injection module - Main Layer

This module implements the dependency injection container
to simplify the management and lifecycle of dependencies
in the application.
"""

from contextlib import asynccontextmanager

from dependency_injector import containers, providers

from src.application.models import SystemInfo
from src.application.use_cases.delivery_prediction_use_case import (
    DeliveryPredictionUseCase,
)
from src.application.use_cases.health_use_cases import (
    GetApplicationInfoUseCase,
    GetHealthStatusUseCase,
)
from src.application.use_cases.model_audit_use_case import ModelAuditUseCase
from src.application.use_cases.prediction_insights_use_cases import (
    GetModelMetricsUseCase,
    GetRecentPredictionsUseCase,
)
from src.application.use_cases.prediction_request_use_case import (
    PredictionRequestUseCase,
)
from src.domain.entities.prediction import MODEL_NAME
from src.domain.services.factor_model import StaticFactorModel
from src.domain.services.fusion_predictor import FusionPredictor
from src.domain.services.realtime_features import RealTimeFeatureProvider
from src.infrastructure.database import MongoDatabase
from src.infrastructure.gateways.traffic_gateway import AMapTrafficGateway
from src.infrastructure.gateways.weather_gateway import OpenWeatherGateway
from src.infrastructure.repositories.factor_tables_repository import (
    load_factor_tables,
)
from src.infrastructure.repositories.order_repository import OrderRepository
from src.infrastructure.repositories.prediction_repository import (
    PredictionRepository,
)
from src.infrastructure.repositories.training_record_repository import (
    TrainingRecordRepository,
)
from src.infrastructure.services.health_check_service import HealthCheckService
from src.infrastructure.services.random_source import NumpyRandomSource
from src.shared import get_logger

from .config import AppSettings

logger = get_logger(__name__)


def _is_configured(value) -> bool:
    return bool(value)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependecy-injector."""

    wiring_config = containers.WiringConfiguration(
        packages=["..presentation", "..application"]
    )

    # Settings
    config = providers.Configuration()
    # Infrastructure
    mongo_database = providers.Singleton(
        MongoDatabase,
        mongo_uri=config.database.mongo_uri,
        db_name=config.database.database_name,
        orders_collection=config.database.orders_collection,
        predictions_collection=config.database.predictions_collection,
        training_collection=config.database.training_collection,
    )

    order_repository = providers.Singleton(
        OrderRepository,
        database=mongo_database,
    )

    prediction_repository = providers.Singleton(
        PredictionRepository,
        database=mongo_database,
    )

    training_record_repository = providers.Singleton(
        TrainingRecordRepository,
        database=mongo_database,
    )

    factor_tables = providers.Singleton(
        load_factor_tables,
        path=config.prediction.factor_tables_file,
        default_distance_km=config.prediction.default_distance_km,
    )

    random_source = providers.Singleton(
        NumpyRandomSource,
        seed=config.prediction.random_seed,
    )

    # Gateways
    weather_gateway = providers.Singleton(
        OpenWeatherGateway,
        api_key=config.realtime.weather_api_key,
        base_url=config.realtime.weather_base_url,
        timeout=config.realtime.timeout_seconds,
    )

    traffic_gateway = providers.Singleton(
        AMapTrafficGateway,
        api_key=config.realtime.traffic_api_key,
        base_url=config.realtime.traffic_base_url,
        timeout=config.realtime.timeout_seconds,
        radius_m=config.realtime.traffic_radius_m,
    )

    # Domain services
    static_factor_model = providers.Singleton(
        StaticFactorModel,
        tables=factor_tables,
    )

    feature_provider = providers.Singleton(
        RealTimeFeatureProvider,
        weather_gateway=weather_gateway,
        traffic_gateway=traffic_gateway,
        tables=factor_tables,
        timeout_seconds=config.realtime.timeout_seconds,
        utc_offset_hours=config.realtime.utc_offset_hours,
    )

    fusion_predictor = providers.Singleton(
        FusionPredictor,
        factor_model=static_factor_model,
        feature_provider=feature_provider,
        random_source=random_source,
    )

    # Application (use cases)
    delivery_prediction_use_case = providers.Factory(
        DeliveryPredictionUseCase,
        order_repository=order_repository,
        prediction_repository=prediction_repository,
        predictor=fusion_predictor,
        max_batch_size=config.prediction.max_batch_size,
        batch_concurrency=config.prediction.batch_concurrency,
    )

    model_audit_use_case = providers.Factory(
        ModelAuditUseCase,
        order_repository=order_repository,
        training_record_repository=training_record_repository,
        predictor=fusion_predictor,
        chunk_size=config.prediction.audit_chunk_size,
        max_samples=config.prediction.audit_max_samples,
        concurrency=config.prediction.batch_concurrency,
    )

    prediction_request_use_case = providers.Factory(
        PredictionRequestUseCase,
        prediction_use_case=delivery_prediction_use_case,
        audit_use_case=model_audit_use_case,
    )

    get_model_metrics_use_case = providers.Factory(
        GetModelMetricsUseCase,
        training_record_repository=training_record_repository,
        window=config.prediction.metrics_window,
    )

    get_recent_predictions_use_case = providers.Factory(
        GetRecentPredictionsUseCase,
        prediction_repository=prediction_repository,
        order_repository=order_repository,
    )

    health_check_service = providers.Singleton(
        HealthCheckService,
        mongo_database=mongo_database,
        weather_base_url=config.realtime.weather_base_url,
        traffic_base_url=config.realtime.traffic_base_url,
        weather_configured=providers.Callable(
            _is_configured, config.realtime.weather_api_key
        ),
        traffic_configured=providers.Callable(
            _is_configured, config.realtime.traffic_api_key
        ),
        http_timeout=config.realtime.timeout_seconds,
    )

    system_info = providers.Singleton(
        SystemInfo,
        title=config.api.title,
        description=config.api.description,
        version=config.api.version,
        environment=providers.Callable(
            lambda env: env.value if hasattr(env, "value") else str(env),
            config.environment,
        ),
        git_commit=config.api.git_commit,
        build_time=config.api.build_time,
        model_name=providers.Object(MODEL_NAME),
        mongo_uri=config.database.mongo_uri,
        database_name=config.database.database_name,
        weather_base_url=config.realtime.weather_base_url,
        weather_configured=providers.Callable(
            _is_configured, config.realtime.weather_api_key
        ),
        traffic_base_url=config.realtime.traffic_base_url,
        traffic_configured=providers.Callable(
            _is_configured, config.realtime.traffic_api_key
        ),
        realtime_timeout_seconds=config.realtime.timeout_seconds,
    )

    get_health_status_use_case = providers.Factory(
        GetHealthStatusUseCase,
        health_check_service=health_check_service,
    )

    get_application_info_use_case = providers.Factory(
        GetApplicationInfoUseCase,
        health_check_service=health_check_service,
        system_info=system_info,
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container


@asynccontextmanager
async def app_lifespan():
    """
    Centralized lifecycle management for external resources.

    This async context manager can be used in the FastAPI lifespan
    to properly initialize and clean up resources managed by the
    DI container.
    """
    container = get_container()

    mongo_database = container.mongo_database()

    try:
        # MongoClient connects lazily on the first command
        logger.info("container.mongo.ensure_connection")
        await mongo_database.create_indexes()

        logger.info(
            "container.resources.initialized",
            weather_enabled=container.weather_gateway().enabled,
            traffic_enabled=container.traffic_gateway().enabled,
        )
        yield container

    finally:
        logger.info("container.mongo.close")
        mongo_database.close()
        logger.info("container.resources.shutdown")
