"""
Application Settings - Main Layer

Use Pydantic Settings for configuration management.
This module handles configuration settings provided using
environment variables, .env files and default values.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.shared import EnumEnvironment, EnumLogLevel
from src.shared.env import load_secret_file_variables  # noqa: F401


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    mongo_uri: str = Field(
        default="mongodb://localhost:27017/delivery_prediction",
        description="MongoDB connection URI",
    )
    database_name: str = Field(
        default="delivery_prediction", description="Name of the MongoDB database"
    )
    orders_collection: str = Field(
        default="orders", description="Collection holding the order store"
    )
    predictions_collection: str = Field(
        default="delivery_predictions", description="Collection for predictions"
    )
    training_collection: str = Field(
        default="prediction_training_data",
        description="Collection for audit training records",
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_", case_sensitive=False, extra="ignore"
    )


class APISettings(BaseSettings):
    """HTTP API configuration settings."""

    title: str = Field(
        default="Delivery Time Prediction Service", description="API title"
    )
    description: str = Field(
        default="Delivery-time estimates for shipments from the "
        "Parametric Duration Model with live weather and traffic signals",
        description="API description",
    )
    version: str = Field(default="2.0.0", description="API version")
    git_commit: str = Field(
        default="unknown",
        description="Git commit hash",
        validation_alias=AliasChoices("API_GIT_COMMIT", "GIT_COMMIT"),
    )
    build_time: str = Field(
        default="unknown",
        description="Build timestamp",
        validation_alias=AliasChoices("API_BUILD_TIME", "BUILD_TIME"),
    )
    host: str = Field(default="0.0.0.0", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")
    reload: bool = Field(
        default=False, description="Enable auto-reload for development"
    )

    model_config = SettingsConfigDict(
        env_prefix="API_", case_sensitive=False, extra="ignore"
    )


class RealTimeSettings(BaseSettings):
    """Weather and traffic provider settings. Missing keys disable a signal."""

    weather_api_key: Optional[str] = Field(
        default=None,
        description="OpenWeatherMap API key",
        validation_alias=AliasChoices("REALTIME_WEATHER_API_KEY", "WEATHER_API_KEY"),
    )
    weather_base_url: str = Field(
        default="https://api.openweathermap.org",
        description="OpenWeatherMap API root",
    )
    traffic_api_key: Optional[str] = Field(
        default=None,
        description="AMap web service API key",
        validation_alias=AliasChoices("REALTIME_TRAFFIC_API_KEY", "TRAFFIC_API_KEY"),
    )
    traffic_base_url: str = Field(
        default="https://restapi.amap.com", description="AMap API root"
    )
    traffic_radius_m: int = Field(
        default=1000, description="Radius of the traffic status circle in meters"
    )
    timeout_seconds: float = Field(
        default=5.0, gt=0, description="Per-call timeout for signal fetches"
    )
    utc_offset_hours: float = Field(
        default=8.0, description="Local time offset used for the time-of-day factor"
    )

    model_config = SettingsConfigDict(
        env_prefix="REALTIME_", case_sensitive=False, extra="ignore"
    )


class PredictionSettings(BaseSettings):
    """Parametric Duration Model settings."""

    max_batch_size: int = Field(
        default=100, ge=1, description="Maximum order ids per predict_batch"
    )
    batch_concurrency: int = Field(
        default=10, ge=1, description="Orders predicted concurrently"
    )
    audit_chunk_size: int = Field(
        default=200, ge=1, description="Delivered orders loaded per audit chunk"
    )
    audit_max_samples: int = Field(
        default=10000, ge=0, description="Maximum orders replayed per audit"
    )
    metrics_window: int = Field(
        default=1000, ge=1, description="Training records summarized by /metrics"
    )
    random_seed: Optional[int] = Field(
        default=None, description="Seed for the estimate jitter (unseeded if unset)"
    )
    default_distance_km: float = Field(
        default=800.0, gt=0, description="Distance assumed for unknown city pairs"
    )
    factor_tables_file: Optional[str] = Field(
        default=None, description="JSON file overriding the factor tables"
    )

    model_config = SettingsConfigDict(
        env_prefix="PREDICTION_", case_sensitive=False, extra="ignore"
    )


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    level: EnumLogLevel = Field(default=EnumLogLevel.INFO, description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Logging format",
    )
    file_path: Optional[str] = Field(
        default=None, description="Log file path (if None, logs to console)"
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", case_sensitive=False, extra="ignore"
    )


class AppSettings(BaseSettings):
    """Main application settings, aggregating all sub-settings."""

    environment: EnumEnvironment = Field(
        default=EnumEnvironment.DEVELOPMENT, description="Application environment"
    )

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    api: APISettings = Field(default_factory=APISettings)
    realtime: RealTimeSettings = Field(default_factory=RealTimeSettings)
    prediction: PredictionSettings = Field(default_factory=PredictionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )


def get_settings() -> AppSettings:
    """
    Get application settings instance Factory.

    Used to be mocked in tests, allowing different settings based on environment.
    """
    return AppSettings()


settings = get_settings()
