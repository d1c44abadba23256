"""Lightweight settings structures consumed by the application layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SystemInfo:
    """Subset of configuration required by system-related use cases."""

    title: str
    description: str
    version: str
    environment: str
    git_commit: str
    build_time: str
    model_name: str
    mongo_uri: str
    database_name: str
    weather_base_url: str
    weather_configured: bool
    traffic_base_url: str
    traffic_configured: bool
    realtime_timeout_seconds: float
