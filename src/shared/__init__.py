"""
Shared module - Cross-cutting concerns / Shared Layer

This module provides shared utilities, constants, and enums that are used
across multiple layers of the prediction service:
- Environment names, log levels and request actions
- Structured logging configuration, including the persistence channel

Following Clean Architecture principles, it must not depend on
Infrastructure or Frameworks.
"""

from .consts import EnumEnvironment, EnumLogLevel, EnumPredictionAction
from .logging import (
    configure_logging,
    get_logger,
    get_persistence_logger,
    update_logging_from_settings,
)

__all__ = [
    "EnumEnvironment",
    "EnumLogLevel",
    "EnumPredictionAction",
    "configure_logging",
    "get_logger",
    "get_persistence_logger",
    "update_logging_from_settings",
]
