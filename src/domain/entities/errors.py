"""
Domain Errors

This module defines custom error classes for domain-specific exceptions.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ExternalSignalUnavailableError(DomainError):
    """Raised by a real-time signal gateway when its signal cannot be read."""

    def __init__(
        self, source: str, reason: str, details: Optional[Dict[str, Any]] = None
    ):
        self.source = source
        super().__init__(f"{source} signal unavailable: {reason}", details)


class OrderStoreError(DomainError):
    """Raised when the order store cannot be read."""

    pass


class PersistenceError(DomainError):
    """Raised when a prediction or training record cannot be written."""

    pass
