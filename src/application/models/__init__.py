"""Application-level models shared across use cases."""

from .system_info import SystemInfo

__all__ = ["SystemInfo"]
