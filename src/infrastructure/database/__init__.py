"""
Database package - Infrastructure Layer

This package contains the MongoDB client used by the repositories, plus the
document conversions they share.
"""

from src.infrastructure.database.documents import as_float, as_utc_datetime
from src.infrastructure.database.mongo_database import MongoDatabase

__all__ = ["MongoDatabase", "as_utc_datetime", "as_float"]
