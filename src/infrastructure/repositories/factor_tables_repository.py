"""
Infrastructure Repository - Factor Tables File Loader

Loads operator overrides for the Parametric Duration Model lookup tables from
a JSON document. Keys are the ``FactorTables`` field names; omitted keys keep
their defaults. Example::

    {
      "carrier_factors": {"SF Express": 0.8, "JD Logistics": 0.9},
      "city_distances_km": [{"from": "Chengdu", "to": "Chongqing", "km": 300}]
    }
"""

import json
from pathlib import Path
from typing import Optional, Union

import structlog

from src.domain.entities.factor_tables import DEFAULT_FACTOR_TABLES, FactorTables

logger = structlog.get_logger(__name__)


def load_factor_tables(
    path: Optional[Union[str, Path]] = None,
    default_distance_km: Optional[float] = None,
) -> FactorTables:
    """
    Build the factor tables, applying the JSON overrides at ``path`` if given.

    Raises:
        ValueError: If the file cannot be parsed or names an unknown table.
    """
    tables = DEFAULT_FACTOR_TABLES
    if default_distance_km is not None:
        tables = tables.with_overrides({"default_distance_km": default_distance_km})

    if not path:
        return tables

    file_path = Path(path)
    try:
        overrides = json.loads(file_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("factor_tables.load_failed", path=str(file_path), error=str(exc))
        raise ValueError(f"Cannot read factor tables from {file_path}: {exc}") from exc

    if not isinstance(overrides, dict):
        raise ValueError(f"Factor tables file {file_path} must contain an object")

    tables = tables.with_overrides(overrides)
    logger.info(
        "factor_tables.loaded", path=str(file_path), overridden=sorted(overrides)
    )
    return tables
