"""Domain port for the pseudorandom jitter applied to estimates."""

from __future__ import annotations

from typing import Protocol


class IRandomSource(Protocol):
    """Source of uniformly distributed floats."""

    def uniform(self, low: float, high: float) -> float:
        """Return a float in ``[low, high)``."""
        ...
