"""numpy-backed implementation of the estimate jitter source."""

from typing import Optional

import numpy as np

from src.domain.ports.random_source import IRandomSource


class NumpyRandomSource(IRandomSource):
    """Uniform floats from ``numpy.random.default_rng``; seed for reproducibility."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self, low: float, high: float) -> float:
        return float(self._rng.uniform(low, high))
