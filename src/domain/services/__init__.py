"""
Domain Services Package

The Parametric Duration Model: static factors, real-time features and
their fusion into a delivery-time estimate.
"""

from .factor_model import StaticFactorModel, StaticFactors
from .fusion_predictor import FusionPredictor, FusionResult
from .realtime_features import RealTimeFeatureProvider, extract_city

__all__ = [
    "StaticFactorModel",
    "StaticFactors",
    "RealTimeFeatureProvider",
    "extract_city",
    "FusionPredictor",
    "FusionResult",
]
