"""
Domain Layer Package

This package contains the Parametric Duration Model: order, prediction and
audit entities, the factor model and fusion services, and the repository
and gateway contracts they rely on. It has no dependencies on frameworks
or infrastructure.
"""

# Re-export submodules
from src.domain import entities, gateways, ports, repositories, services

__all__ = ["entities", "gateways", "repositories", "services", "ports"]
