from __future__ import annotations

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from src.application.models import SystemInfo
from src.application.use_cases.health_use_cases import (
    GetApplicationInfoUseCase,
    GetHealthStatusUseCase,
)
from src.domain.entities.health import DependencyStatus, ServiceStatus, SystemHealth
from src.main.app import create_app
from src.main.container import get_container


class _StubMongo:
    async def create_indexes(self):
        return None

    def close(self):
        return None


class _HealthCheckService:
    def __init__(self, status: ServiceStatus):
        self._health = SystemHealth(
            status=status,
            dependencies=[
                DependencyStatus(name="mongo", status=status),
                DependencyStatus(
                    name="weather", status=ServiceStatus.UNKNOWN, required=False
                ),
            ],
        )

    async def evaluate(self) -> SystemHealth:
        return self._health


def _client_for(status: ServiceStatus):
    app = create_app()
    container = get_container()
    container.mongo_database.override(providers.Object(_StubMongo()))

    health_provider = _HealthCheckService(status)
    system_info = SystemInfo(
        title="Delivery Time Prediction Service",
        description="desc",
        version="2.0.0",
        environment="development",
        git_commit="abc",
        build_time="now",
        model_name="Parametric Duration Model",
        mongo_uri="mongodb://mongo:27017",
        database_name="delivery_prediction",
        weather_base_url="https://api.openweathermap.org",
        weather_configured=False,
        traffic_base_url="https://restapi.amap.com",
        traffic_configured=False,
        realtime_timeout_seconds=5.0,
    )

    container.get_health_status_use_case.override(
        providers.Object(GetHealthStatusUseCase(health_provider))
    )
    container.get_application_info_use_case.override(
        providers.Factory(
            GetApplicationInfoUseCase,
            health_check_service=health_provider,
            system_info=system_info,
        )
    )
    return TestClient(app)


@pytest.fixture()
def client():
    with _client_for(ServiceStatus.UP) as test_client:
        yield test_client


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "up"
    assert body["dependencies"][1]["required"] is False


def test_health_endpoint_down_is_503():
    with _client_for(ServiceStatus.DOWN) as test_client:
        response = test_client.get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "down"


def test_info_endpoint(client):
    response = client.get("/info")
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Delivery Time Prediction Service"
    assert body["model_name"] == "Parametric Duration Model"


def test_unknown_route_uses_error_body(client):
    response = client.get("/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
