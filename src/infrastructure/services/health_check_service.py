"""Infrastructure implementation for system health checks."""

from __future__ import annotations

import asyncio
from time import perf_counter
from typing import Iterable, List
from urllib.parse import urljoin

import httpx

from src.domain.entities.health import DependencyStatus, ServiceStatus, SystemHealth
from src.domain.ports.health_check import IHealthCheckService
from src.infrastructure.database.mongo_database import MongoDatabase


class HealthCheckService(IHealthCheckService):
    """Collect health information for the order store and signal providers."""

    def __init__(
        self,
        mongo_database: MongoDatabase,
        weather_base_url: str,
        traffic_base_url: str,
        *,
        weather_configured: bool = False,
        traffic_configured: bool = False,
        http_timeout: float = 5.0,
    ) -> None:
        self._mongo_database = mongo_database
        self._weather_base_url = weather_base_url
        self._traffic_base_url = traffic_base_url
        self._weather_configured = weather_configured
        self._traffic_configured = traffic_configured
        self._http_timeout = http_timeout

    async def evaluate(self) -> SystemHealth:
        """Run checks concurrently and aggregate system health."""

        checks = {
            "mongo": asyncio.create_task(self._check_mongo()),
            "weather": asyncio.create_task(
                self._check_provider(
                    name="weather",
                    base_url=self._weather_base_url,
                    configured=self._weather_configured,
                )
            ),
            "traffic": asyncio.create_task(
                self._check_provider(
                    name="traffic",
                    base_url=self._traffic_base_url,
                    configured=self._traffic_configured,
                )
            ),
        }

        dependency_statuses: List[DependencyStatus] = []

        for name, task in checks.items():
            try:
                dependency_statuses.append(await task)
            except Exception as exc:  # pragma: no cover - defensive fallback
                dependency_statuses.append(
                    DependencyStatus(
                        name=name,
                        status=ServiceStatus.DOWN,
                        message=str(exc),
                        required=name == "mongo",
                    )
                )

        overall_status = self._aggregate_status(dependency_statuses)
        return SystemHealth(status=overall_status, dependencies=dependency_statuses)

    def _aggregate_status(self, statuses: Iterable[DependencyStatus]) -> ServiceStatus:
        has_unknown = False
        has_degraded = False

        for status in statuses:
            if not status.required:
                # Optional providers can only degrade the system.
                if status.status in (ServiceStatus.DOWN, ServiceStatus.DEGRADED):
                    has_degraded = True
                continue
            if status.status == ServiceStatus.DOWN:
                return ServiceStatus.DOWN
            if status.status == ServiceStatus.DEGRADED:
                has_degraded = True
            if status.status == ServiceStatus.UNKNOWN:
                has_unknown = True

        if has_degraded:
            return ServiceStatus.DEGRADED
        if has_unknown:
            return ServiceStatus.UNKNOWN
        return ServiceStatus.UP

    async def _check_mongo(self) -> DependencyStatus:
        if not self._mongo_database:
            return DependencyStatus(
                name="mongo",
                status=ServiceStatus.UNKNOWN,
                message="Mongo database client not configured.",
            )

        start = perf_counter()
        try:
            await asyncio.to_thread(self._mongo_database.ping)
            latency_ms = (perf_counter() - start) * 1000
            return DependencyStatus(
                name="mongo",
                status=ServiceStatus.UP,
                message="MongoDB ping successful",
                latency_ms=latency_ms,
                details={"database": self._mongo_database.db.name},
            )
        except Exception as exc:
            latency_ms = (perf_counter() - start) * 1000
            return DependencyStatus(
                name="mongo",
                status=ServiceStatus.DOWN,
                message=f"MongoDB ping failed: {exc}",
                latency_ms=latency_ms,
            )

    async def _check_provider(
        self, *, name: str, base_url: str, configured: bool
    ) -> DependencyStatus:
        if not configured:
            return DependencyStatus(
                name=name,
                status=ServiceStatus.UNKNOWN,
                message="API key not configured; signal disabled.",
                required=False,
            )
        if not base_url:
            return DependencyStatus(
                name=name,
                status=ServiceStatus.UNKNOWN,
                message="Service URL not configured.",
                required=False,
            )

        result = await self._hit_http_endpoint(name=name, base_url=base_url, path="/")
        result.required = False
        return result

    async def _hit_http_endpoint(
        self,
        *,
        name: str,
        base_url: str,
        path: str,
    ) -> DependencyStatus:
        url = self._normalize_url(base_url, path)
        start = perf_counter()

        try:
            async with httpx.AsyncClient(timeout=self._http_timeout) as client:
                response = await client.get(url)

            latency_ms = (perf_counter() - start) * 1000
            status_code = response.status_code

            # Unauthenticated probes of the API root answer 4xx when reachable.
            status = ServiceStatus.DOWN if status_code >= 500 else ServiceStatus.UP

            return DependencyStatus(
                name=name,
                status=status,
                message=f"HTTP {status_code}",
                latency_ms=latency_ms,
                details={"url": url, "status_code": status_code},
            )

        except httpx.RequestError as exc:
            latency_ms = (perf_counter() - start) * 1000
            return DependencyStatus(
                name=name,
                status=ServiceStatus.DOWN,
                message=f"HTTP request failed: {type(exc).__name__}",
                latency_ms=latency_ms,
                details={"url": url},
            )

    def _normalize_url(self, base_url: str, path: str) -> str:
        if not path:
            return base_url
        base = base_url if base_url.endswith("/") else f"{base_url}/"
        relative = path.lstrip("/")
        return urljoin(base, relative)
