"""
Infrastructure Gateway - AMap Traffic Implementation

Resolves a delivery address to coordinates with the AMap geocoding API and
reads the congestion level around it from the circular traffic status API.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from src.domain.entities.errors import ExternalSignalUnavailableError
from src.domain.entities.realtime import UNKNOWN_TRAFFIC_LEVEL, TrafficReading
from src.domain.gateways.traffic_gateway import ITrafficGateway

logger = structlog.get_logger(__name__)

SOURCE = "traffic"

# AMap evaluation.status codes
LEVEL_MAP = {"1": "smooth", "2": "slow", "3": "congested"}


class AMapTrafficGateway(ITrafficGateway):
    """Traffic gateway backed by the AMap web service API."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://restapi.amap.com",
        timeout: float = 5.0,
        radius_m: int = 1000,
    ):
        self.api_key = api_key or None
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.radius_m = radius_m

    @property
    def enabled(self) -> bool:
        return self.api_key is not None

    async def traffic_status(
        self, address: str, city: Optional[str] = None
    ) -> TrafficReading:
        if not self.enabled:
            raise ExternalSignalUnavailableError(SOURCE, "no API key configured")
        if not address:
            raise ExternalSignalUnavailableError(SOURCE, "empty address")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                location = await self._geocode(client, address, city)
                payload = await self._get_json(
                    client,
                    "/v3/traffic/status/circle",
                    {
                        "location": location,
                        "radius": str(self.radius_m),
                        "extensions": "base",
                        "key": self.api_key,
                    },
                )
        except httpx.HTTPStatusError as e:
            logger.warning("traffic.http_error", status_code=e.response.status_code)
            raise ExternalSignalUnavailableError(
                SOURCE, f"HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.warning("traffic.request_error", error=type(e).__name__)
            raise ExternalSignalUnavailableError(
                SOURCE, f"request failed: {type(e).__name__}"
            ) from e
        except ValueError as e:
            raise ExternalSignalUnavailableError(SOURCE, "invalid JSON response") from e

        return self._parse_traffic(payload)

    async def _geocode(
        self, client: httpx.AsyncClient, address: str, city: Optional[str]
    ) -> str:
        params = {"address": address, "key": self.api_key}
        if city:
            params["city"] = city
        payload = await self._get_json(client, "/v3/geocode/geo", params)

        geocodes = payload.get("geocodes") or []
        location = geocodes[0].get("location") if geocodes else None
        if not location:
            raise ExternalSignalUnavailableError(
                SOURCE, "address could not be geocoded", {"city": city}
            )
        return str(location)

    async def _get_json(
        self, client: httpx.AsyncClient, path: str, params: Dict[str, Any]
    ) -> Dict[str, Any]:
        response = await client.get(f"{self.base_url}{path}", params=params)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ExternalSignalUnavailableError(SOURCE, "unexpected response shape")
        if str(payload.get("status")) != "1":
            raise ExternalSignalUnavailableError(
                SOURCE, f"provider error: {payload.get('info') or 'unknown'}"
            )
        return payload

    def _parse_traffic(self, payload: Dict[str, Any]) -> TrafficReading:
        info = payload.get("trafficinfo") or {}
        evaluation = info.get("evaluation") or {}
        level = LEVEL_MAP.get(str(evaluation.get("status")), UNKNOWN_TRAFFIC_LEVEL)
        return TrafficReading(level=level, description=info.get("description"))
