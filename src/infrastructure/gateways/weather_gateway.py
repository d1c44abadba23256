"""
Infrastructure Gateway - OpenWeatherMap Implementation

Reads current weather for a city from the OpenWeatherMap current weather API
and maps it onto the condition labels used by the prediction model.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from src.domain.entities.errors import ExternalSignalUnavailableError
from src.domain.entities.realtime import UNKNOWN_CONDITION, WeatherReading
from src.domain.gateways.weather_gateway import IWeatherGateway

logger = structlog.get_logger(__name__)

SOURCE = "weather"

CONDITION_MAP = {
    "clear": "clear",
    "clouds": "cloudy",
    "rain": "rain",
    "drizzle": "rain",
    "snow": "snow",
    "mist": "fog",
    "fog": "fog",
    "haze": "fog",
    "smoke": "fog",
    "dust": "fog",
    "sand": "fog",
    "ash": "fog",
    "thunderstorm": "storm",
    "squall": "storm",
    "tornado": "storm",
}


class OpenWeatherGateway(IWeatherGateway):
    """Weather gateway backed by the OpenWeatherMap HTTP API."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openweathermap.org",
        timeout: float = 5.0,
    ):
        """
        Initialize the weather gateway.

        Args:
            api_key: OpenWeatherMap ``appid``; without it the gateway is disabled
            base_url: API root, without the ``/data/2.5`` suffix
            timeout: Request timeout in seconds
        """
        self.api_key = api_key or None
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return self.api_key is not None

    async def current_weather(self, city: str) -> WeatherReading:
        if not self.enabled:
            raise ExternalSignalUnavailableError(SOURCE, "no API key configured")

        url = f"{self.base_url}/data/2.5/weather"
        params = {"q": city, "units": "metric", "appid": self.api_key}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "weather.http_error", city=city, status_code=e.response.status_code
            )
            raise ExternalSignalUnavailableError(
                SOURCE, f"HTTP {e.response.status_code}", {"city": city}
            ) from e
        except httpx.RequestError as e:
            logger.warning("weather.request_error", city=city, error=type(e).__name__)
            raise ExternalSignalUnavailableError(
                SOURCE, f"request failed: {type(e).__name__}", {"city": city}
            ) from e
        except ValueError as e:
            raise ExternalSignalUnavailableError(
                SOURCE, "invalid JSON response", {"city": city}
            ) from e

        return self._parse_weather(payload, city)

    def _parse_weather(self, payload: Any, city: str) -> WeatherReading:
        if not isinstance(payload, dict):
            raise ExternalSignalUnavailableError(
                SOURCE, "unexpected response shape", {"city": city}
            )

        conditions = payload.get("weather") or []
        main_label = ""
        if conditions and isinstance(conditions[0], dict):
            main_label = str(conditions[0].get("main") or "")
        condition = CONDITION_MAP.get(main_label.lower(), UNKNOWN_CONDITION)

        return WeatherReading(
            condition=condition,
            temperature=_number(payload.get("main"), "temp"),
            wind_speed=_number(payload.get("wind"), "speed"),
        )


def _number(section: Optional[Dict[str, Any]], key: str) -> Optional[float]:
    if not isinstance(section, dict):
        return None
    value = section.get(key)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return None
