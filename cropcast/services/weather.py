"""Weather lookups: best-effort OpenWeather readings and the dashboard snapshot."""
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from cropcast.config import get_settings
from cropcast.schemas import WeatherSnapshot

logger = logging.getLogger(__name__)

MODERATE_CONDITIONS = "moderate conditions"


@dataclass
class WeatherReading:
    temperature: float
    humidity: float
    rainfall_mm: float
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_openweather(cls, payload: dict[str, Any]) -> "WeatherReading":
        main = payload.get("main")
        rain = payload.get("rain")
        if not isinstance(main, dict):
            main = {}
        if not isinstance(rain, dict):
            rain = {}
        temperature = main.get("temp")
        humidity = main.get("humidity")
        return cls(
            temperature=25 if temperature is None else temperature,
            humidity=60 if humidity is None else humidity,
            rainfall_mm=rain.get("1h") or 0,
            raw=payload,
        )

    def describe(self) -> str:
        return (
            f"Temperature: {self.temperature}°C, Humidity: {self.humidity}%, "
            f"Recent rainfall: {self.rainfall_mm}mm"
        )


class WeatherClient:
    """Current conditions by free-text location. Never raises."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openweathermap.org/data/2.5",
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def current(self, location: str) -> Optional[WeatherReading]:
        if not location or not location.strip():
            return None
        if not self.api_key:
            logger.info("Weather API key not configured; skipping lookup for %r", location)
            return None

        params = {"q": location.strip(), "appid": self.api_key, "units": "metric"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(f"{self.base_url}/weather", params=params)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Weather API error for %r: %s", location, exc)
            return None

        if not isinstance(payload, dict):
            logger.warning("Unexpected weather payload for %r", location)
            return None
        return WeatherReading.from_openweather(payload)


def synthetic_snapshot(location: str) -> WeatherSnapshot:
    """Fixed conditions shown on the dashboard for a farm's location."""
    return WeatherSnapshot(
        location=location,
        temperature=24,
        condition="Partly Cloudy",
        humidity=65,
        wind_speed=12,
    )


def get_weather_client() -> WeatherClient:
    settings = get_settings()
    return WeatherClient(
        api_key=settings.openweather_api_key,
        base_url=settings.weather_base_url,
        timeout=settings.http_timeout_seconds,
    )
