"""OpenWeatherMap current weather adapter."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from weather_display.config import (
    API_KEY_PLACEHOLDER, HTTP_TIMEOUT_SECONDS, OPENWEATHER_API_KEY, OPENWEATHER_BASE_URL,
    OPENWEATHER_ICON_URL
)
from weather_display.weather.client import (
    WeatherProvider, clamp_percentage, optional_number, require_number, section
)
from weather_display.weather.conditions import from_openweather, openweather_is_day
from weather_display.weather.errors import GENERIC_FETCH_ERROR, BadStatus
from weather_display.weather.models import Location, WeatherRecord

logger = logging.getLogger(__name__)


class OpenWeatherMapProvider(WeatherProvider):
    """Integration with the OpenWeatherMap current weather endpoint."""

    name = "openweathermap"
    location_kind = "query"
    requires_api_key = True

    def __init__(
        self,
        api_key: Optional[str] = OPENWEATHER_API_KEY,
        base_url: str = OPENWEATHER_BASE_URL,
        timeout: Optional[float] = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        icon_url: str = OPENWEATHER_ICON_URL
    ):
        super().__init__(base_url, timeout=timeout, transport=transport)
        self.api_key = api_key
        self.icon_url = icon_url

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key) and self.api_key != API_KEY_PLACEHOLDER

    def build_params(self, location: Location) -> Dict[str, Any]:
        params: Dict[str, Any] = {"appid": self.api_key or "", "units": "metric"}
        if location.query is not None:
            params["q"] = location.query
        else:
            params["lat"] = location.coordinates.lat
            params["lon"] = location.coordinates.lon
        return params

    def parse_record(self, data: Dict[str, Any], location: Location) -> WeatherRecord:
        self._check_cod(data)

        main = section(data, "main")
        wind = section(data, "wind")

        weather = data.get("weather")
        condition = weather[0] if isinstance(weather, list) and weather and isinstance(weather[0], dict) else {}
        condition_id = condition.get("id")
        icon = condition.get("icon") if isinstance(condition.get("icon"), str) else None
        group = condition.get("main") if isinstance(condition.get("main"), str) else None
        summary = condition.get("description") if isinstance(condition.get("description"), str) else None

        name = data.get("name")
        label = name.strip() if isinstance(name, str) and name.strip() else location.display_name

        return WeatherRecord(
            location_label=label,
            temperature_c=require_number(main, "temp", "main.temp"),
            feels_like_c=optional_number(main, "feels_like", "main.feels_like"),
            humidity_pct=clamp_percentage(require_number(main, "humidity", "main.humidity")),
            pressure_hpa=require_number(main, "pressure", "main.pressure"),
            wind_speed_ms=max(0.0, require_number(wind, "speed", "wind.speed")),
            wind_direction_deg=self._wind_direction(wind),
            cloud_cover_pct=clamp_percentage(optional_number(section(data, "clouds"), "all", "clouds.all")),
            precipitation_mm=self._precipitation(data),
            condition_code=from_openweather(
                condition_id if isinstance(condition_id, int) and not isinstance(condition_id, bool) else None,
                icon,
                group
            ),
            visibility_m=self._visibility(data),
            observed_at=self._parse_observed_at(data.get("dt")),
            summary=summary,
            is_day=openweather_is_day(icon),
            icon_url=self.icon_url.format(icon=icon) if icon else None
        )

    def _check_cod(self, data: Dict[str, Any]) -> None:
        """Raise for error codes reported inside a successful response."""
        cod = data.get("cod")
        if cod is None or str(cod) == "200":
            return

        message = data.get("message")
        if not isinstance(message, str) or not message.strip():
            message = GENERIC_FETCH_ERROR
        status_code = int(cod) if str(cod).isdigit() else None

        logger.error(f"OpenWeatherMap reported error code {cod}: {message}")
        raise BadStatus(message.strip(), status_code)

    def _wind_direction(self, wind: Dict[str, Any]) -> Optional[float]:
        direction = optional_number(wind, "deg", "wind.deg")
        if direction is None:
            return None
        return direction % 360.0

    def _visibility(self, data: Dict[str, Any]) -> Optional[float]:
        visibility = optional_number(data, "visibility", "visibility")
        if visibility is None or visibility < 0:
            return None
        return visibility

    def _precipitation(self, data: Dict[str, Any]) -> float:
        """Sum rain and snow volume, preferring the last hour over three hours."""
        total = 0.0
        for kind in ("rain", "snow"):
            volumes = section(data, kind)
            amount = optional_number(volumes, "1h", f"{kind}.1h")
            if amount is None:
                amount = optional_number(volumes, "3h", f"{kind}.3h")
            if amount is not None and amount > 0:
                total += amount
        return total

    def _parse_observed_at(self, value: Any) -> Optional[datetime]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        try:
            return datetime.fromtimestamp(int(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.warning(f"Ignoring invalid observation time: {value!r}")
            return None
