"""MET Norway (yr.no) Locationforecast adapter."""

import logging
from typing import Any, Dict, Optional

import httpx

from weather_display.config import HTTP_TIMEOUT_SECONDS, USER_AGENT, YR_API_BASE_URL
from weather_display.weather.client import (
    WeatherProvider, clamp_percentage, optional_number, parse_timestamp,
    require_number, section
)
from weather_display.weather.conditions import from_metno, split_metno_symbol
from weather_display.weather.errors import MalformedPayload, UnknownLocation
from weather_display.weather.models import Location, WeatherRecord

logger = logging.getLogger(__name__)

DETAILS_PATH = "properties.timeseries[0].data.instant.details"

# Next-period blocks, shortest first
NEXT_PERIODS = ("next_1_hours", "next_6_hours", "next_12_hours")


class MetNoProvider(WeatherProvider):
    """Reads current conditions from the first entry of a yr.no forecast."""

    name = "metno"
    location_kind = "coordinates"

    def __init__(
        self,
        base_url: str = YR_API_BASE_URL,
        user_agent: str = USER_AGENT,
        timeout: Optional[float] = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the yr.no adapter.

        Args:
            base_url: Base URL for the Locationforecast API
            user_agent: Identifying User-Agent, required by the API terms
            timeout: Request timeout in seconds, None for no timeout
            transport: Optional httpx transport (used for testing)
        """
        super().__init__(
            base_url,
            headers={"User-Agent": user_agent},
            timeout=timeout,
            transport=transport
        )
        self.user_agent = user_agent

    def build_params(self, location: Location) -> Dict[str, Any]:
        if location.coordinates is None:
            raise UnknownLocation(location.display_name)

        # The API asks for at most four decimals
        return {
            "lat": round(location.coordinates.lat, 4),
            "lon": round(location.coordinates.lon, 4)
        }

    def parse_record(self, data: Dict[str, Any], location: Location) -> WeatherRecord:
        timeseries = section(data, "properties").get("timeseries")
        if not isinstance(timeseries, list) or not timeseries or not isinstance(timeseries[0], dict):
            raise MalformedPayload("Weather data contains no forecast timeseries")

        entry = timeseries[0]
        entry_data = section(entry, "data")
        details = section(section(entry_data, "instant"), "details")

        temperature = require_number(details, "air_temperature", f"{DETAILS_PATH}.air_temperature")
        humidity = require_number(details, "relative_humidity", f"{DETAILS_PATH}.relative_humidity")
        pressure = require_number(
            details, "air_pressure_at_sea_level", f"{DETAILS_PATH}.air_pressure_at_sea_level"
        )
        wind_speed = require_number(details, "wind_speed", f"{DETAILS_PATH}.wind_speed")

        wind_direction = optional_number(details, "wind_from_direction", f"{DETAILS_PATH}.wind_from_direction")
        if wind_direction is not None:
            wind_direction = wind_direction % 360.0

        cloud_cover = optional_number(details, "cloud_area_fraction", f"{DETAILS_PATH}.cloud_area_fraction")

        symbol_code, precipitation = self._next_period(entry_data)
        _, is_day = split_metno_symbol(symbol_code) if symbol_code else (None, None)

        return WeatherRecord(
            location_label=location.display_name,
            temperature_c=temperature,
            humidity_pct=clamp_percentage(humidity),
            pressure_hpa=pressure,
            wind_speed_ms=max(0.0, wind_speed),
            wind_direction_deg=wind_direction,
            cloud_cover_pct=clamp_percentage(cloud_cover),
            precipitation_mm=precipitation,
            condition_code=from_metno(symbol_code),
            observed_at=parse_timestamp(entry.get("time")),
            is_day=is_day
        )

    def _next_period(self, entry_data: Dict[str, Any]) -> tuple:
        """Return (symbol_code, precipitation_mm) from the shortest next-period block.

        Args:
            entry_data: The ``data`` object of a timeseries entry

        Returns:
            Tuple of symbol code (None if absent) and precipitation (0 if absent)
        """
        for period in NEXT_PERIODS:
            block = section(entry_data, period)
            if not block:
                continue

            symbol_code = section(block, "summary").get("symbol_code")
            if not isinstance(symbol_code, str):
                symbol_code = None

            precipitation = optional_number(
                section(block, "details"), "precipitation_amount", f"{period}.details.precipitation_amount"
            )
            return symbol_code, max(0.0, precipitation or 0.0)

        logger.info("No next-period block in forecast, using defaults")
        return None, 0.0
