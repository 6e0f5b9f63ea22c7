"""Base HTTP client for weather provider adapters."""

import logging
import math
from datetime import datetime
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from weather_display.config import HTTP_TIMEOUT_SECONDS
from weather_display.weather.errors import (
    GENERIC_FETCH_ERROR, BadStatus, MalformedPayload, MissingRequiredField,
    NetworkFailure
)
from weather_display.weather.locations import (
    LocationResolver, QueryLocationResolver, StaticLocationResolver
)
from weather_display.weather.models import Location, WeatherRecord

logger = logging.getLogger(__name__)


class WeatherProvider:
    """Async adapter turning a location into a :class:`WeatherRecord`.

    Subclasses describe one external API: how to build the request
    parameters and how to read the response body. Transport errors, error
    statuses and unreadable bodies are handled here and always surface as
    :class:`FetchError` subclasses.
    """

    name: str = "provider"
    location_kind: str = "query"
    requires_api_key: bool = False

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = HTTP_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the provider.

        Args:
            base_url: Endpoint queried for current conditions
            headers: Headers sent with every request
            timeout: Request timeout in seconds, None for no timeout
            transport: Optional httpx transport (used for testing)
        """
        self.base_url = base_url
        self.client = httpx.AsyncClient(
            headers=headers or {},
            timeout=timeout,
            transport=transport
        )

    @property
    def has_credentials(self) -> bool:
        """Whether the provider is configured well enough to make requests."""
        return True

    def create_resolver(self) -> LocationResolver:
        """Return the location resolver matching what this API expects."""
        if self.location_kind == "coordinates":
            return StaticLocationResolver()
        return QueryLocationResolver()

    def build_params(self, location: Location) -> Dict[str, Any]:
        """Build the query parameters for a request.

        Args:
            location: Resolved location

        Returns:
            Query parameters for the provider endpoint

        Raises:
            ResolutionError: If the location kind does not suit this provider
        """
        raise NotImplementedError

    def parse_record(self, data: Dict[str, Any], location: Location) -> WeatherRecord:
        """Normalize a decoded response body.

        Args:
            data: JSON object returned by the provider
            location: Location the request was made for

        Returns:
            Normalized weather record

        Raises:
            MissingRequiredField: If a required measurement is absent
            MalformedPayload: If the body does not have the expected structure
        """
        raise NotImplementedError

    async def fetch_weather(self, location: Location) -> WeatherRecord:
        """Fetch current conditions for a location.

        Args:
            location: Resolved location

        Returns:
            Normalized weather record

        Raises:
            FetchError: If the request fails or the response cannot be read
            ResolutionError: If the location kind does not suit this provider
        """
        params = self.build_params(location)
        logger.info(f"Fetching weather from {self.name} for {location.display_name}")

        data = await self._get_json(params)

        try:
            record = self.parse_record(data, location)
        except ValidationError as e:
            logger.error(f"Invalid weather data from {self.name}: {e}")
            raise MalformedPayload("Weather service returned invalid data") from e
        except (TypeError, ValueError, OverflowError) as e:
            logger.error(f"Unreadable weather data from {self.name}: {e!r}")
            raise MalformedPayload("Weather service returned invalid data") from e

        logger.info(
            f"Fetched weather for {record.location_label}: "
            f"{record.temperature_c}°C, {record.condition_code.value}"
        )
        return record

    async def _get_json(self, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self.client.get(self.base_url, params=params)
        except httpx.RequestError as e:
            logger.error(f"Request error to {self.name} API: {e!r}")
            raise NetworkFailure(GENERIC_FETCH_ERROR) from e

        if not response.is_success:
            logger.error(f"HTTP error from {self.name} API: {response.status_code} - {response.text[:200]}")
            raise BadStatus(error_message(response), response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Response from {self.name} API is not JSON: {e}")
            raise MalformedPayload("Weather service returned an unreadable response") from e

        if not isinstance(data, dict):
            logger.error(f"Response from {self.name} API is not a JSON object")
            raise MalformedPayload("Weather service returned an unreadable response")

        return data

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()


def error_message(response: httpx.Response) -> str:
    """Return the provider's error message from a response, or the generic one."""
    try:
        body = response.json()
    except ValueError:
        return GENERIC_FETCH_ERROR

    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()

    return GENERIC_FETCH_ERROR


def section(data: Any, key: str) -> Dict[str, Any]:
    """Return ``data[key]`` if it is an object, else an empty dict."""
    if isinstance(data, dict):
        value = data.get(key)
        if isinstance(value, dict):
            return value
    return {}


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number


def require_number(data: Dict[str, Any], key: str, path: str) -> float:
    """Read a required numeric field.

    Raises:
        MissingRequiredField: If the field is absent or null
        MalformedPayload: If the field is not a finite number
    """
    value = data.get(key)
    if value is None:
        raise MissingRequiredField(path)

    number = _as_float(value)
    if number is None:
        raise MalformedPayload(f"Weather data field '{path}' is not a valid number")
    return number


def optional_number(data: Dict[str, Any], key: str, path: str) -> Optional[float]:
    """Read an optional numeric field; unusable values count as absent."""
    value = data.get(key)
    if value is None:
        return None

    number = _as_float(value)
    if number is None:
        logger.warning(f"Ignoring invalid value for optional field '{path}': {value!r}")
    return number


def clamp_percentage(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return min(100.0, max(0.0, value))


def parse_timestamp(timestamp_str: Any) -> Optional[datetime]:
    """Parse an ISO timestamp ending in 'Z'; returns None if unreadable."""
    if not isinstance(timestamp_str, str):
        return None
    try:
        return datetime.fromisoformat(timestamp_str.replace('Z', '+00:00'))
    except ValueError:
        logger.warning(f"Ignoring invalid timestamp: {timestamp_str!r}")
        return None
