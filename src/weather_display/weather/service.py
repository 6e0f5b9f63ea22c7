"""Weather service driving fetches and owning the display state."""

import logging
from typing import Callable, List, Optional

from weather_display.config import (
    DEFAULT_LOCATION, PROVIDER_METNO, PROVIDER_OPENWEATHERMAP, WEATHER_PROVIDER
)
from weather_display.weather.client import WeatherProvider
from weather_display.weather.conditions import ConditionCode
from weather_display.weather.errors import (
    GENERIC_FETCH_ERROR, ResolutionError, WeatherDisplayError
)
from weather_display.weather.locations import LocationResolver
from weather_display.weather.metno import MetNoProvider
from weather_display.weather.models import (
    Failure, FetchState, Idle, Loading, Location, Success, WeatherRecord
)
from weather_display.weather.openweathermap import OpenWeatherMapProvider

logger = logging.getLogger(__name__)

PROVIDERS = {
    PROVIDER_OPENWEATHERMAP: OpenWeatherMapProvider,
    PROVIDER_METNO: MetNoProvider,
}

# Placeholder shown when no API key is configured
DEMO_RECORD = WeatherRecord(
    location_label="London",
    temperature_c=22,
    feels_like_c=24,
    humidity_pct=65,
    pressure_hpa=1013,
    wind_speed_ms=3.5,
    condition_code=ConditionCode.CLEAR,
    visibility_m=10000,
    summary="clear sky",
    is_day=True
)

StateListener = Callable[[FetchState], None]


def create_provider(name: str = WEATHER_PROVIDER, **kwargs) -> WeatherProvider:
    """Create the configured provider adapter.

    Args:
        name: Provider name ("openweathermap" or "metno")
        **kwargs: Passed to the provider constructor

    Raises:
        ValueError: If the provider name is unknown
    """
    try:
        provider_class = PROVIDERS[name]
    except KeyError:
        raise ValueError(f"Unknown weather provider '{name}', expected one of {sorted(PROVIDERS)}")

    logger.info(f"Using weather provider: {name}")
    return provider_class(**kwargs)


class WeatherService:
    """Runs weather requests and holds the single fetch state.

    Only the latest submission may settle the state: a response arriving
    after a newer submission was made is discarded.
    """

    def __init__(
        self,
        provider: Optional[WeatherProvider] = None,
        resolver: Optional[LocationResolver] = None,
        default_location: str = DEFAULT_LOCATION
    ):
        """Initialize the weather service.

        Args:
            provider: Provider adapter (creates the configured one if None)
            resolver: Location resolver (the provider's default if None)
            default_location: Place fetched by start()
        """
        self.provider = provider or create_provider()
        self.resolver = resolver or self.provider.create_resolver()
        self.default_location = default_location
        self._state: FetchState = Idle()
        self._request_id = 0
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> FetchState:
        """Current fetch state."""
        return self._state

    @property
    def demo_mode(self) -> bool:
        """True when the provider needs an API key and none is configured."""
        return self.provider.requires_api_key and not self.provider.has_credentials

    def add_listener(self, listener: StateListener) -> None:
        """Register a callback invoked with every new state."""
        self._listeners.append(listener)

    def _set_state(self, state: FetchState) -> None:
        self._state = state
        logger.debug(f"Fetch state -> {state.status}")
        for listener in self._listeners:
            listener(state)

    async def submit(self, location: Location) -> FetchState:
        """Fetch weather for a location.

        The state becomes Loading at once and settles to Success or Failure
        when the provider answers, unless a newer submission was made.

        Args:
            location: Resolved location

        Returns:
            The state current after this request settled
        """
        self._request_id += 1
        request_id = self._request_id
        self._set_state(Loading(location=location))

        try:
            record = await self.provider.fetch_weather(location)
            outcome: FetchState = Success(record=record)
        except WeatherDisplayError as e:
            logger.error(f"Error fetching weather for {location.display_name}: {e.message}")
            outcome = Failure(message=e.message)
        except Exception as e:
            logger.exception(f"Unexpected error fetching weather for {location.display_name}: {e}")
            outcome = Failure(message=GENERIC_FETCH_ERROR)

        if request_id != self._request_id:
            logger.info(f"Discarding stale response for request {request_id} (latest is {self._request_id})")
            return self._state

        self._set_state(outcome)
        return outcome

    async def search(self, text: str) -> FetchState:
        """Resolve user input and fetch weather for it.

        Args:
            text: City name or known place name

        Returns:
            The state current after this request settled
        """
        try:
            location = self.resolver.resolve(text)
        except ResolutionError as e:
            logger.info(f"Could not resolve location {text!r}: {e.message}")
            # Supersede any request still in flight
            self._request_id += 1
            self._set_state(Failure(message=e.message))
            return self._state

        return await self.submit(location)

    async def start(self) -> FetchState:
        """Load the default location, or the demo record without an API key."""
        if self.demo_mode:
            logger.info("No API key configured, showing demo data")
            self._request_id += 1
            self._set_state(Success(record=DEMO_RECORD))
            return self._state

        logger.info(f"Loading default location: {self.default_location}")
        return await self.search(self.default_location)

    async def aclose(self):
        """Close the provider client."""
        if self.provider:
            try:
                await self.provider.aclose()
            except Exception as e:
                logger.error(f"Error closing weather provider: {e}")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
