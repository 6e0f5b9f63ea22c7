"""API endpoints for the weather display."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from weather_display.config import DEFAULT_LOCATION
from weather_display.weather.locations import known_locations
from weather_display.weather.models import (
    NamedLocation, SearchRequest, Success, WeatherStateResponse
)
from weather_display.weather.presentation import build_view
from weather_display.weather.service import WeatherService

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/weather", tags=["weather"])


def get_weather_service(request: Request) -> WeatherService:
    """Dependency returning the process-wide weather service."""
    return request.app.state.weather_service


def build_state_response(service: WeatherService) -> WeatherStateResponse:
    """Snapshot the service state, with display strings for a loaded record."""
    state = service.state
    view = build_view(state.record) if isinstance(state, Success) else None
    return WeatherStateResponse(
        state=state,
        view=view,
        demo_mode=service.demo_mode,
        provider=service.provider.name
    )


@router.get("/", response_model=WeatherStateResponse)
async def get_weather(
    service: WeatherService = Depends(get_weather_service)
) -> WeatherStateResponse:
    """Get the current weather state.

    Returns:
        Current fetch state, plus display strings when weather is loaded
    """
    return build_state_response(service)


@router.post("/search", response_model=WeatherStateResponse)
async def search_weather(
    body: SearchRequest,
    service: WeatherService = Depends(get_weather_service)
) -> WeatherStateResponse:
    """Fetch weather for a city name or a known place.

    Errors are reported in the returned state, not as HTTP errors.

    Args:
        body: Search request with the location query

    Returns:
        Fetch state after the request settled
    """
    state = await service.search(body.query)
    logger.info(f"Search for {body.query!r} settled as {state.status}")
    return build_state_response(service)


@router.get("/locations", response_model=List[NamedLocation])
async def get_locations() -> List[NamedLocation]:
    """List the known places offered for selection."""
    return known_locations()


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status response
    """
    return {"status": "healthy", "service": "weather-display"}


@router.get("/info")
async def get_service_info(
    service: WeatherService = Depends(get_weather_service)
) -> dict:
    """Get service information.

    Returns:
        Service information including provider and default location
    """
    return {
        "service": "Weather Display Service",
        "version": "0.1.0",
        "provider": service.provider.name,
        "location_kind": service.provider.location_kind,
        "demo_mode": service.demo_mode,
        "default_location": service.default_location or DEFAULT_LOCATION
    }
