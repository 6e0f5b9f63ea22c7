"""Tests for the fetch orchestration and its state handling."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from conftest import json_handler
from weather_display.weather.client import WeatherProvider
from weather_display.weather.errors import NetworkFailure
from weather_display.weather.metno import MetNoProvider
from weather_display.weather.models import (
    Failure, Idle, Loading, Location, Success, WeatherRecord
)
from weather_display.weather.openweathermap import OpenWeatherMapProvider
from weather_display.weather.service import (
    DEMO_RECORD, WeatherService, create_provider
)


def _record(label: str, temperature: float = 10.0) -> WeatherRecord:
    return WeatherRecord(
        location_label=label,
        temperature_c=temperature,
        humidity_pct=50,
        pressure_hpa=1000,
        wind_speed_ms=2,
    )


class ControlledProvider(WeatherProvider):
    """Provider whose responses are released by the test, one per location."""

    name = "controlled"

    def __init__(self) -> None:
        super().__init__("https://weather.invalid")
        self.pending: dict[str, asyncio.Future] = {}

    async def fetch_weather(self, location: Location) -> WeatherRecord:
        future = asyncio.get_running_loop().create_future()
        self.pending[location.display_name] = future
        return await future


class RecordingListener:
    def __init__(self) -> None:
        self.states: list[Any] = []

    def __call__(self, state: Any) -> None:
        self.states.append(state)


@pytest.mark.asyncio
async def test_initial_state_is_idle() -> None:
    service = WeatherService(provider=ControlledProvider())

    assert isinstance(service.state, Idle)
    await service.aclose()


@pytest.mark.asyncio
async def test_submit_moves_through_loading_to_success() -> None:
    provider = ControlledProvider()
    service = WeatherService(provider=provider)
    listener = RecordingListener()
    service.add_listener(listener)

    task = asyncio.create_task(service.search("Paris"))
    await asyncio.sleep(0)

    assert isinstance(service.state, Loading)
    assert service.state.location.query == "Paris"

    provider.pending["Paris"].set_result(_record("Paris"))
    state = await task

    assert isinstance(state, Success)
    assert state.record.location_label == "Paris"
    assert [type(s) for s in listener.states] == [Loading, Success]
    await service.aclose()


@pytest.mark.asyncio
async def test_fetch_error_becomes_failure_message() -> None:
    provider = ControlledProvider()
    service = WeatherService(provider=provider)

    task = asyncio.create_task(service.search("Paris"))
    await asyncio.sleep(0)
    provider.pending["Paris"].set_exception(NetworkFailure("Failed to fetch weather data"))
    state = await task

    assert state == Failure(message="Failed to fetch weather data")
    assert service.state == state
    await service.aclose()


@pytest.mark.asyncio
async def test_new_submit_clears_previous_error() -> None:
    provider = ControlledProvider()
    service = WeatherService(provider=provider)

    await service.search("   ")
    assert isinstance(service.state, Failure)

    task = asyncio.create_task(service.search("Rome"))
    await asyncio.sleep(0)
    assert isinstance(service.state, Loading)

    provider.pending["Rome"].set_result(_record("Rome"))
    await task
    assert isinstance(service.state, Success)
    await service.aclose()


@pytest.mark.asyncio
async def test_blank_search_fails_without_request() -> None:
    provider = ControlledProvider()
    service = WeatherService(provider=provider)

    state = await service.search("")

    assert state == Failure(message="Please enter a city name")
    assert provider.pending == {}
    await service.aclose()


@pytest.mark.asyncio
async def test_stale_response_is_discarded() -> None:
    provider = ControlledProvider()
    service = WeatherService(provider=provider)
    listener = RecordingListener()
    service.add_listener(listener)

    first = asyncio.create_task(service.search("Paris"))
    await asyncio.sleep(0)
    second = asyncio.create_task(service.search("Berlin"))
    await asyncio.sleep(0)

    provider.pending["Berlin"].set_result(_record("Berlin"))
    await second
    provider.pending["Paris"].set_result(_record("Paris"))
    settled = await first

    assert isinstance(service.state, Success)
    assert service.state.record.location_label == "Berlin"
    assert settled == service.state
    assert [type(s) for s in listener.states] == [Loading, Loading, Success]
    await service.aclose()


@pytest.mark.asyncio
async def test_latest_of_many_rapid_submits_wins() -> None:
    provider = ControlledProvider()
    service = WeatherService(provider=provider)
    cities = ["Paris", "Berlin", "Rome", "Madrid", "Vienna"]

    tasks = []
    for city in cities:
        tasks.append(asyncio.create_task(service.search(city)))
        await asyncio.sleep(0)

    # Release responses newest first so older ones arrive last
    for city in reversed(cities):
        provider.pending[city].set_result(_record(city))
    await asyncio.gather(*tasks)

    assert isinstance(service.state, Success)
    assert service.state.record.location_label == "Vienna"
    await service.aclose()


@pytest.mark.asyncio
async def test_stale_failure_does_not_override_success() -> None:
    provider = ControlledProvider()
    service = WeatherService(provider=provider)

    first = asyncio.create_task(service.search("Paris"))
    await asyncio.sleep(0)
    second = asyncio.create_task(service.search("Berlin"))
    await asyncio.sleep(0)

    provider.pending["Berlin"].set_result(_record("Berlin"))
    provider.pending["Paris"].set_exception(NetworkFailure("Failed to fetch weather data"))
    await asyncio.gather(first, second)

    assert isinstance(service.state, Success)
    await service.aclose()


@pytest.mark.asyncio
async def test_resolution_error_supersedes_in_flight_request() -> None:
    provider = ControlledProvider()
    service = WeatherService(provider=provider)

    pending = asyncio.create_task(service.search("Paris"))
    await asyncio.sleep(0)
    await service.search("  ")

    provider.pending["Paris"].set_result(_record("Paris"))
    await pending

    assert service.state == Failure(message="Please enter a city name")
    await service.aclose()


@pytest.mark.asyncio
async def test_listener_sees_one_variant_per_notification() -> None:
    provider = ControlledProvider()
    service = WeatherService(provider=provider)
    listener = RecordingListener()
    service.add_listener(listener)

    task = asyncio.create_task(service.search("Paris"))
    await asyncio.sleep(0)
    provider.pending["Paris"].set_exception(NetworkFailure("offline"))
    await task

    assert [s.status for s in listener.states] == ["loading", "failure"]
    await service.aclose()


@pytest.mark.asyncio
async def test_start_in_demo_mode_makes_no_request() -> None:
    seen: list[httpx.Request] = []
    provider = OpenWeatherMapProvider(
        api_key=None,
        base_url="https://owm.test/weather",
        transport=httpx.MockTransport(json_handler({}, seen=seen)),
    )
    service = WeatherService(provider=provider, default_location="London")

    state = await service.start()

    assert service.demo_mode is True
    assert state == Success(record=DEMO_RECORD)
    assert DEMO_RECORD.location_label == "London"
    assert DEMO_RECORD.temperature_c == 22
    assert seen == []
    await service.aclose()


@pytest.mark.asyncio
async def test_start_fetches_default_location(openweather_payload: dict) -> None:
    seen: list[httpx.Request] = []
    provider = OpenWeatherMapProvider(
        api_key="test-key",
        base_url="https://owm.test/weather",
        transport=httpx.MockTransport(json_handler(openweather_payload, seen=seen)),
    )
    service = WeatherService(provider=provider, default_location="London")

    state = await service.start()

    assert service.demo_mode is False
    assert isinstance(state, Success)
    assert state.record.location_label == "London"
    assert seen[0].url.params["q"] == "London"
    await service.aclose()


@pytest.mark.asyncio
async def test_start_with_coordinate_provider(metno_payload: dict) -> None:
    provider = MetNoProvider(
        base_url="https://met.test/compact",
        transport=httpx.MockTransport(json_handler(metno_payload)),
    )
    service = WeatherService(provider=provider, default_location="Oslo, Norway")

    state = await service.start()

    assert isinstance(state, Success)
    assert state.record.location_label == "Oslo, Norway"
    await service.aclose()


@pytest.mark.asyncio
async def test_start_with_unknown_default_fails_gracefully(metno_payload: dict) -> None:
    provider = MetNoProvider(
        base_url="https://met.test/compact",
        transport=httpx.MockTransport(json_handler(metno_payload)),
    )
    service = WeatherService(provider=provider, default_location="Nowhereland")

    state = await service.start()

    assert state == Failure(message="Unknown location: 'Nowhereland'")
    await service.aclose()


def test_create_provider_by_name() -> None:
    assert isinstance(create_provider("metno"), MetNoProvider)
    assert isinstance(create_provider("openweathermap", api_key="k"), OpenWeatherMapProvider)

    with pytest.raises(ValueError):
        create_provider("darksky")


@pytest.mark.asyncio
async def test_unreadable_number_ends_in_failure(openweather_payload: dict) -> None:
    openweather_payload["main"]["pressure"] = 10**400
    provider = OpenWeatherMapProvider(
        api_key="test-key",
        base_url="https://owm.test/weather",
        transport=httpx.MockTransport(json_handler(openweather_payload)),
    )
    service = WeatherService(provider=provider)

    state = await service.search("London")

    assert state == Failure(message="Weather data field 'main.pressure' is not a valid number")
    assert service.state == state
    await service.aclose()


@pytest.mark.asyncio
async def test_unexpected_provider_error_ends_in_generic_failure() -> None:
    provider = ControlledProvider()
    service = WeatherService(provider=provider)
    listener = RecordingListener()
    service.add_listener(listener)

    task = asyncio.create_task(service.search("Paris"))
    await asyncio.sleep(0)
    provider.pending["Paris"].set_exception(RuntimeError("boom"))
    state = await task

    assert state == Failure(message="Failed to fetch weather data")
    assert [s.status for s in listener.states] == ["loading", "failure"]
    await service.aclose()
