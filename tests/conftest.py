"""Shared payloads and helpers for weather display tests."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest


def json_handler(payload: Any, status_code: int = 200, seen: list | None = None) -> Callable:
    """Build a MockTransport handler answering every request with `payload`."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return handler


def text_handler(body: str, status_code: int = 200) -> Callable:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=body)

    return handler


@pytest.fixture
def openweather_payload() -> dict[str, Any]:
    """Current weather for London in OpenWeatherMap's shape."""
    return {
        "coord": {"lon": -0.1257, "lat": 51.5085},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
        "main": {"temp": 22, "feels_like": 24, "humidity": 65, "pressure": 1013},
        "visibility": 10000,
        "wind": {"speed": 3.5, "deg": 250},
        "clouds": {"all": 0},
        "dt": 1760870400,
        "name": "London",
        "cod": 200,
    }


@pytest.fixture
def metno_payload() -> dict[str, Any]:
    """Compact Locationforecast response for Oslo."""
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [10.7522, 59.9139, 12]},
        "properties": {
            "meta": {"updated_at": "2026-10-19T10:12:44Z"},
            "timeseries": [
                {
                    "time": "2026-10-19T11:00:00Z",
                    "data": {
                        "instant": {
                            "details": {
                                "air_pressure_at_sea_level": 1008.4,
                                "air_temperature": 7.9,
                                "cloud_area_fraction": 87.5,
                                "relative_humidity": 81.2,
                                "wind_from_direction": 203.4,
                                "wind_speed": 4.1,
                            }
                        },
                        "next_1_hours": {
                            "summary": {"symbol_code": "lightrain_day"},
                            "details": {"precipitation_amount": 0.4},
                        },
                        "next_6_hours": {
                            "summary": {"symbol_code": "rain_day"},
                            "details": {"precipitation_amount": 3.1},
                        },
                    },
                },
                {
                    "time": "2026-10-19T12:00:00Z",
                    "data": {"instant": {"details": {"air_temperature": 8.4}}},
                },
            ],
        },
    }
