"""Configuration settings for the weather display service."""

import os
from typing import Final, Optional
from dotenv import load_dotenv

load_dotenv()

# Provider selection: "openweathermap" or "metno"
PROVIDER_OPENWEATHERMAP: Final[str] = "openweathermap"
PROVIDER_METNO: Final[str] = "metno"
WEATHER_PROVIDER: str = os.getenv("WEATHER_PROVIDER", PROVIDER_OPENWEATHERMAP).strip().lower()

# OpenWeatherMap API configuration
OPENWEATHER_BASE_URL: str = os.getenv(
    "OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5/weather"
)
API_KEY_PLACEHOLDER: Final[str] = "YOUR_API_KEY_HERE"
OPENWEATHER_API_KEY: Optional[str] = os.getenv("OPENWEATHER_API_KEY") or None
OPENWEATHER_ICON_URL: str = os.getenv(
    "OPENWEATHER_ICON_URL", "https://openweathermap.org/img/wn/{icon}@2x.png"
)

# MET Norway (yr.no) API configuration
YR_API_BASE_URL: str = os.getenv(
    "YR_API_BASE_URL", "https://api.met.no/weatherapi/locationforecast/2.0/compact"
)
USER_AGENT: str = os.getenv("USER_AGENT", "WeatherDisplay/0.1 (user@example.com)")

# Default location, fetched on startup
DEFAULT_CITY: Final[str] = "London"
DEFAULT_PLACE: Final[str] = "Oslo, Norway"
DEFAULT_LOCATION: str = os.getenv(
    "DEFAULT_LOCATION",
    DEFAULT_PLACE if WEATHER_PROVIDER == PROVIDER_METNO else DEFAULT_CITY
)

# Outbound HTTP (unset means no timeout)
_timeout = os.getenv("HTTP_TIMEOUT_SECONDS")
HTTP_TIMEOUT_SECONDS: Optional[float] = float(_timeout) if _timeout else None

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
