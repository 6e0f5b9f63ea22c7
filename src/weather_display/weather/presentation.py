"""Display strings and icons for weather records."""

from typing import List, Optional

from weather_display.weather.conditions import ConditionCode
from weather_display.weather.models import DisplayDetail, DisplayInfo, WeatherRecord, WeatherView

DEFAULT_ICON = "🌡️"
DEFAULT_DESCRIPTION = "Unknown conditions"

CONDITION_ICONS = {
    ConditionCode.CLEAR: "☀️",
    ConditionCode.FAIR: "🌤️",
    ConditionCode.PARTLY_CLOUDY: "⛅",
    ConditionCode.CLOUDY: "☁️",
    ConditionCode.FOG: "🌫️",
    ConditionCode.LIGHT_RAIN: "🌦️",
    ConditionCode.RAIN: "🌧️",
    ConditionCode.HEAVY_RAIN: "🌧️",
    ConditionCode.SLEET: "🌨️",
    ConditionCode.SNOW: "❄️",
    ConditionCode.THUNDERSTORM: "⛈️",
}

NIGHT_ICONS = {
    ConditionCode.CLEAR: "🌙",
    ConditionCode.FAIR: "🌙",
}

CONDITION_DESCRIPTIONS = {
    ConditionCode.CLEAR: "Clear sky",
    ConditionCode.FAIR: "Fair",
    ConditionCode.PARTLY_CLOUDY: "Partly cloudy",
    ConditionCode.CLOUDY: "Cloudy",
    ConditionCode.FOG: "Fog",
    ConditionCode.LIGHT_RAIN: "Light rain",
    ConditionCode.RAIN: "Rain",
    ConditionCode.HEAVY_RAIN: "Heavy rain",
    ConditionCode.SLEET: "Sleet",
    ConditionCode.SNOW: "Snow",
    ConditionCode.THUNDERSTORM: "Thunderstorm",
}

COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


def _condition(code: str) -> Optional[ConditionCode]:
    try:
        return ConditionCode(code)
    except ValueError:
        return None


def describe_condition(code: str, is_day: Optional[bool] = None) -> DisplayInfo:
    """Look up icon and label for a condition code.

    Any string is accepted; codes without an entry get the default pair.
    """
    condition = _condition(code)
    icon = CONDITION_ICONS.get(condition, DEFAULT_ICON)
    if is_day is False:
        icon = NIGHT_ICONS.get(condition, icon)

    return DisplayInfo(
        icon=icon,
        description=CONDITION_DESCRIPTIONS.get(condition, DEFAULT_DESCRIPTION)
    )


def describe(record: WeatherRecord) -> DisplayInfo:
    """Icon and label for a weather record, with the provider's icon image if it has one."""
    info = describe_condition(record.condition_code.value, record.is_day)
    if record.icon_url:
        info = info.model_copy(update={"icon_url": record.icon_url})
    return info


def format_temperature(value: float) -> str:
    return f"{round(value)}°C"


def _format_number(value: float) -> str:
    return f"{value:g}"


def compass_point(degrees: float) -> str:
    """Convert a wind direction in degrees to an eight-point compass label."""
    return COMPASS_POINTS[int((degrees % 360) / 45 + 0.5) % 8]


def format_details(record: WeatherRecord) -> List[DisplayDetail]:
    """Build the labelled measurement rows shown under the temperature.

    Rows for absent optional measurements are left out.
    """
    details = []

    if record.feels_like_c is not None:
        details.append(DisplayDetail(label="Feels like", value=format_temperature(record.feels_like_c)))

    details.append(DisplayDetail(label="Humidity", value=f"{_format_number(record.humidity_pct)}%"))
    details.append(DisplayDetail(label="Pressure", value=f"{_format_number(record.pressure_hpa)} hPa"))
    details.append(DisplayDetail(label="Wind Speed", value=f"{_format_number(record.wind_speed_ms)} m/s"))

    if record.wind_direction_deg is not None:
        details.append(DisplayDetail(
            label="Wind Direction",
            value=f"{compass_point(record.wind_direction_deg)} ({round(record.wind_direction_deg)}°)"
        ))

    if record.cloud_cover_pct is not None:
        details.append(DisplayDetail(label="Cloud Cover", value=f"{_format_number(record.cloud_cover_pct)}%"))

    details.append(DisplayDetail(label="Precipitation", value=f"{_format_number(record.precipitation_mm)} mm"))

    if record.visibility_m is not None:
        details.append(DisplayDetail(label="Visibility", value=f"{_format_number(record.visibility_m / 1000)} km"))

    return details


def build_view(record: WeatherRecord) -> WeatherView:
    """Bundle a record with everything the page needs to render it."""
    return WeatherView(
        record=record,
        display=describe(record),
        temperature=format_temperature(record.temperature_c),
        details=format_details(record)
    )
