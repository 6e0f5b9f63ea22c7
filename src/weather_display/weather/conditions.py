"""Provider-neutral weather condition codes.

Each provider reports sky and precipitation state in its own vocabulary:
OpenWeatherMap uses numeric condition ids plus icon codes such as ``"10d"``,
MET Norway uses symbol codes such as ``"lightrainshowers_night"``. Both are
reduced here to the small :class:`ConditionCode` key set that the
presentation layer understands.
"""

from enum import Enum
from typing import Optional, Tuple


class ConditionCode(str, Enum):
    """Provider-neutral condition key."""
    CLEAR = "clear"
    FAIR = "fair"
    PARTLY_CLOUDY = "partly_cloudy"
    CLOUDY = "cloudy"
    FOG = "fog"
    LIGHT_RAIN = "light_rain"
    RAIN = "rain"
    HEAVY_RAIN = "heavy_rain"
    SLEET = "sleet"
    SNOW = "snow"
    THUNDERSTORM = "thunderstorm"
    UNKNOWN = "unknown"


# OpenWeatherMap icon prefix -> condition
OPENWEATHER_ICONS = {
    "01": ConditionCode.CLEAR,
    "02": ConditionCode.FAIR,
    "03": ConditionCode.PARTLY_CLOUDY,
    "04": ConditionCode.CLOUDY,
    "09": ConditionCode.RAIN,
    "10": ConditionCode.RAIN,
    "11": ConditionCode.THUNDERSTORM,
    "13": ConditionCode.SNOW,
    "50": ConditionCode.FOG,
}

# OpenWeatherMap "main" group -> condition
OPENWEATHER_GROUPS = {
    "clear": ConditionCode.CLEAR,
    "clouds": ConditionCode.CLOUDY,
    "drizzle": ConditionCode.LIGHT_RAIN,
    "rain": ConditionCode.RAIN,
    "thunderstorm": ConditionCode.THUNDERSTORM,
    "snow": ConditionCode.SNOW,
    "mist": ConditionCode.FOG,
    "fog": ConditionCode.FOG,
    "haze": ConditionCode.FOG,
    "smoke": ConditionCode.FOG,
    "dust": ConditionCode.FOG,
    "sand": ConditionCode.FOG,
}

# MET Norway symbol codes without the _day/_night/_polartwilight suffix
METNO_SYMBOLS = {
    "clearsky": ConditionCode.CLEAR,
    "fair": ConditionCode.FAIR,
    "partlycloudy": ConditionCode.PARTLY_CLOUDY,
    "cloudy": ConditionCode.CLOUDY,
    "fog": ConditionCode.FOG,
    "lightrain": ConditionCode.LIGHT_RAIN,
    "lightrainshowers": ConditionCode.LIGHT_RAIN,
    "rain": ConditionCode.RAIN,
    "rainshowers": ConditionCode.RAIN,
    "heavyrain": ConditionCode.HEAVY_RAIN,
    "heavyrainshowers": ConditionCode.HEAVY_RAIN,
    "lightsleet": ConditionCode.SLEET,
    "lightsleetshowers": ConditionCode.SLEET,
    "sleet": ConditionCode.SLEET,
    "sleetshowers": ConditionCode.SLEET,
    "heavysleet": ConditionCode.SLEET,
    "heavysleetshowers": ConditionCode.SLEET,
    "lightsnow": ConditionCode.SNOW,
    "lightsnowshowers": ConditionCode.SNOW,
    "snow": ConditionCode.SNOW,
    "snowshowers": ConditionCode.SNOW,
    "heavysnow": ConditionCode.SNOW,
    "heavysnowshowers": ConditionCode.SNOW,
}

METNO_SUFFIXES = {
    "_day": True,
    "_night": False,
    "_polartwilight": True,
}


def from_openweather_id(condition_id: int) -> ConditionCode:
    """Map an OpenWeatherMap condition id (e.g. 500) to a condition code."""
    group = condition_id // 100
    if group == 2:
        return ConditionCode.THUNDERSTORM
    if group == 3:
        return ConditionCode.LIGHT_RAIN
    if group == 5:
        if condition_id == 500 or condition_id == 520:
            return ConditionCode.LIGHT_RAIN
        if condition_id == 511:
            return ConditionCode.SLEET
        if 502 <= condition_id <= 504 or condition_id == 522:
            return ConditionCode.HEAVY_RAIN
        return ConditionCode.RAIN
    if group == 6:
        if 611 <= condition_id <= 616:
            return ConditionCode.SLEET
        return ConditionCode.SNOW
    if group == 7:
        return ConditionCode.FOG
    if condition_id == 800:
        return ConditionCode.CLEAR
    if condition_id == 801:
        return ConditionCode.FAIR
    if condition_id == 802:
        return ConditionCode.PARTLY_CLOUDY
    if condition_id in (803, 804):
        return ConditionCode.CLOUDY
    return ConditionCode.UNKNOWN


def from_openweather(
    condition_id: Optional[int] = None,
    icon: Optional[str] = None,
    group: Optional[str] = None
) -> ConditionCode:
    """Map an OpenWeatherMap ``weather[0]`` entry to a condition code.

    The numeric id is the most precise, so it wins; the icon prefix and the
    ``main`` group are fallbacks for trimmed-down payloads.
    """
    if condition_id is not None:
        code = from_openweather_id(condition_id)
        if code is not ConditionCode.UNKNOWN:
            return code
    if icon:
        code = OPENWEATHER_ICONS.get(icon[:2])
        if code is not None:
            return code
    if group:
        return OPENWEATHER_GROUPS.get(group.strip().lower(), ConditionCode.UNKNOWN)
    return ConditionCode.UNKNOWN


def openweather_is_day(icon: Optional[str]) -> Optional[bool]:
    """Return the day/night flag encoded in an icon code like ``"01n"``."""
    if not icon:
        return None
    if icon.endswith("d"):
        return True
    if icon.endswith("n"):
        return False
    return None


def split_metno_symbol(symbol_code: str) -> Tuple[str, Optional[bool]]:
    """Split ``"partlycloudy_night"`` into ``("partlycloudy", False)``."""
    for suffix, is_day in METNO_SUFFIXES.items():
        if symbol_code.endswith(suffix):
            return symbol_code[:-len(suffix)], is_day
    return symbol_code, None


def from_metno(symbol_code: Optional[str]) -> ConditionCode:
    """Map a MET Norway symbol code to a condition code."""
    if not symbol_code:
        return ConditionCode.UNKNOWN

    base, _ = split_metno_symbol(symbol_code.strip().lower())
    if "thunder" in base:
        return ConditionCode.THUNDERSTORM

    return METNO_SYMBOLS.get(base, ConditionCode.UNKNOWN)
