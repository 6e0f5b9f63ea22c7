"""Data models for the weather display service."""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from weather_display.weather.conditions import ConditionCode


class Coordinates(BaseModel):
    """Geographic coordinates."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lon: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")


class Location(BaseModel):
    """Location of a single weather request.

    Exactly one of ``query`` and ``coordinates`` is set, depending on what
    the active provider expects.
    """
    model_config = ConfigDict(frozen=True)

    query: Optional[str] = Field(None, description="Free-text city name")
    coordinates: Optional[Coordinates] = Field(None, description="Coordinates of a known place")
    label: Optional[str] = Field(None, description="Display name of the place")

    @model_validator(mode="after")
    def check_single_representation(self) -> "Location":
        if (self.query is None) == (self.coordinates is None):
            raise ValueError("Location needs exactly one of query or coordinates")
        return self

    @property
    def display_name(self) -> str:
        """Best human-readable name for this location."""
        if self.label:
            return self.label
        if self.query is not None:
            return self.query
        return f"{self.coordinates.lat}, {self.coordinates.lon}"


class WeatherRecord(BaseModel):
    """Canonical, provider-independent weather snapshot."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    location_label: str = Field(..., description="Place name shown to the user")
    temperature_c: float = Field(..., description="Air temperature in Celsius")
    feels_like_c: Optional[float] = Field(None, description="Apparent temperature in Celsius")
    humidity_pct: float = Field(..., ge=0, le=100, description="Relative humidity in percent")
    pressure_hpa: float = Field(..., description="Air pressure in hPa")
    wind_speed_ms: float = Field(..., ge=0, description="Wind speed in m/s")
    wind_direction_deg: Optional[float] = Field(None, ge=0, le=360, description="Wind origin in degrees")
    cloud_cover_pct: Optional[float] = Field(None, ge=0, le=100, description="Cloud cover in percent")
    precipitation_mm: float = Field(0.0, ge=0, description="Precipitation over the next period in mm")
    condition_code: ConditionCode = Field(ConditionCode.UNKNOWN, description="Provider-neutral condition")
    visibility_m: Optional[float] = Field(None, ge=0, description="Visibility in metres")
    observed_at: Optional[datetime] = Field(None, description="Observation or model time (UTC)")
    summary: Optional[str] = Field(None, description="Provider's own condition description")
    is_day: Optional[bool] = Field(None, description="Day/night flag from the provider icon")
    icon_url: Optional[str] = Field(None, description="Provider's own condition icon image")


class Idle(BaseModel):
    """No request has been made yet."""
    model_config = ConfigDict(frozen=True)

    status: Literal["idle"] = "idle"


class Loading(BaseModel):
    """A request is in flight."""
    model_config = ConfigDict(frozen=True)

    status: Literal["loading"] = "loading"
    location: Optional[Location] = None


class Success(BaseModel):
    """The latest request produced a weather record."""
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    record: WeatherRecord


class Failure(BaseModel):
    """The latest request failed."""
    model_config = ConfigDict(frozen=True)

    status: Literal["failure"] = "failure"
    message: str


FetchState = Annotated[
    Union[Idle, Loading, Success, Failure],
    Field(discriminator="status")
]


class DisplayInfo(BaseModel):
    """Icon and label for a weather condition."""
    icon: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    icon_url: Optional[str] = Field(None, description="Provider icon image, shown instead of the glyph")


class DisplayDetail(BaseModel):
    """One labelled measurement row."""
    label: str
    value: str


class WeatherView(BaseModel):
    """Weather record plus its display strings."""
    record: WeatherRecord
    display: DisplayInfo
    temperature: str = Field(..., description="Rounded temperature, e.g. '22°C'")
    details: List[DisplayDetail] = Field(default_factory=list)


class NamedLocation(BaseModel):
    """Entry of the static location list."""
    name: str
    lat: float
    lon: float


class SearchRequest(BaseModel):
    """Body of a location search."""
    query: str = Field(..., description="City name or known place name")


class WeatherStateResponse(BaseModel):
    """Current fetch state as served to the page."""
    state: FetchState
    view: Optional[WeatherView] = None
    demo_mode: bool = False
    provider: str
