"""Error types for location resolution and weather fetching."""

from typing import Optional

GENERIC_FETCH_ERROR = "Failed to fetch weather data"


class WeatherDisplayError(Exception):
    """Base error carrying a message fit for display."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResolutionError(WeatherDisplayError):
    """Raised when user input cannot be turned into a location."""
    pass


class EmptyQuery(ResolutionError):
    """Raised when the input is empty after trimming."""

    def __init__(self, message: str = "Please enter a city name"):
        super().__init__(message)


class UnknownLocation(ResolutionError):
    """Raised when a place name is not in the static location table."""

    def __init__(self, name: str):
        super().__init__(f"Unknown location: '{name}'")
        self.name = name


class FetchError(WeatherDisplayError):
    """Raised when a weather provider request or normalization fails."""
    pass


class NetworkFailure(FetchError):
    """Raised when the provider cannot be reached."""
    pass


class BadStatus(FetchError):
    """Raised when the provider answers with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedPayload(FetchError):
    """Raised when the response body is not the expected JSON structure."""
    pass


class MissingRequiredField(FetchError):
    """Raised when a required measurement is absent from the response."""

    def __init__(self, field: str):
        super().__init__(f"Weather data is missing required field '{field}'")
        self.field = field
