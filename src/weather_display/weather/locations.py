"""Location resolution for weather requests."""

import logging
from types import MappingProxyType
from typing import List, Mapping, Tuple

from weather_display.weather.errors import EmptyQuery, UnknownLocation
from weather_display.weather.models import Coordinates, Location, NamedLocation

logger = logging.getLogger(__name__)

# Known places for providers that need coordinates
KNOWN_LOCATIONS: Mapping[str, Tuple[float, float]] = MappingProxyType({
    "Oslo, Norway": (59.9139, 10.7522),
    "Bergen, Norway": (60.3913, 5.3221),
    "Tromsø, Norway": (69.6492, 18.9553),
    "Stockholm, Sweden": (59.3293, 18.0686),
    "Copenhagen, Denmark": (55.6761, 12.5683),
    "Helsinki, Finland": (60.1699, 24.9384),
    "London, United Kingdom": (51.5074, -0.1278),
    "Paris, France": (48.8566, 2.3522),
    "Berlin, Germany": (52.5200, 13.4050),
    "Belgrade, Serbia": (44.8125, 20.4612),
    "New York, USA": (40.7128, -74.0060),
    "Tokyo, Japan": (35.6762, 139.6503),
    "Sydney, Australia": (-33.8688, 151.2093),
})


def known_locations() -> List[NamedLocation]:
    """Return the static location list in display order."""
    return [
        NamedLocation(name=name, lat=lat, lon=lon)
        for name, (lat, lon) in KNOWN_LOCATIONS.items()
    ]


class LocationResolver:
    """Turns user input into a :class:`Location`. Pure, no network access."""

    def resolve(self, text: str) -> Location:
        """
        Turn raw user input into a location the provider can query.

        Args:
            text: Search text as typed, surrounding whitespace allowed

        Returns:
            Location: Either a free-text query or known coordinates

        Raises:
            ResolutionError: If the input cannot be turned into a location
        """
        raise NotImplementedError

    @staticmethod
    def _clean(text: str) -> str:
        cleaned = (text or "").strip()
        if not cleaned:
            raise EmptyQuery()
        return cleaned


class QueryLocationResolver(LocationResolver):
    """Resolver for providers that accept a free-text city name."""

    def resolve(self, text: str) -> Location:
        """Wrap the trimmed input as a query location.

        Raises:
            EmptyQuery: If the input is blank
        """
        return Location(query=self._clean(text))


class StaticLocationResolver(LocationResolver):
    """Resolver for providers that need coordinates.

    Looks names up in a fixed table; matching ignores case and surrounding
    whitespace.
    """

    def __init__(self, table: Mapping[str, Tuple[float, float]] = KNOWN_LOCATIONS):
        self._table = table
        self._index = {name.casefold(): name for name in table}

    def resolve(self, text: str) -> Location:
        """Look up a known place.

        Raises:
            EmptyQuery: If the input is blank
            UnknownLocation: If the place is not in the table
        """
        name = self._clean(text)
        key = self._index.get(name.casefold())
        if key is None:
            logger.info(f"No static entry for location '{name}'")
            raise UnknownLocation(name)

        lat, lon = self._table[key]
        return Location(coordinates=Coordinates(lat=lat, lon=lon), label=key)
