"""Geographic calculations - Pure functions.

This module validates event coordinates and derives the map viewport
(center plus angular span) that covers a set of earthquakes.
All functions are pure with no side effects.
"""

from dataclasses import dataclass

from src.core.earthquake import Earthquake


# Padding applied to the raw coordinate extent
SPAN_PADDING = 1.3

# Smallest extent considered, so a single point still gets a visible span
MIN_SPAN_DEGREES = 0.1

MAX_LATITUDE_SPAN = 180.0
MAX_LONGITUDE_SPAN = 360.0


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounding box.

    Attributes:
        min_latitude: Southern boundary
        max_latitude: Northern boundary
        min_longitude: Western boundary
        max_longitude: Eastern boundary
    """
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    def contains(self, latitude: float, longitude: float) -> bool:
        """Check if a point is within this bounding box."""
        return (
            self.min_latitude <= latitude <= self.max_latitude
            and self.min_longitude <= longitude <= self.max_longitude
        )


@dataclass(frozen=True)
class MapRegion:
    """Map viewport: a center point and an angular span.

    Attributes:
        center_latitude: Latitude of the viewport center
        center_longitude: Longitude of the viewport center
        latitude_delta: North-south span in degrees
        longitude_delta: East-west span in degrees
    """
    center_latitude: float
    center_longitude: float
    latitude_delta: float
    longitude_delta: float

    @property
    def bounds(self) -> BoundingBox:
        """Rectangle covered by this region (not clipped to valid ranges)."""
        half_lat = self.latitude_delta / 2
        half_lon = self.longitude_delta / 2
        return BoundingBox(
            min_latitude=self.center_latitude - half_lat,
            max_latitude=self.center_latitude + half_lat,
            min_longitude=self.center_longitude - half_lon,
            max_longitude=self.center_longitude + half_lon,
        )


# San Francisco, wide enough to show the US west coast
DEFAULT_MAP_REGION = MapRegion(
    center_latitude=37.7749,
    center_longitude=-122.4194,
    latitude_delta=40.0,
    longitude_delta=40.0,
)


def is_valid_coordinate(latitude: float, longitude: float) -> bool:
    """Check that a point lies within [-90, 90] x [-180, 180].

    Pure function. NaN coordinates are invalid.
    """
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


def filter_valid_earthquakes(earthquakes: list[Earthquake]) -> list[Earthquake]:
    """Drop earthquakes whose coordinates cannot be placed on a map.

    Pure function.
    """
    return [e for e in earthquakes if is_valid_coordinate(e.latitude, e.longitude)]


def _padded_span(low: float, high: float, cap: float) -> float:
    """Span for one axis: padded extent, clamped to [MIN_SPAN_DEGREES, cap]."""
    span = max(high - low, MIN_SPAN_DEGREES) * SPAN_PADDING
    return min(max(span, MIN_SPAN_DEGREES), cap)


def calculate_map_region(coordinates: list[tuple[float, float]]) -> MapRegion:
    """Compute the viewport covering a set of (latitude, longitude) points.

    Pure function. Invalid points are ignored; with no valid points the
    default region is returned.

    Args:
        coordinates: (latitude, longitude) pairs

    Returns:
        MapRegion centered on the midpoint of the extent, padded by
        SPAN_PADDING and clamped to 180/360 degrees
    """
    valid = [(lat, lon) for lat, lon in coordinates if is_valid_coordinate(lat, lon)]

    if not valid:
        return DEFAULT_MAP_REGION

    latitudes = [lat for lat, _ in valid]
    longitudes = [lon for _, lon in valid]

    min_latitude, max_latitude = min(latitudes), max(latitudes)
    min_longitude, max_longitude = min(longitudes), max(longitudes)

    return MapRegion(
        center_latitude=(min_latitude + max_latitude) / 2,
        center_longitude=(min_longitude + max_longitude) / 2,
        latitude_delta=_padded_span(min_latitude, max_latitude, MAX_LATITUDE_SPAN),
        longitude_delta=_padded_span(min_longitude, max_longitude, MAX_LONGITUDE_SPAN),
    )


def calculate_region_for_earthquakes(earthquakes: list[Earthquake]) -> MapRegion:
    """Compute the viewport covering a list of earthquakes.

    Pure function.
    """
    return calculate_map_region([e.coordinates for e in earthquakes])
