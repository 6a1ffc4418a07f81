"""Earthquake data models and parsing - Pure functions.

This module handles decoding USGS GeoJSON features into typed Earthquake
objects and the (de)serialization used by the cache snapshot.
All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from src.core.errors import DecodeError


# Label used when the feed omits "place"
UNKNOWN_LOCATION = "Unknown Location"


@dataclass(frozen=True)
class Earthquake:
    """Immutable earthquake data model.

    Attributes:
        id: Unique USGS event ID, stable across refreshes
        magnitude: Earthquake magnitude (0.0 when the feed has none)
        place: Human-readable location description
        time: Event timestamp (UTC)
        latitude: Epicenter latitude
        longitude: Epicenter longitude
        depth_km: Depth in kilometers
        url: USGS event detail URL
    """
    id: str
    magnitude: float
    place: str
    time: datetime
    latitude: float
    longitude: float
    depth_km: float
    url: str

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple."""
        return (self.latitude, self.longitude)


class MagnitudeCategory(Enum):
    """Severity buckets shown next to each event."""
    MINOR = "Minor"
    LIGHT = "Light"
    MODERATE = "Moderate"
    STRONG = "Strong"
    MAJOR = "Major"
    GREAT = "Great"
    UNKNOWN = "Unknown"


def _coordinate(coords: list[Any], index: int) -> float:
    """Return coords[index] as float, 0.0 if the element is missing."""
    if len(coords) <= index or coords[index] is None:
        return 0.0
    return float(coords[index])


def parse_earthquake(feature: dict[str, Any]) -> Earthquake:
    """Parse a single GeoJSON feature into an Earthquake.

    Pure function. Optional fields fall back to defaults; structurally
    required fields (id, time, url, coordinates) must be present.

    Args:
        feature: GeoJSON feature dict from the USGS feed

    Returns:
        Earthquake object

    Raises:
        DecodeError: If the feature is malformed
    """
    try:
        props = feature["properties"]
        coords = feature["geometry"]["coordinates"]
        if not isinstance(coords, list):
            raise DecodeError(f"coordinates must be a list, got {type(coords).__name__}")

        event_id = feature["id"]
        time_ms = props["time"]
        url = props["url"]
        if not isinstance(event_id, str) or not isinstance(url, str):
            raise DecodeError("id and url must be strings")
        if isinstance(time_ms, bool) or not isinstance(time_ms, (int, float)):
            raise DecodeError(f"time must be epoch milliseconds, got {time_ms!r}")

        # USGS uses milliseconds since epoch
        event_time = datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)

        magnitude = props.get("mag")
        place = props.get("place")
        if place is not None and not isinstance(place, str):
            raise DecodeError(f"place must be a string, got {type(place).__name__}")

        return Earthquake(
            id=event_id,
            magnitude=float(magnitude) if magnitude is not None else 0.0,
            place=place if place is not None else UNKNOWN_LOCATION,
            time=event_time,
            longitude=_coordinate(coords, 0),
            latitude=_coordinate(coords, 1),
            depth_km=_coordinate(coords, 2),
            url=url,
        )
    except DecodeError:
        raise
    except (KeyError, TypeError, ValueError, OverflowError, OSError) as e:
        raise DecodeError(f"Malformed feature: {e!r}") from e


def parse_earthquakes(geojson: dict[str, Any]) -> list[Earthquake]:
    """Parse a USGS GeoJSON FeatureCollection into Earthquakes.

    Pure function. A single malformed feature fails the whole payload,
    so a partially broken response is never cached.

    Args:
        geojson: Full GeoJSON FeatureCollection from the USGS feed

    Returns:
        List of Earthquake objects in feed order

    Raises:
        DecodeError: If the document or any feature is malformed
    """
    if not isinstance(geojson, dict):
        raise DecodeError(f"Expected a JSON object, got {type(geojson).__name__}")

    features = geojson.get("features")
    if not isinstance(features, list):
        raise DecodeError("GeoJSON document has no 'features' list")

    return [parse_earthquake(feature) for feature in features]


def sort_by_time(earthquakes: list[Earthquake]) -> list[Earthquake]:
    """Sort earthquakes newest first (canonical display order).

    Pure function.
    """
    return sorted(earthquakes, key=lambda e: e.time, reverse=True)


def earthquake_to_dict(earthquake: Earthquake) -> dict[str, Any]:
    """Convert an Earthquake to a JSON-serializable dict."""
    return {
        "id": earthquake.id,
        "magnitude": earthquake.magnitude,
        "place": earthquake.place,
        "time": earthquake.time.isoformat(),
        "latitude": earthquake.latitude,
        "longitude": earthquake.longitude,
        "depth_km": earthquake.depth_km,
        "url": earthquake.url,
    }


def earthquake_from_dict(data: dict[str, Any]) -> Earthquake:
    """Rebuild an Earthquake from earthquake_to_dict() output.

    Raises:
        DecodeError: If the record is incomplete or has bad values
    """
    try:
        event_time = datetime.fromisoformat(data["time"])
        if event_time.tzinfo is None:
            event_time = event_time.replace(tzinfo=timezone.utc)

        return Earthquake(
            id=str(data["id"]),
            magnitude=float(data["magnitude"]),
            place=str(data["place"]),
            time=event_time,
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            depth_km=float(data["depth_km"]),
            url=str(data["url"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Malformed earthquake record: {e!r}") from e


def get_magnitude_category(magnitude: float) -> MagnitudeCategory:
    """Get the severity category for a magnitude.

    Pure function.
    """
    if math.isnan(magnitude) or magnitude < 0:
        return MagnitudeCategory.UNKNOWN
    if magnitude < 2.5:
        return MagnitudeCategory.MINOR
    elif magnitude < 4.5:
        return MagnitudeCategory.LIGHT
    elif magnitude < 6.0:
        return MagnitudeCategory.MODERATE
    elif magnitude < 7.0:
        return MagnitudeCategory.STRONG
    elif magnitude < 8.0:
        return MagnitudeCategory.MAJOR
    return MagnitudeCategory.GREAT
