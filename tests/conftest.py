"""Shared fixtures."""

from datetime import datetime, timezone

import pytest

from src.core.earthquake import Earthquake


NOW = datetime(2025, 7, 3, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time."""
    return NOW


@pytest.fixture
def make_earthquake():
    """Factory for earthquakes with sensible defaults."""
    def _make(**overrides) -> Earthquake:
        fields = {
            "id": "ci12345",
            "magnitude": 4.5,
            "place": "10 km N of Ridgecrest, CA",
            "time": NOW,
            "latitude": 35.8721,
            "longitude": -117.6748,
            "depth_km": 8.21,
            "url": "https://earthquake.usgs.gov/earthquakes/eventpage/ci12345",
        }
        fields.update(overrides)
        return Earthquake(**fields)

    return _make
