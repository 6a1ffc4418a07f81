"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Earthquake decoding and serialization
- Event filtering
- Map viewport calculation
- Cache freshness rules
- List/map view-state reducers

All functions here are deterministic and have no I/O.
"""

from src.core.earthquake import Earthquake, parse_earthquakes, sort_by_time
from src.core.errors import CachePersistError, DecodeError, QuakeWatchError, TransportError
from src.core.filters import FilterSpec, TimeFilter, apply_filters, has_active_filters
from src.core.geo import MapRegion, calculate_map_region
from src.core.cache_policy import is_cache_fresh
from src.core.list_state import ListViewState, reduce_list
from src.core.map_state import MapViewState, reduce_map

__all__ = [
    # Earthquake
    "Earthquake",
    "parse_earthquakes",
    "sort_by_time",
    # Errors
    "QuakeWatchError",
    "TransportError",
    "DecodeError",
    "CachePersistError",
    # Filters
    "FilterSpec",
    "TimeFilter",
    "apply_filters",
    "has_active_filters",
    # Geo
    "MapRegion",
    "calculate_map_region",
    # Cache
    "is_cache_fresh",
    # View state
    "ListViewState",
    "reduce_list",
    "MapViewState",
    "reduce_map",
]
