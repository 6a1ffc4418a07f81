"""Earthquake map view state - Pure functions.

Same refresh cycle as the list view, plus the map viewport, which is
recomputed from event coordinates after every non-empty load.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from src.core.actions import DataSource, EarthquakeSelected, EarthquakesLoaded
from src.core.detail import DetailState
from src.core.earthquake import Earthquake
from src.core.geo import (
    DEFAULT_MAP_REGION,
    MapRegion,
    calculate_region_for_earthquakes,
    filter_valid_earthquakes,
)
from src.core.view_state import reduce_shared


@dataclass(frozen=True)
class MapViewState:
    """State of the earthquake map.

    Attributes:
        earthquakes: Last loaded earthquakes, newest first
        is_loading: A fetch is in flight
        error_message: User-visible error from the last failed fetch
        last_updated: When the last successful fetch completed
        is_online: Result of the last reachability probe
        is_using_cached_data: Offline and showing previously saved data
        data_source: Where the current earthquakes came from
        region: Current viewport
        selected_earthquake: Highlighted annotation, if any
        detail: Presented detail view, if any
    """
    earthquakes: tuple[Earthquake, ...] = ()
    is_loading: bool = False
    error_message: str | None = None
    last_updated: datetime | None = None
    is_online: bool = True
    is_using_cached_data: bool = False
    data_source: DataSource | None = None
    region: MapRegion = DEFAULT_MAP_REGION
    selected_earthquake: Earthquake | None = None
    detail: DetailState | None = None


def reduce_map(state: MapViewState, action: Any) -> tuple[MapViewState, list[Any]]:
    """Reduce an action into a new map state.

    Pure function.

    Args:
        state: Current state
        action: Action from src.core.actions

    Returns:
        (new state, effects for the runtime to perform)
    """
    result = reduce_shared(state, action)
    if result is None:
        return state, []

    new_state, effects = result

    if isinstance(action, EarthquakesLoaded) and new_state.earthquakes:
        new_state = replace(
            new_state,
            region=calculate_region_for_earthquakes(list(new_state.earthquakes)),
        )
    elif isinstance(action, EarthquakeSelected):
        new_state = replace(new_state, selected_earthquake=action.earthquake)

    return new_state, effects


def visible_earthquakes(state: MapViewState) -> list[Earthquake]:
    """Earthquakes that can be placed on the map (valid coordinates only)."""
    return filter_valid_earthquakes(list(state.earthquakes))
