"""Earthquake list view state - Pure functions.

ListViewState is owned by a single store; this module reduces actions
into new states and exposes the read-only projections the presentation
layer renders (sorted/filtered earthquakes, filter badge, "last updated").
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from src.core.actions import (
    ClearFilters,
    DataSource,
    SetLocationSearch,
    SetMagnitudeRange,
    SetTimeFilter,
    ToggleFilter,
)
from src.core.detail import DetailState
from src.core.earthquake import Earthquake, sort_by_time
from src.core.filters import FilterSpec, apply_filters, has_active_filters
from src.core.formatter import format_last_updated
from src.core.view_state import reduce_shared


@dataclass(frozen=True)
class ListViewState:
    """State of the earthquake list.

    Attributes:
        earthquakes: Last loaded earthquakes, newest first
        is_loading: A fetch is in flight
        error_message: User-visible error from the last failed fetch
        last_updated: When the last successful fetch completed
        is_online: Result of the last reachability probe
        is_using_cached_data: Offline and showing previously saved data
        data_source: Where the current earthquakes came from
        filters: Active filter specification
        detail: Presented detail view, if any
    """
    earthquakes: tuple[Earthquake, ...] = ()
    is_loading: bool = False
    error_message: str | None = None
    last_updated: datetime | None = None
    is_online: bool = True
    is_using_cached_data: bool = False
    data_source: DataSource | None = None
    filters: FilterSpec = field(default_factory=FilterSpec)
    detail: DetailState | None = None


def _reduce_filters(spec: FilterSpec, action: Any) -> FilterSpec | None:
    """Apply a filter action, None if the action is not a filter action."""
    if isinstance(action, ToggleFilter):
        return replace(spec, is_active=not spec.is_active)

    if isinstance(action, SetMagnitudeRange):
        low = min(action.min_magnitude, action.max_magnitude)
        high = max(action.min_magnitude, action.max_magnitude)
        return replace(spec, min_magnitude=low, max_magnitude=high)

    if isinstance(action, SetTimeFilter):
        return replace(spec, time_filter=action.time_filter)

    if isinstance(action, SetLocationSearch):
        return replace(spec, location_search=action.text)

    if isinstance(action, ClearFilters):
        return FilterSpec()

    return None


def reduce_list(state: ListViewState, action: Any) -> tuple[ListViewState, list[Any]]:
    """Reduce an action into a new list state.

    Pure function.

    Args:
        state: Current state
        action: Action from src.core.actions

    Returns:
        (new state, effects for the runtime to perform)
    """
    filters = _reduce_filters(state.filters, action)
    if filters is not None:
        return replace(state, filters=filters), []

    result = reduce_shared(state, action)
    if result is not None:
        return result

    return state, []


# Read-only projections

def sorted_earthquakes(state: ListViewState) -> list[Earthquake]:
    """Earthquakes newest first."""
    return sort_by_time(list(state.earthquakes))


def filtered_earthquakes(
    state: ListViewState,
    now: datetime | None = None,
) -> list[Earthquake]:
    """Earthquakes matching the current filters, newest first."""
    now = now or datetime.now(timezone.utc)
    return sort_by_time(apply_filters(state.filters, list(state.earthquakes), now))


def state_has_active_filters(state: ListViewState) -> bool:
    """Whether the filter badge should be shown."""
    return has_active_filters(state.filters)


def last_updated_text(state: ListViewState, now: datetime | None = None) -> str:
    """Relative "last updated" label, "Never" before the first load."""
    now = now or datetime.now(timezone.utc)
    return format_last_updated(state.last_updated, now)
