"""Transitions shared by the list and map views - Pure functions.

Both view states carry the same loading/online/error/detail fields, so
the refresh cycle and detail presentation are reduced here. View-specific
reducers handle their own actions first and delegate the rest.
"""

from dataclasses import replace
from typing import Any, TypeVar

from src.core.actions import (
    DetailAction,
    DetailDismissed,
    EarthquakeSelected,
    EarthquakesFailed,
    EarthquakesLoaded,
    FetchEarthquakes,
    OnAppear,
    OnlineStatusResponse,
    Refresh,
)
from src.core.detail import DetailState, reduce_detail
from src.core.earthquake import sort_by_time


S = TypeVar("S")

ERROR_PREFIX = "Failed to load earthquakes"


def format_error_message(message: str) -> str:
    """User-visible text for a failed load."""
    return f"{ERROR_PREFIX}: {message}"


def reduce_shared(state: S, action: Any) -> tuple[S, list[Any]] | None:
    """Reduce an action common to both views.

    Pure function.

    Returns:
        (new state, effects), or None if the action is not a shared one
    """
    if isinstance(action, OnAppear):
        if state.earthquakes:
            return state, []
        return reduce_shared(state, Refresh())

    if isinstance(action, Refresh):
        # Single flight: a refresh already in progress serves this request too
        if state.is_loading:
            return state, []
        return replace(state, is_loading=True, error_message=None), [FetchEarthquakes()]

    if isinstance(action, OnlineStatusResponse):
        return replace(state, is_online=action.is_online), []

    if isinstance(action, EarthquakesLoaded):
        earthquakes = tuple(sort_by_time(list(action.earthquakes)))
        return replace(
            state,
            is_loading=False,
            earthquakes=earthquakes,
            last_updated=action.received_at,
            error_message=None,
            is_using_cached_data=(not state.is_online) and bool(earthquakes),
            data_source=action.source,
        ), []

    if isinstance(action, EarthquakesFailed):
        return replace(
            state,
            is_loading=False,
            error_message=format_error_message(action.message),
        ), []

    if isinstance(action, EarthquakeSelected):
        return replace(state, detail=DetailState(earthquake=action.earthquake)), []

    if isinstance(action, DetailDismissed):
        return replace(state, detail=None), []

    if isinstance(action, DetailAction):
        if state.detail is None:
            return state, []
        detail, effects = reduce_detail(state.detail, action.action)
        return replace(state, detail=detail), effects

    return None
