"""Earthquake detail view state - Pure functions.

The detail view is presented by a parent (list or map) state. It only
tracks whether the external link is being opened; dismissal is handled
by the parent, which owns the optional DetailState.
"""

from dataclasses import dataclass, replace
from typing import Any

from src.core.actions import OpenLink, OpenUrl, UrlOpeningComplete
from src.core.earthquake import Earthquake


@dataclass(frozen=True)
class DetailState:
    """State of a presented detail view.

    Attributes:
        earthquake: The event being shown
        is_opening_url: True while the USGS page is being opened
    """
    earthquake: Earthquake
    is_opening_url: bool = False


def reduce_detail(state: DetailState, action: Any) -> tuple[DetailState, list[Any]]:
    """Apply a detail action.

    Pure function.

    Returns:
        (new state, effects)
    """
    if isinstance(action, OpenLink):
        if state.is_opening_url:
            return state, []
        return replace(state, is_opening_url=True), [OpenUrl(url=state.earthquake.url)]

    if isinstance(action, UrlOpeningComplete):
        return replace(state, is_opening_url=False), []

    return state, []
