"""Event filtering - Pure functions.

This module implements the filter engine behind the list view: a
FilterSpec describes magnitude, time window and location constraints,
and apply_filters() selects matching earthquakes.
All functions are pure with no side effects.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from src.core.earthquake import Earthquake


DEFAULT_MIN_MAGNITUDE = 0.0
DEFAULT_MAX_MAGNITUDE = 10.0


class TimeFilter(Enum):
    """Time window selector.

    Each member's value is its look-back interval in seconds
    (None for no restriction).
    """
    ALL = None
    PAST_HOUR = 3600
    PAST_DAY = 86400
    PAST_WEEK = 604800
    PAST_MONTH = 2592000

    @property
    def seconds(self) -> int | None:
        """Look-back interval in seconds, None for ALL."""
        return self.value

    @property
    def label(self) -> str:
        """Human-readable label."""
        return _TIME_FILTER_LABELS[self]

    @classmethod
    def from_slug(cls, slug: str) -> "TimeFilter":
        """Look up a time filter by short name ("all", "hour", "day", ...).

        Raises:
            ValueError: If the slug is unknown
        """
        try:
            return _TIME_FILTER_SLUGS[slug.strip().lower()]
        except KeyError:
            raise ValueError(
                f"Unknown time filter '{slug}'. Choose from: {sorted(_TIME_FILTER_SLUGS)}"
            ) from None


_TIME_FILTER_LABELS = {
    TimeFilter.ALL: "All Time",
    TimeFilter.PAST_HOUR: "Past Hour",
    TimeFilter.PAST_DAY: "Past Day",
    TimeFilter.PAST_WEEK: "Past Week",
    TimeFilter.PAST_MONTH: "Past Month",
}

_TIME_FILTER_SLUGS = {
    "all": TimeFilter.ALL,
    "hour": TimeFilter.PAST_HOUR,
    "day": TimeFilter.PAST_DAY,
    "week": TimeFilter.PAST_WEEK,
    "month": TimeFilter.PAST_MONTH,
}


@dataclass(frozen=True)
class FilterSpec:
    """Immutable filter specification for the list view.

    Attributes:
        is_active: Whether filtering is switched on at all
        min_magnitude: Lower magnitude bound (inclusive)
        max_magnitude: Upper magnitude bound (inclusive)
        time_filter: Time window relative to "now"
        location_search: Case-insensitive substring of the place label
    """
    is_active: bool = False
    min_magnitude: float = DEFAULT_MIN_MAGNITUDE
    max_magnitude: float = DEFAULT_MAX_MAGNITUDE
    time_filter: TimeFilter = TimeFilter.ALL
    location_search: str = ""


def has_active_filters(spec: FilterSpec) -> bool:
    """Check whether a filter spec actually restricts anything.

    Pure function. True only when filtering is switched on AND at least
    one field differs from its default.
    """
    if not spec.is_active:
        return False

    return (
        spec.min_magnitude != DEFAULT_MIN_MAGNITUDE
        or spec.max_magnitude != DEFAULT_MAX_MAGNITUDE
        or spec.time_filter is not TimeFilter.ALL
        or spec.location_search != ""
    )


def matches_magnitude(earthquake: Earthquake, spec: FilterSpec) -> bool:
    """Inclusive magnitude range test."""
    return spec.min_magnitude <= earthquake.magnitude <= spec.max_magnitude


def matches_time(earthquake: Earthquake, spec: FilterSpec, now: datetime) -> bool:
    """Time window test, boundary inclusive."""
    seconds = spec.time_filter.seconds
    if seconds is None:
        return True
    return earthquake.time >= now - timedelta(seconds=seconds)


def matches_location(earthquake: Earthquake, spec: FilterSpec) -> bool:
    """Case-insensitive substring test on the place label."""
    if not spec.location_search:
        return True
    return spec.location_search.casefold() in earthquake.place.casefold()


def apply_filters(
    spec: FilterSpec,
    earthquakes: list[Earthquake],
    now: datetime,
) -> list[Earthquake]:
    """Select the earthquakes matching a filter spec.

    Pure function. An inactive spec returns the input unchanged. Result
    ordering is not guaranteed; callers sort for display.

    Args:
        spec: Filter specification
        earthquakes: Earthquakes to filter
        now: Reference time for the time window (timezone-aware)

    Returns:
        Matching earthquakes
    """
    if not spec.is_active:
        return list(earthquakes)

    return [
        e for e in earthquakes
        if matches_magnitude(e, spec)
        and matches_time(e, spec, now)
        and matches_location(e, spec)
    ]
