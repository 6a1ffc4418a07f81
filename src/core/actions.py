"""View-state actions and effects - Pure data structures.

Actions describe something that happened (user input or an effect
completing); reducers turn (state, action) into a new state plus a list
of effects. Effects are descriptions of I/O for the runtime to perform.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from src.core.earthquake import Earthquake
from src.core.filters import TimeFilter


class DataSource(Enum):
    """Where a set of earthquakes came from."""
    FRESH_CACHE = "fresh_cache"
    NETWORK = "network"
    STALE_CACHE = "stale_cache"


# Lifecycle / loading

@dataclass(frozen=True)
class OnAppear:
    """The view became visible."""


@dataclass(frozen=True)
class Refresh:
    """The user (or a timer) asked for a reload."""


@dataclass(frozen=True)
class OnlineStatusResponse:
    is_online: bool


@dataclass(frozen=True)
class EarthquakesLoaded:
    """A fetch completed successfully.

    Attributes:
        earthquakes: Fetched earthquakes in any order
        source: Where they came from
        received_at: When the result arrived (becomes last_updated)
    """
    earthquakes: tuple[Earthquake, ...]
    source: DataSource
    received_at: datetime


@dataclass(frozen=True)
class EarthquakesFailed:
    message: str


# Selection / detail

@dataclass(frozen=True)
class EarthquakeSelected:
    earthquake: Earthquake


@dataclass(frozen=True)
class DetailDismissed:
    """Close the presented detail view."""


@dataclass(frozen=True)
class OpenLink:
    """Open the event's USGS page."""


@dataclass(frozen=True)
class UrlOpeningComplete:
    pass


@dataclass(frozen=True)
class DetailAction:
    """Wraps an action addressed to the presented detail view."""
    action: OpenLink | UrlOpeningComplete


# Filters (list view only)

@dataclass(frozen=True)
class ToggleFilter:
    pass


@dataclass(frozen=True)
class SetMagnitudeRange:
    min_magnitude: float
    max_magnitude: float


@dataclass(frozen=True)
class SetTimeFilter:
    time_filter: TimeFilter


@dataclass(frozen=True)
class SetLocationSearch:
    text: str


@dataclass(frozen=True)
class ClearFilters:
    pass


# Effects

@dataclass(frozen=True)
class FetchEarthquakes:
    """Check online status, then fetch through the coordinator."""


@dataclass(frozen=True)
class OpenUrl:
    url: str
