"""Display formatting - Pure functions.

This module formats earthquake data and view-state timestamps into
strings for the presentation layer.
All functions are pure with no side effects.
"""

from datetime import datetime

from src.core.earthquake import Earthquake, get_magnitude_category


# (unit name, seconds per unit), largest first
_RELATIVE_UNITS = (
    ("year", 365 * 86400),
    ("month", 30 * 86400),
    ("week", 7 * 86400),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)

NEVER_UPDATED = "Never"


def format_relative_time(then: datetime, now: datetime) -> str:
    """Format a timestamp relative to now ("5 minutes ago", "in 2 hours").

    Pure function. Differences under a second read "now"; a single day
    reads "yesterday" / "tomorrow".

    Args:
        then: Timestamp to describe
        now: Reference time

    Returns:
        Relative time string
    """
    delta = (now - then).total_seconds()
    magnitude = abs(delta)

    if magnitude < 1:
        return "now"

    for unit, unit_seconds in _RELATIVE_UNITS:
        if magnitude >= unit_seconds:
            count = int(magnitude // unit_seconds)
            break

    if unit == "day" and count == 1:
        return "yesterday" if delta > 0 else "tomorrow"

    label = unit if count == 1 else f"{unit}s"
    if delta > 0:
        return f"{count} {label} ago"
    return f"in {count} {label}"


def format_last_updated(last_updated: datetime | None, now: datetime) -> str:
    """Format the "last updated" label of a view.

    Pure function.
    """
    if last_updated is None:
        return NEVER_UPDATED
    return format_relative_time(last_updated, now)


def get_magnitude_color(magnitude: float) -> str:
    """Get a display color name for a magnitude.

    Pure function.
    """
    if magnitude < 0:
        return "gray"
    elif magnitude < 2.5:
        return "green"
    elif magnitude < 4.5:
        return "yellow"
    elif magnitude < 6.0:
        return "orange"
    return "red"


def format_earthquake_summary(earthquake: Earthquake) -> str:
    """Format a one-line summary of an earthquake.

    Pure function.

    Args:
        earthquake: Earthquake to summarize

    Returns:
        One-line summary string
    """
    time_str = earthquake.time.strftime("%Y-%m-%d %H:%M:%S UTC")
    category = get_magnitude_category(earthquake.magnitude).value
    return (
        f"M{earthquake.magnitude:.1f} ({category}) - {earthquake.place} "
        f"at {time_str} (depth: {earthquake.depth_km:.1f}km)"
    )
