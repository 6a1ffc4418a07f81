"""Cache freshness rules - Pure functions.

The actual reading and writing of the snapshot is handled by the
imperative shell (cache store). This module only decides whether a
snapshot saved at a given time may still be served without a network
round trip.
"""

from datetime import datetime


# A snapshot younger than this is served without contacting the feed
DEFAULT_MAX_AGE_SECONDS = 300


def cache_age_seconds(saved_at: datetime, now: datetime) -> float:
    """Age of a snapshot in seconds (negative if saved_at is in the future).

    Pure function.
    """
    return (now - saved_at).total_seconds()


def is_cache_fresh(
    saved_at: datetime | None,
    now: datetime,
    max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS,
) -> bool:
    """Decide whether a snapshot is fresh enough to serve.

    Pure function.

    Args:
        saved_at: When the snapshot was written, None if there is none
        now: Current time
        max_age_seconds: Maximum age (exclusive)

    Returns:
        True iff a timestamp exists and its age is below max_age_seconds
    """
    if saved_at is None:
        return False

    return cache_age_seconds(saved_at, now) < max_age_seconds
