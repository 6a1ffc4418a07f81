"""Web API Handler - Read-only projections of the view state.

This module provides HTTP endpoints for presentation layers. Each
request drives a fresh list or map store through one load (served from
the snapshot cache whenever it is fresh) and returns its derived views.
Part of the imperative shell - handles HTTP I/O.
"""

import asyncio
import json
import logging
import math
from datetime import datetime, timezone
from typing import Any

from flask import Request, Response

from src.core.actions import OnAppear, SetLocationSearch, SetMagnitudeRange, SetTimeFilter, ToggleFilter
from src.core.config import Config
from src.core.earthquake import Earthquake, earthquake_to_dict, get_magnitude_category
from src.core.filters import DEFAULT_MAX_MAGNITUDE, DEFAULT_MIN_MAGNITUDE, TimeFilter
from src.core.formatter import get_magnitude_color
from src.core.geo import MapRegion
from src.core.list_state import (
    ListViewState,
    filtered_earthquakes,
    last_updated_text,
    state_has_active_filters,
)
from src.core.map_state import MapViewState, visible_earthquakes
from src.coordinator import FetchCoordinator
from src.shell.config_loader import load_config
from src.store import EffectRunner, create_list_store, create_map_store

logger = logging.getLogger(__name__)

# Hard cap on the number of earthquakes in one response
MAX_LIMIT = 1000

_config: Config | None = None
_coordinator: FetchCoordinator | None = None


class BadRequest(ValueError):
    """Invalid query parameters."""


def get_config() -> Config:
    """Configuration of this process (loaded once)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_coordinator() -> FetchCoordinator:
    """Coordinator shared by all requests of this process (lazy)."""
    global _coordinator
    if _coordinator is None:
        _coordinator = FetchCoordinator.from_config(get_config())
    return _coordinator


def _cors_headers() -> dict[str, str]:
    """CORS headers for the read-only endpoints."""
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Max-Age": "3600",
    }


def _json_response(data: dict[str, Any], status: int = 200) -> Response:
    """Create a JSON response with CORS headers."""
    response = Response(
        json.dumps(data, default=str),
        status=status,
        mimetype="application/json",
    )
    for key, value in _cors_headers().items():
        response.headers[key] = value
    return response


def _preflight() -> Response:
    response = Response("", status=204)
    for key, value in _cors_headers().items():
        response.headers[key] = value
    return response


def _earthquake_payload(eq: Earthquake) -> dict[str, Any]:
    """Earthquake dict plus display hints."""
    payload = earthquake_to_dict(eq)
    payload["category"] = get_magnitude_category(eq.magnitude).value
    payload["color"] = get_magnitude_color(eq.magnitude)
    return payload


def _region_payload(region: MapRegion) -> dict[str, Any]:
    bounds = region.bounds
    return {
        "center": {"lat": region.center_latitude, "lng": region.center_longitude},
        "span": {"lat": region.latitude_delta, "lng": region.longitude_delta},
        "bounds": {
            "min_latitude": bounds.min_latitude,
            "max_latitude": bounds.max_latitude,
            "min_longitude": bounds.min_longitude,
            "max_longitude": bounds.max_longitude,
        },
    }


def _float_arg(request: Request, name: str, default: float) -> float:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise BadRequest(f"'{name}' must be a number, got '{raw}'") from None
    if not math.isfinite(value):
        raise BadRequest(f"'{name}' must be finite, got '{raw}'")
    return value


def _limit_arg(request: Request, default: int) -> int:
    raw = request.args.get("limit")
    if raw is None or raw == "":
        return min(default, MAX_LIMIT)
    try:
        limit = int(raw)
    except ValueError:
        raise BadRequest(f"'limit' must be an integer, got '{raw}'") from None
    if limit <= 0:
        raise BadRequest("'limit' must be positive")
    return min(limit, MAX_LIMIT)


def parse_filter_actions(request: Request) -> list[Any]:
    """Translate query parameters into list filter actions.

    Filtering is switched on by filter=on, or implicitly when any filter
    parameter is present; filter=off disables it.

    Raises:
        BadRequest: If a parameter has an invalid value
    """
    min_magnitude = _float_arg(request, "min_magnitude", DEFAULT_MIN_MAGNITUDE)
    max_magnitude = _float_arg(request, "max_magnitude", DEFAULT_MAX_MAGNITUDE)

    try:
        time_filter = TimeFilter.from_slug(request.args.get("time", "all"))
    except ValueError as e:
        raise BadRequest(str(e)) from None

    location = request.args.get("location", "").strip()

    switch = request.args.get("filter", "").strip().lower()
    if switch not in ("", "on", "off"):
        raise BadRequest(f"'filter' must be 'on' or 'off', got '{switch}'")

    filter_params = ("min_magnitude", "max_magnitude", "time", "location")
    implicit = any(request.args.get(name) for name in filter_params)
    active = switch == "on" or (switch == "" and implicit)

    actions: list[Any] = [
        SetMagnitudeRange(min_magnitude=min_magnitude, max_magnitude=max_magnitude),
        SetTimeFilter(time_filter=time_filter),
        SetLocationSearch(text=location),
    ]
    if active:
        actions.append(ToggleFilter())
    return actions


async def _load_list_state(
    coordinator: FetchCoordinator,
    filter_actions: list[Any],
) -> ListViewState:
    store = create_list_store(EffectRunner(coordinator))
    for action in filter_actions:
        await store.send(action)
    await store.send(OnAppear())
    await store.settle()
    return store.state


async def _load_map_state(coordinator: FetchCoordinator) -> MapViewState:
    store = create_map_store(EffectRunner(coordinator))
    await store.send(OnAppear())
    await store.settle()
    return store.state


def _status_fields(state: ListViewState | MapViewState) -> dict[str, Any]:
    """Loading/online fields shared by both projections."""
    return {
        "last_updated": state.last_updated.isoformat() if state.last_updated else None,
        "is_online": state.is_online,
        "is_using_cached_data": state.is_using_cached_data,
        "data_source": state.data_source.value if state.data_source else None,
        "error": state.error_message,
    }


def get_earthquakes(
    request: Request,
    coordinator: FetchCoordinator | None = None,
    default_limit: int | None = None,
) -> Response:
    """API endpoint: Filtered earthquake list, newest first.

    Query params:
        filter: "on" / "off" (default: on if any filter param is given)
        min_magnitude, max_magnitude: Inclusive magnitude range
        time: all | hour | day | week | month
        location: Case-insensitive place substring
        limit: Maximum number of earthquakes returned

    Args:
        request: Flask request
        coordinator: Fetch coordinator (process-wide one if not provided)
        default_limit: Page size when no limit is given (configured value
            if not provided)

    Returns:
        JSON with the filtered earthquakes and view status
    """
    if request.method == "OPTIONS":
        return _preflight()

    if coordinator is None:
        coordinator = get_coordinator()
        if default_limit is None:
            default_limit = get_config().default_limit
    if default_limit is None:
        default_limit = Config().default_limit

    try:
        filter_actions = parse_filter_actions(request)
        limit = _limit_arg(request, default_limit)
    except BadRequest as e:
        return _json_response({"error": str(e)}, status=400)

    state = asyncio.run(_load_list_state(coordinator, filter_actions))

    if state.error_message and not state.earthquakes:
        logger.error("Earthquake list unavailable: %s", state.error_message)
        return _json_response({"error": state.error_message}, status=502)

    now = datetime.now(timezone.utc)
    earthquakes = filtered_earthquakes(state, now)

    response_data: dict[str, Any] = {
        "earthquakes": [_earthquake_payload(eq) for eq in earthquakes[:limit]],
        "count": len(earthquakes),
        "total": len(state.earthquakes),
        "has_active_filters": state_has_active_filters(state),
        "last_updated_text": last_updated_text(state, now),
    }
    response_data.update(_status_fields(state))

    return _json_response(response_data)


def get_map(
    request: Request,
    coordinator: FetchCoordinator | None = None,
) -> Response:
    """API endpoint: Map viewport and the earthquakes that can be plotted.

    Returns:
        JSON with region (center, span, bounds) and earthquakes
    """
    if request.method == "OPTIONS":
        return _preflight()

    coordinator = coordinator or get_coordinator()
    state = asyncio.run(_load_map_state(coordinator))

    if state.error_message and not state.earthquakes:
        logger.error("Earthquake map unavailable: %s", state.error_message)
        return _json_response({"error": state.error_message}, status=502)

    earthquakes = visible_earthquakes(state)

    response_data: dict[str, Any] = {
        "region": _region_payload(state.region),
        "earthquakes": [_earthquake_payload(eq) for eq in earthquakes],
        "count": len(earthquakes),
    }
    response_data.update(_status_fields(state))

    return _json_response(response_data)


def get_cache_status(
    request: Request,
    coordinator: FetchCoordinator | None = None,
) -> Response:
    """API endpoint: Snapshot timestamp and freshness.

    Returns:
        JSON with saved_at (or null) and is_valid
    """
    if request.method == "OPTIONS":
        return _preflight()

    coordinator = coordinator or get_coordinator()
    saved_at = coordinator.cache.timestamp()

    return _json_response({
        "saved_at": saved_at.isoformat() if saved_at else None,
        "is_valid": coordinator.cache.is_valid(coordinator.max_age_seconds),
        "max_age_seconds": coordinator.max_age_seconds,
    })
