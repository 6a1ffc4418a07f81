"""Cloud Function Entry Point.

This module provides the entry point for Google Cloud Functions.
It's a thin wrapper that routes requests to the API handlers.
"""

import logging
import os
import json

import functions_framework
from flask import Request, Response

from src.api_handler import get_cache_status, get_earthquakes, get_map


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


ROUTES = {
    "/earthquakes": get_earthquakes,
    "/map": get_map,
    "/cache": get_cache_status,
}


@functions_framework.http
def quakewatch_api(request: Request) -> Response | tuple[dict, int]:
    """HTTP Cloud Function entry point.

    Routes by path: /earthquakes (default), /map, /cache.

    Args:
        request: Flask request object

    Returns:
        Flask response, or (error dict, status) for unknown paths
    """
    path = request.path.rstrip("/") or "/earthquakes"
    handler = ROUTES.get(path)

    if handler is None:
        return {"error": f"Unknown path: {path}", "available": sorted(ROUTES)}, 404

    logger.info("Handling %s %s", request.method, path)

    try:
        return handler(request)
    except Exception as e:
        logger.exception("Unexpected error handling %s", path)
        return {
            "status": "error",
            "message": str(e),
        }, 500


# For local testing
if __name__ == "__main__":
    import asyncio

    from src.core.actions import OnAppear
    from src.core.formatter import format_earthquake_summary
    from src.core.list_state import last_updated_text, sorted_earthquakes
    from src.api_handler import get_coordinator
    from src.store import EffectRunner, create_list_store

    print("Loading earthquakes locally...")

    async def _load():
        store = create_list_store(EffectRunner(get_coordinator()))
        await store.send(OnAppear())
        await store.settle()
        return store.state

    state = asyncio.run(_load())

    if state.error_message:
        print(state.error_message)
    for earthquake in sorted_earthquakes(state)[:20]:
        print(format_earthquake_summary(earthquake))

    print(json.dumps({
        "count": len(state.earthquakes),
        "is_online": state.is_online,
        "is_using_cached_data": state.is_using_cached_data,
        "last_updated": last_updated_text(state),
    }, indent=2))
