"""USGS Feed Client - Imperative Shell.

This module handles HTTP communication with the USGS earthquake summary
feed. All I/O is contained here; decoding is in the core module.
"""

import logging
from typing import Any, Protocol

import requests

from src.core.config import ALL_DAY_FEED_URL
from src.core.earthquake import Earthquake, parse_earthquakes
from src.core.errors import DecodeError, QuakeWatchError, TransportError


logger = logging.getLogger(__name__)


# Default timeout for feed requests (seconds)
DEFAULT_TIMEOUT = 30

# Default timeout for the reachability probe (seconds)
DEFAULT_PROBE_TIMEOUT = 10


class EarthquakeSource(Protocol):
    """Anything that can fetch earthquakes and report reachability."""

    def fetch_earthquakes(self) -> list[Earthquake]:
        ...

    def probe(self) -> bool:
        ...


class USGSClient:
    """Client for the USGS GeoJSON summary feed.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        feed_url: str = ALL_DAY_FEED_URL,
        timeout: float = DEFAULT_TIMEOUT,
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize USGS client.

        Args:
            feed_url: GeoJSON feed URL
            timeout: Request timeout in seconds
            probe_timeout: Reachability probe timeout in seconds
            session: requests session (a plain requests call if not provided)
        """
        self.feed_url = feed_url
        self.timeout = timeout
        self.probe_timeout = probe_timeout
        self._http = session or requests

    def fetch_feed(self) -> dict[str, Any]:
        """Fetch the raw GeoJSON document.

        This method performs HTTP I/O.

        Returns:
            Raw GeoJSON response from USGS

        Raises:
            TransportError: If the request fails or returns a non-2xx status
            DecodeError: If the body is not JSON
        """
        logger.info("Fetching earthquake feed from %s", self.feed_url)

        try:
            response = self._http.get(self.feed_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error("USGS feed returned HTTP %s", status)
            raise TransportError(f"USGS feed returned HTTP {status}", status_code=status) from e
        except requests.RequestException as e:
            logger.error("USGS feed request failed: %s", str(e))
            raise TransportError(f"USGS feed request failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            logger.error("USGS feed returned invalid JSON")
            raise DecodeError(f"USGS feed returned invalid JSON: {e}") from e

    def fetch_earthquakes(self) -> list[Earthquake]:
        """Fetch and decode the feed.

        Returns:
            Earthquakes in feed order

        Raises:
            TransportError: If the request fails
            DecodeError: If the payload is malformed
        """
        data = self.fetch_feed()
        earthquakes = parse_earthquakes(data)

        logger.info("Fetched %d earthquakes from USGS", len(earthquakes))

        return earthquakes

    def probe(self) -> bool:
        """Check whether the feed is reachable.

        Issues a streamed GET and closes it without reading the body.
        Never raises.

        Returns:
            True iff the feed answered with HTTP 200
        """
        try:
            response = self._http.get(
                self.feed_url,
                timeout=self.probe_timeout,
                stream=True,
            )
            response.close()
        except requests.RequestException as e:
            logger.warning("USGS feed unreachable: %s", str(e))
            return False

        return response.status_code == 200


class StaticEarthquakeSource:
    """Deterministic in-memory EarthquakeSource for tests and previews.

    Attributes:
        earthquakes: Returned by fetch_earthquakes()
        error: Raised by fetch_earthquakes() instead, if set
        online: Returned by probe()
        fetch_count: Number of fetch_earthquakes() calls
        probe_count: Number of probe() calls
    """

    def __init__(
        self,
        earthquakes: list[Earthquake] | None = None,
        error: QuakeWatchError | None = None,
        online: bool = True,
    ) -> None:
        self.earthquakes = list(earthquakes or [])
        self.error = error
        self.online = online
        self.fetch_count = 0
        self.probe_count = 0

    def fetch_earthquakes(self) -> list[Earthquake]:
        self.fetch_count += 1
        if self.error is not None:
            raise self.error
        return list(self.earthquakes)

    def probe(self) -> bool:
        self.probe_count += 1
        return self.online
