"""Fetch-Cache Coordinator - Wires the feed client and the cache store.

This module decides, for every fetch, whether to serve a fresh cache,
fresh network data, or a stale cache as degraded service:

1. A snapshot younger than max_age with at least one event is returned
   without touching the network.
2. Otherwise the feed is fetched and the result cached.
3. If the feed fails, any non-empty snapshot is returned regardless of
   age; with no snapshot the original error propagates.

There is no background revalidation.
"""

import logging
from dataclasses import dataclass

from src.core.actions import DataSource
from src.core.cache_policy import DEFAULT_MAX_AGE_SECONDS
from src.core.config import Config
from src.core.earthquake import Earthquake
from src.core.errors import CachePersistError, DecodeError, TransportError
from src.shell.cache_store import CacheStore, FileCacheStore
from src.shell.usgs_client import EarthquakeSource, USGSClient


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Result of one coordinated fetch.

    Attributes:
        earthquakes: Earthquakes to show
        source: Whether they came from a fresh cache, the network or a stale cache
    """
    earthquakes: list[Earthquake]
    source: DataSource

    @property
    def is_degraded(self) -> bool:
        """True when serving a stale cache because the feed failed."""
        return self.source is DataSource.STALE_CACHE


class FetchCoordinator:
    """Stale-while-revalidate (degraded form) over a source and a cache.

    This class wires together:
    - Earthquake source (USGS feed client)
    - Cache store (single snapshot)
    """

    def __init__(
        self,
        source: EarthquakeSource,
        cache: CacheStore,
        max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS,
        serve_fresh_on_persist_failure: bool = False,
    ) -> None:
        """Initialize coordinator.

        Args:
            source: Feed client
            cache: Snapshot store
            max_age_seconds: Snapshot age below which the network is skipped
            serve_fresh_on_persist_failure: Return fetched data when caching
                it fails instead of failing the fetch
        """
        self.source = source
        self.cache = cache
        self.max_age_seconds = max_age_seconds
        self.serve_fresh_on_persist_failure = serve_fresh_on_persist_failure

    @classmethod
    def from_config(cls, config: Config) -> "FetchCoordinator":
        """Build a coordinator with the production client and store."""
        return cls(
            source=USGSClient(
                feed_url=config.feed_url,
                timeout=config.request_timeout_seconds,
                probe_timeout=config.probe_timeout_seconds,
            ),
            cache=FileCacheStore(config.cache_dir),
            max_age_seconds=config.cache_max_age_seconds,
            serve_fresh_on_persist_failure=config.serve_fresh_on_persist_failure,
        )

    def _persist(self, earthquakes: list[Earthquake]) -> None:
        """Save freshly fetched data according to the persist-failure policy."""
        try:
            self.cache.save(earthquakes)
        except CachePersistError as e:
            if not self.serve_fresh_on_persist_failure:
                raise
            logger.error("Serving fresh data that could not be cached: %s", str(e))

    def fetch(self) -> FetchResult:
        """Run the fetch policy and report where the data came from.

        This method performs network and file I/O.

        Returns:
            FetchResult with the earthquakes and their origin

        Raises:
            TransportError: Feed failed and there is no cached data
            DecodeError: Feed payload malformed and there is no cached data
            CachePersistError: Fetched data could not be cached (unless
                serve_fresh_on_persist_failure is set)
        """
        if self.cache.is_valid(self.max_age_seconds):
            cached = self.cache.load()
            if cached:
                logger.info("Serving %d earthquakes from fresh cache", len(cached))
                return FetchResult(earthquakes=cached, source=DataSource.FRESH_CACHE)

        try:
            earthquakes = self.source.fetch_earthquakes()
        except (TransportError, DecodeError) as e:
            cached = self.cache.load()
            if cached:
                logger.warning(
                    "Feed unavailable (%s), serving %d cached earthquakes",
                    str(e),
                    len(cached),
                )
                return FetchResult(earthquakes=cached, source=DataSource.STALE_CACHE)

            logger.error("Feed unavailable and no cached data: %s", str(e))
            raise

        self._persist(earthquakes)

        return FetchResult(earthquakes=earthquakes, source=DataSource.NETWORK)

    def fetch_all(self) -> list[Earthquake]:
        """Run the fetch policy and return the earthquakes.

        Raises:
            See fetch()
        """
        return self.fetch().earthquakes

    def is_online(self) -> bool:
        """Reachability probe of the feed. Never raises."""
        return self.source.probe()
