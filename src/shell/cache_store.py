"""Snapshot Cache Store - Imperative Shell.

This module persists the last fetched earthquakes together with the time
they were saved. Freshness rules live in the core module
(src/core/cache_policy.py); this module only reads and writes.

The snapshot is a single JSON document written atomically (temporary
file + rename), so a timestamp can never exist without its data:

{
    "version": 1,
    "saved_at": "2025-07-03T12:00:00+00:00",
    "earthquakes": [{...}, ...]
}
"""

import json
import logging
import os
import tempfile
import threading
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from src.core.cache_policy import is_cache_fresh
from src.core.earthquake import Earthquake, earthquake_from_dict, earthquake_to_dict
from src.core.errors import CachePersistError, CacheReadError, DecodeError


logger = logging.getLogger(__name__)


# Snapshot file name inside the cache directory
CACHE_FILENAME = "earthquakes_cache.json"

SNAPSHOT_VERSION = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CacheStore(Protocol):
    """Single-snapshot earthquake cache."""

    def save(self, earthquakes: list[Earthquake]) -> None:
        ...

    def load(self) -> list[Earthquake]:
        ...

    def clear(self) -> None:
        ...

    def timestamp(self) -> datetime | None:
        ...

    def is_valid(self, max_age_seconds: float) -> bool:
        ...


class FileCacheStore:
    """Cache store backed by one JSON file.

    This is part of the imperative shell - it handles file I/O.
    """

    def __init__(
        self,
        cache_dir: str | Path,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize file cache store.

        Args:
            cache_dir: Directory for the snapshot file (created on save)
            clock: Returns the current time (timezone-aware)
        """
        self.cache_dir = Path(cache_dir).expanduser()
        self.path = self.cache_dir / CACHE_FILENAME
        self._clock = clock
        self._lock = threading.Lock()

    def _read_snapshot(self) -> dict[str, Any]:
        """Read and minimally validate the snapshot document.

        Raises:
            CacheReadError: If the file is missing, unreadable or malformed
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CacheReadError("No snapshot") from e
        except (OSError, ValueError) as e:
            raise CacheReadError(f"Unreadable snapshot: {e}") from e

        if not isinstance(data, dict) or data.get("version") != SNAPSHOT_VERSION:
            raise CacheReadError("Snapshot has an unknown format")

        return data

    def save(self, earthquakes: list[Earthquake]) -> None:
        """Persist earthquakes with a freshly captured timestamp.

        This method performs file I/O.

        Raises:
            CachePersistError: If the snapshot could not be written
        """
        snapshot = {
            "version": SNAPSHOT_VERSION,
            "saved_at": self._clock().isoformat(),
            "earthquakes": [earthquake_to_dict(e) for e in earthquakes],
        }

        logger.info("Saving %d earthquakes to %s", len(earthquakes), self.path)

        with self._lock:
            tmp_path = None
            try:
                self.cache_dir.mkdir(parents=True, exist_ok=True)
                fd, tmp_path = tempfile.mkstemp(
                    dir=self.cache_dir,
                    prefix=".earthquakes_",
                    suffix=".tmp",
                )
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(snapshot, f)
                os.replace(tmp_path, self.path)
                tmp_path = None
            except (OSError, TypeError, ValueError) as e:
                logger.error("Failed to save earthquake cache: %s", str(e))
                raise CachePersistError(f"Failed to save earthquake cache: {e}") from e
            finally:
                if tmp_path is not None and os.path.exists(tmp_path):
                    os.unlink(tmp_path)

    def load(self) -> list[Earthquake]:
        """Load cached earthquakes.

        This method performs file I/O.

        Returns:
            Cached earthquakes, or an empty list if there is no usable snapshot
        """
        try:
            data = self._read_snapshot()
            records = data["earthquakes"]
            if not isinstance(records, list):
                raise CacheReadError("Snapshot earthquakes is not a list")
            earthquakes = [earthquake_from_dict(r) for r in records]
        except CacheReadError as e:
            if isinstance(e.__cause__, FileNotFoundError):
                logger.info("No earthquake cache found")
            else:
                logger.warning("Ignoring earthquake cache: %s", str(e))
            return []
        except (KeyError, DecodeError) as e:
            logger.warning("Ignoring corrupt earthquake cache: %s", str(e))
            return []

        logger.info("Loaded %d earthquakes from cache", len(earthquakes))
        return earthquakes

    def timestamp(self) -> datetime | None:
        """When the snapshot was saved, None if absent or undecodable."""
        try:
            saved_at = datetime.fromisoformat(self._read_snapshot()["saved_at"])
        except (CacheReadError, KeyError, TypeError, ValueError):
            return None

        if saved_at.tzinfo is None:
            saved_at = saved_at.replace(tzinfo=timezone.utc)
        return saved_at

    def is_valid(self, max_age_seconds: float) -> bool:
        """Whether the snapshot is younger than max_age_seconds."""
        return is_cache_fresh(self.timestamp(), self._clock(), max_age_seconds)

    def clear(self) -> None:
        """Remove the snapshot. A missing snapshot is not an error."""
        with self._lock:
            try:
                self.path.unlink()
                logger.info("Cleared earthquake cache")
            except FileNotFoundError:
                pass


class InMemoryCacheStore:
    """Deterministic in-memory CacheStore for tests and previews.

    Attributes:
        fail_on_save: If True, save() raises CachePersistError
        save_count: Number of successful save() calls
    """

    def __init__(
        self,
        earthquakes: list[Earthquake] | None = None,
        saved_at: datetime | None = None,
        clock: Callable[[], datetime] = _utcnow,
        fail_on_save: bool = False,
    ) -> None:
        self._earthquakes = list(earthquakes or [])
        self._saved_at = saved_at
        self._clock = clock
        self.fail_on_save = fail_on_save
        self.save_count = 0

    def save(self, earthquakes: list[Earthquake]) -> None:
        if self.fail_on_save:
            raise CachePersistError("In-memory cache configured to fail")
        self._earthquakes = list(earthquakes)
        self._saved_at = self._clock()
        self.save_count += 1

    def load(self) -> list[Earthquake]:
        return list(self._earthquakes)

    def clear(self) -> None:
        self._earthquakes = []
        self._saved_at = None

    def timestamp(self) -> datetime | None:
        return self._saved_at

    def is_valid(self, max_age_seconds: float) -> bool:
        return is_cache_fresh(self._saved_at, self._clock(), max_age_seconds)
