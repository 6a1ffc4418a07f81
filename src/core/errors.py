"""Error taxonomy - Pure data.

Shell components translate library exceptions (requests, json, OS errors)
into these types at the boundary so the core and the coordinator never
depend on a particular HTTP or storage library.
"""


class QuakeWatchError(Exception):
    """Base class for all feed and cache errors."""


class TransportError(QuakeWatchError):
    """The feed request failed or returned a non-success status.

    Attributes:
        status_code: HTTP status code, or None if no response was received
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(QuakeWatchError):
    """The feed payload or a cached record could not be decoded."""


class CacheReadError(QuakeWatchError):
    """A cache artifact is missing or corrupt.

    Never surfaced to callers: the cache store recovers locally and
    reports absence instead.
    """


class CachePersistError(QuakeWatchError):
    """Writing the cache snapshot failed."""
