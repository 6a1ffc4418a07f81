"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- USGS feed client (HTTP)
- Snapshot cache store (filesystem)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.usgs_client import USGSClient
from src.shell.cache_store import FileCacheStore, InMemoryCacheStore
from src.shell.config_loader import load_config, load_config_from_env

__all__ = [
    "USGSClient",
    "FileCacheStore",
    "InMemoryCacheStore",
    "load_config",
    "load_config_from_env",
]
