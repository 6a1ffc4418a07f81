"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config) are defined in src/core/config.py to avoid information
leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.core.config import Config, validate_config


logger = logging.getLogger(__name__)


# Values treated as true for boolean environment variables
_TRUTHY = {"1", "true", "yes", "on"}


def _resolve_value(value: Any) -> Any:
    """Resolve a ${VAR} placeholder from the environment.

    Non-string values and plain strings are returned unchanged; an unset
    variable leaves the placeholder in place.
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_bool(value: Any) -> bool:
    """Parse a YAML or environment boolean."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()
    resolved = {key: _resolve_value(value) for key, value in data.items()}

    return Config(
        feed_url=str(resolved.get("feed_url", defaults.feed_url)),
        request_timeout_seconds=float(
            resolved.get("request_timeout_seconds", defaults.request_timeout_seconds)
        ),
        probe_timeout_seconds=float(
            resolved.get("probe_timeout_seconds", defaults.probe_timeout_seconds)
        ),
        cache_dir=str(resolved.get("cache_dir", defaults.cache_dir)),
        cache_max_age_seconds=float(
            resolved.get("cache_max_age_seconds", defaults.cache_max_age_seconds)
        ),
        serve_fresh_on_persist_failure=_parse_bool(
            resolved.get("serve_fresh_on_persist_failure", defaults.serve_fresh_on_persist_failure)
        ),
        default_limit=int(resolved.get("default_limit", defaults.default_limit)),
    )


def _log_validation(config: Config) -> None:
    """Log validation problems without failing the load."""
    result = validate_config(config)
    for error in result.errors:
        if error.severity == "warning":
            logger.warning("Config %s: %s", error.field, error.message)
        else:
            logger.error("Config %s: %s", error.field, error.message)


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)
    _log_validation(config)

    logger.info(
        "Loaded config: feed %s, cache %s (max age %ss)",
        config.feed_url,
        config.cache_dir,
        config.cache_max_age_seconds,
    )

    return config


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Useful for deployments without a YAML file.

    Environment variables:
        QUAKEWATCH_FEED_URL: GeoJSON feed URL
        QUAKEWATCH_CACHE_DIR: Snapshot directory
        CACHE_MAX_AGE_SECONDS: Fresh-cache window
        REQUEST_TIMEOUT_SECONDS: Feed request timeout
        SERVE_FRESH_ON_PERSIST_FAILURE: Return fetched data if caching fails

    Returns:
        Config object from environment
    """
    data: dict[str, Any] = {}

    env_map = {
        "QUAKEWATCH_FEED_URL": "feed_url",
        "QUAKEWATCH_CACHE_DIR": "cache_dir",
        "CACHE_MAX_AGE_SECONDS": "cache_max_age_seconds",
        "REQUEST_TIMEOUT_SECONDS": "request_timeout_seconds",
        "SERVE_FRESH_ON_PERSIST_FAILURE": "serve_fresh_on_persist_failure",
    }
    for env_name, key in env_map.items():
        value = os.environ.get(env_name)
        if value:
            data[key] = value

    config = load_config_from_dict(data)
    _log_validation(config)

    return config
