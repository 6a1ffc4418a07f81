"""Tests for the Configuration Loader module.

Tests configuration loading from YAML files and environment variables.
"""

import os
from unittest.mock import patch

import pytest
import yaml

from src.core.config import ALL_DAY_FEED_URL, Config
from src.shell.config_loader import (
    _parse_bool,
    _resolve_value,
    load_config,
    load_config_from_dict,
    load_config_from_env,
)


class TestResolveValue:
    """Tests for _resolve_value function."""

    def test_returns_non_string_unchanged(self):
        """Non-string values are returned unchanged."""
        assert _resolve_value(123) == 123
        assert _resolve_value(None) is None
        assert _resolve_value(True) is True

    def test_returns_plain_string_unchanged(self):
        """Plain strings without placeholders are returned unchanged."""
        assert _resolve_value("hello") == "hello"

    def test_resolves_env_var_placeholder(self):
        """Resolves ${VAR} placeholders from environment."""
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            assert _resolve_value("${TEST_VAR}") == "test_value"

    def test_returns_placeholder_if_env_var_not_set(self):
        """Returns original placeholder if env var not set."""
        with patch.dict(os.environ, {}, clear=True):
            assert _resolve_value("${UNDEFINED_VAR}") == "${UNDEFINED_VAR}"


class TestParseBool:
    """Tests for _parse_bool function."""

    @pytest.mark.parametrize("value", [True, "true", "TRUE", "1", "yes", "on"])
    def test_truthy(self, value):
        assert _parse_bool(value) is True

    @pytest.mark.parametrize("value", [False, "false", "0", "no", ""])
    def test_falsy(self, value):
        assert _parse_bool(value) is False


class TestLoadConfigFromDict:
    """Tests for load_config_from_dict function."""

    def test_empty_dict_gives_defaults(self):
        assert load_config_from_dict({}) == Config()

    def test_parses_all_fields(self):
        config = load_config_from_dict({
            "feed_url": "https://example.com/feed.geojson",
            "request_timeout_seconds": 15,
            "probe_timeout_seconds": 5,
            "cache_dir": "/tmp/quakes",
            "cache_max_age_seconds": 600,
            "serve_fresh_on_persist_failure": True,
            "default_limit": 25,
        })

        assert config.feed_url == "https://example.com/feed.geojson"
        assert config.request_timeout_seconds == 15.0
        assert config.probe_timeout_seconds == 5.0
        assert config.cache_dir == "/tmp/quakes"
        assert config.cache_max_age_seconds == 600.0
        assert config.serve_fresh_on_persist_failure is True
        assert config.default_limit == 25

    def test_resolves_placeholders(self):
        with patch.dict(os.environ, {"QUAKE_CACHE": "/var/cache/quakes"}):
            config = load_config_from_dict({"cache_dir": "${QUAKE_CACHE}"})

        assert config.cache_dir == "/var/cache/quakes"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            "cache_max_age_seconds": 120,
            "default_limit": 50,
        }))

        config = load_config(path)

        assert config.cache_max_age_seconds == 120.0
        assert config.default_limit == 50
        assert config.feed_url == ALL_DAY_FEED_URL

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "missing.yaml") == Config()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path) == Config()

    def test_uses_config_path_env_var(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("default_limit: 7\n")

        with patch.dict(os.environ, {"CONFIG_PATH": str(path)}):
            config = load_config()

        assert config.default_limit == 7

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("feed_url: [unclosed\n")

        with pytest.raises(yaml.YAMLError):
            load_config(path)

    def test_invalid_values_are_loaded_and_logged(self, tmp_path, caplog):
        path = tmp_path / "config.yaml"
        path.write_text("cache_max_age_seconds: 0\n")

        config = load_config(path)

        assert config.cache_max_age_seconds == 0.0
        assert "cache_max_age_seconds" in caplog.text


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env function."""

    def test_defaults_without_env(self):
        with patch.dict(os.environ, {}, clear=True):
            assert load_config_from_env() == Config()

    def test_reads_env_vars(self):
        env = {
            "QUAKEWATCH_FEED_URL": "https://example.com/feed.geojson",
            "QUAKEWATCH_CACHE_DIR": "/data/cache",
            "CACHE_MAX_AGE_SECONDS": "60",
            "REQUEST_TIMEOUT_SECONDS": "12",
            "SERVE_FRESH_ON_PERSIST_FAILURE": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_config_from_env()

        assert config.feed_url == "https://example.com/feed.geojson"
        assert config.cache_dir == "/data/cache"
        assert config.cache_max_age_seconds == 60.0
        assert config.request_timeout_seconds == 12.0
        assert config.serve_fresh_on_persist_failure is True
