"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

from src.core.cache_policy import DEFAULT_MAX_AGE_SECONDS


# USGS summary feed: all earthquakes, past day
ALL_DAY_FEED_URL = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary/all_day.geojson"

DEFAULT_CACHE_DIR = "~/.cache/quakewatch"


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        feed_url: GeoJSON feed to fetch
        request_timeout_seconds: Timeout for the feed request
        probe_timeout_seconds: Timeout for the reachability probe
        cache_dir: Directory holding the snapshot file
        cache_max_age_seconds: Snapshot age below which the network is skipped
        serve_fresh_on_persist_failure: Return fetched data even if it could
            not be cached (default: fail the whole fetch)
        default_limit: Page size for the HTTP projection
    """
    feed_url: str = ALL_DAY_FEED_URL
    request_timeout_seconds: float = 30
    probe_timeout_seconds: float = 10
    cache_dir: str = DEFAULT_CACHE_DIR
    cache_max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS
    serve_fresh_on_persist_failure: bool = False
    default_limit: int = 100


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    if not config.feed_url.startswith(("http://", "https://")):
        errors.append(ValidationError(
            field="feed_url",
            message=f"Feed URL must be http(s), got '{config.feed_url}'",
        ))

    for name in ("request_timeout_seconds", "probe_timeout_seconds"):
        value = getattr(config, name)
        if value <= 0:
            errors.append(ValidationError(
                field=name,
                message=f"Timeout must be positive, got {value}",
            ))

    if config.cache_max_age_seconds <= 0:
        errors.append(ValidationError(
            field="cache_max_age_seconds",
            message=f"Cache max age must be positive, got {config.cache_max_age_seconds}",
        ))
    elif config.cache_max_age_seconds > 86400:
        # The feed only covers one day
        errors.append(ValidationError(
            field="cache_max_age_seconds",
            message="Cache max age exceeds the feed window of one day",
            severity="warning",
        ))

    if config.default_limit <= 0:
        errors.append(ValidationError(
            field="default_limit",
            message=f"Default limit must be positive, got {config.default_limit}",
        ))

    if not config.cache_dir:
        errors.append(ValidationError(
            field="cache_dir",
            message="Cache directory is empty",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
