import os
import logging
import sys
from typing import List
from urllib.parse import urlparse


# =============================================================================
# Logging Configuration
# =============================================================================
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = os.getenv(
    "LOG_FORMAT",
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def setup_logging():
    """Configure application-wide logging.

    Logs go to stderr: stdout is reserved for the JSON payload.
    """
    level = getattr(logging, LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [s.strip() for s in raw.split(",") if s.strip()]


# =============================================================================
# Rightsize API Configuration
# =============================================================================
DEFAULT_REGIONS: List[str] = ["sg", "my", "co.th", "ae", "hk"]

RIGHTSIZE_REGIONS: List[str] = _env_list("RIGHTSIZE_REGIONS", ",".join(DEFAULT_REGIONS))

# {region} is substituted with the region code, e.g. "co.th"
RIGHTSIZE_API_URL_TEMPLATE: str = os.getenv(
    "RIGHTSIZE_API_URL_TEMPLATE",
    "https://rightsize-api.production.stashaway.{region}"
)

RIGHTSIZE_TIMEOUT_SECONDS: int = int(os.getenv("RIGHTSIZE_TIMEOUT_SECONDS", "30"))

# 0 means one worker per region
RIGHTSIZE_MAX_WORKERS: int = int(os.getenv("RIGHTSIZE_MAX_WORKERS", "0"))

METRICS: List[str] = ["cpu", "memory"]

# =============================================================================
# HTTP API Configuration
# =============================================================================
API_HOST: str = os.getenv("API_HOST", "127.0.0.1")
API_PORT: int = int(os.getenv("API_PORT", "8080"))


__all__ = [
    "DEFAULT_REGIONS",
    "RIGHTSIZE_REGIONS",
    "RIGHTSIZE_API_URL_TEMPLATE",
    "RIGHTSIZE_TIMEOUT_SECONDS",
    "RIGHTSIZE_MAX_WORKERS",
    "METRICS",
    "API_HOST",
    "API_PORT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "setup_logging",
    "validate_config",
    "ConfigValidationError",
]


# =============================================================================
# Configuration Validation
# =============================================================================
class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""
    pass


def _validate_positive_int(name: str, value: int) -> None:
    if value <= 0:
        raise ConfigValidationError(f"{name} must be positive, got {value}")


def _validate_non_negative_int(name: str, value: int) -> None:
    if value < 0:
        raise ConfigValidationError(f"{name} must not be negative, got {value}")


def _validate_url(name: str, value: str) -> None:
    try:
        result = urlparse(value)
        if not all([result.scheme, result.netloc]):
            raise ValueError("Missing scheme or netloc")
        if result.scheme not in ('http', 'https'):
            raise ValueError(f"Invalid scheme: {result.scheme}")
    except Exception as e:
        raise ConfigValidationError(f"{name} is not a valid URL: {value} ({e})")


def _validate_url_template(name: str, value: str) -> None:
    if "{region}" not in value:
        raise ConfigValidationError(f"{name} must contain '{{region}}', got {value}")
    try:
        rendered = value.format(region="sg")
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigValidationError(f"{name} has invalid placeholders: {value} ({e})")
    _validate_url(name, rendered)


def validate_config() -> None:
    """Validate all configuration values on startup

    Raises:
        ConfigValidationError: If any configuration value is invalid
    """
    errors = []

    try:
        _validate_positive_int("RIGHTSIZE_TIMEOUT_SECONDS", RIGHTSIZE_TIMEOUT_SECONDS)
    except ConfigValidationError as e:
        errors.append(str(e))

    try:
        _validate_non_negative_int("RIGHTSIZE_MAX_WORKERS", RIGHTSIZE_MAX_WORKERS)
    except ConfigValidationError as e:
        errors.append(str(e))

    try:
        _validate_url_template("RIGHTSIZE_API_URL_TEMPLATE", RIGHTSIZE_API_URL_TEMPLATE)
    except ConfigValidationError as e:
        errors.append(str(e))

    try:
        _validate_positive_int("API_PORT", API_PORT)
    except ConfigValidationError as e:
        errors.append(str(e))

    if not RIGHTSIZE_REGIONS:
        errors.append("RIGHTSIZE_REGIONS must list at least one region")

    if errors:
        raise ConfigValidationError(
            "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        )
