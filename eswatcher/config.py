"""Configuration loading from environment variables."""

from __future__ import annotations

import os
import re

from eswatcher.models.config import (
    LogConfig,
    PollConfig,
    ResourceConfig,
    TailConfig,
    WatcherConfig,
)

_VALID_LOG_LEVELS = {"debug", "info", "warning", "error"}
_VALID_LOG_FORMATS = {"console", "json"}
_DNS_SUBDOMAIN = re.compile(r"^[a-z0-9]([-a-z0-9.]*[a-z0-9])?$")


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"ESWATCHER_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_float(key: str, default: float, min_val: float | None = None, max_val: float | None = None) -> float:
    raw = _env(key, str(default))
    try:
        val = float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid value for ESWATCHER_{key}: {raw!r}") from exc
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def validate_log_level(value: str) -> str:
    if value.lower() not in _VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log level: {value}. Must be one of {sorted(_VALID_LOG_LEVELS)}")
    return value.lower()


def validate_log_format(value: str) -> str:
    if value.lower() not in _VALID_LOG_FORMATS:
        raise ValueError(f"Invalid log format: {value}. Must be one of {sorted(_VALID_LOG_FORMATS)}")
    return value.lower()


def _validate_api_group(value: str) -> str:
    if not _DNS_SUBDOMAIN.match(value):
        raise ValueError(f"Invalid API group: {value}")
    return value


def load_config() -> WatcherConfig:
    """Load configuration from ESWATCHER_* environment variables."""
    return WatcherConfig(
        resource=ResourceConfig(
            group=_validate_api_group(_env("RESOURCE_GROUP", "external-secrets.io")),
            version=_env("RESOURCE_VERSION", "v1beta1"),
            kind=_env("RESOURCE_KIND", "ExternalSecret"),
            plural=_env("RESOURCE_PLURAL", "externalsecrets"),
        ),
        poll=PollConfig(
            timeout_seconds=_env_float("TIMEOUT_SECONDS", 600.0, min_val=1.0),
            interval_seconds=_env_float("POLL_INTERVAL", 1.0, min_val=0.1, max_val=300.0),
            unbounded_interval_seconds=_env_float("UNBOUNDED_POLL_INTERVAL", 5.0, min_val=0.1, max_val=300.0),
            wait_forever=_env_bool("WAIT_FOREVER", False),
        ),
        tail=TailConfig(
            retry_delay_seconds=_env_float("RETRY_DELAY", 5.0, min_val=0.1, max_val=300.0),
        ),
        log=LogConfig(
            level=validate_log_level(_env("LOG_LEVEL", "info")),
            format=validate_log_format(_env("LOG_FORMAT", "console")),
        ),
    )
