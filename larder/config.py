"""Configuration loading from environment variables."""

from __future__ import annotations

import os
import re

from larder.models.config import (
    LarderConfig,
    LogConfig,
    NotificationConfig,
    RegistryConfig,
    SnapshotConfig,
)

_DEFAULTS = RegistryConfig()


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"LARDER_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = _env(key, str(default))
    try:
        val = int(raw)
    except ValueError:
        raise ValueError(f"LARDER_{key} must be an integer, got: {raw!r}") from None
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float, min_val: float | None = None, max_val: float | None = None) -> float:
    raw = _env(key, str(default))
    try:
        val = float(raw)
    except ValueError:
        raise ValueError(f"LARDER_{key} must be a number, got: {raw!r}") from None
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def validate_endpoint(value: str) -> str:
    if not re.fullmatch(r"https?://[^\s/]+(/\S*)?", value):
        raise ValueError(f"Invalid registry endpoint: {value!r}. Must be an http(s) URL")
    return value.rstrip("/")


def validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> LarderConfig:
    """Load configuration from LARDER_* environment variables."""
    return LarderConfig(
        registry=RegistryConfig(
            endpoint=validate_endpoint(_env("ENDPOINT", _DEFAULTS.endpoint)),
            timeout_seconds=_env_float("TIMEOUT", _DEFAULTS.timeout_seconds, min_val=1.0, max_val=300.0),
            max_retries=_env_int("MAX_RETRIES", _DEFAULTS.max_retries, min_val=0, max_val=10),
            backoff_seconds=_env_float("BACKOFF", _DEFAULTS.backoff_seconds, min_val=0.0),
            max_concurrency=_env_int("MAX_CONCURRENCY", _DEFAULTS.max_concurrency, min_val=1, max_val=64),
            user_agent=_env("USER_AGENT", _DEFAULTS.user_agent),
        ),
        snapshot=SnapshotConfig(
            path=_env("SNAPSHOT_PATH", "universe.json"),
        ),
        notifications=NotificationConfig(
            webhook_secret_ref=_env("WEBHOOK_SECRET_REF", ""),
        ),
        log=LogConfig(
            level=validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
