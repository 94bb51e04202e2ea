"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

from larder import __version__


@dataclass
class RegistryConfig:
    """Supermarket API client configuration."""

    endpoint: str = "https://supermarket.chef.io/api/v1"
    timeout_seconds: float = 30.0
    max_retries: int = 3
    backoff_seconds: float = 0.5
    max_concurrency: int = 8
    user_agent: str = f"larder/{__version__}"


@dataclass
class SnapshotConfig:
    """Universe snapshot store configuration."""

    path: str = "universe.json"


@dataclass
class NotificationConfig:
    """Notification system configuration."""

    webhook_secret_ref: str = ""


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass
class LarderConfig:
    """Top-level larder configuration."""

    registry: RegistryConfig = field(default_factory=RegistryConfig)
    snapshot: SnapshotConfig = field(default_factory=SnapshotConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    log: LogConfig = field(default_factory=LogConfig)
