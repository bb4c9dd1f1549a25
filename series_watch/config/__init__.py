"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import (
    HttpConfig,
    MessageConfig,
    ScheduleConfig,
    ScheduleType,
    SlackConfig,
    SourceConfig,
    StorageConfig,
    TitleMarker,
    WatchConfig,
)

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "HttpConfig",
    "MessageConfig",
    "ScheduleConfig",
    "ScheduleType",
    "SlackConfig",
    "SourceConfig",
    "StorageConfig",
    "TitleMarker",
    "WatchConfig",
]
