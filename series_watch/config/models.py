"""Pydantic models describing a series-watch deployment."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
SLACK_TOKEN_ENV = "SERIES_WATCH_SLACK_TOKEN"


class ScheduleType(str, Enum):
    """Scheduler modes for the ``serve`` command."""

    CRON = "cron"
    INTERVAL = "interval"
    ONCE = "once"


class ScheduleConfig(BaseModel):
    """When the reconciliation cycle should run."""

    type: ScheduleType = Field(default=ScheduleType.CRON)
    value: Any = Field(
        default="0 * * * *",
        description="Cron expression, interval seconds or ISO datetime, depending on type.",
    )

    @model_validator(mode="after")
    def _validate_value(self) -> "ScheduleConfig":
        if self.type is ScheduleType.CRON and not isinstance(self.value, str):
            raise ValueError("Cron schedule requires string expression")
        if self.type is ScheduleType.INTERVAL and not isinstance(self.value, (int, float, dict)):
            raise ValueError("Interval schedule requires seconds (int/float) or kwargs dict")
        if (
            self.type is ScheduleType.ONCE
            and self.value is not None
            and not isinstance(self.value, str)
        ):
            raise ValueError("Once schedule expects ISO datetime string or null")
        return self


class TitleMarker(BaseModel):
    """Element inside an entity anchor that carries the display title."""

    tag: str = "div"
    attribute: str = "class"
    value: str = "title-text"


class SourceConfig(BaseModel):
    """Listing endpoint, partition keys and extraction rule."""

    listing_url: str = "https://kimicomi.com/category/manga"
    entity_prefix: str = "https://kimicomi.com/series/"
    partition_param: str = "day"
    partitions: list[str] = Field(
        default_factory=lambda: ["月", "火", "水", "木", "金", "土", "日", "その他"]
    )
    extra_params: dict[str, str] = Field(default_factory=lambda: {"type": "連載中"})
    title_marker: TitleMarker = Field(default_factory=TitleMarker)

    @model_validator(mode="after")
    def _validate_source(self) -> "SourceConfig":
        if not self.entity_prefix:
            raise ValueError("entity_prefix cannot be empty")
        if not self.partitions:
            raise ValueError("partitions must contain at least one key")
        return self


class HttpConfig(BaseModel):
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    retry_on_fail: int = 0

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be > 0")
        return value

    @field_validator("retry_on_fail")
    @classmethod
    def _non_negative_retries(cls, value: int) -> int:
        if value < 0:
            raise ValueError("retry_on_fail must be >= 0")
        return value


class StorageConfig(BaseModel):
    """Where the snapshot lives between runs."""

    backend: Literal["s3", "file"] = "file"
    bucket: str | None = None
    key: str = "series.json"
    region: str | None = None
    path: Path = Field(default=Path("data/series.json"))

    @field_validator("path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path:
        return Path(value)

    @model_validator(mode="after")
    def _validate_backend(self) -> "StorageConfig":
        if self.backend == "s3" and not self.bucket:
            raise ValueError("s3 storage requires a bucket")
        return self

    def resolved_path(self, base_dir: Path) -> Path:
        """Return the snapshot file path relative to the project root."""

        if not self.path.is_absolute():
            return (base_dir / self.path).resolve()
        return self.path


class SlackConfig(BaseModel):
    enabled: bool = False
    bot_token: str = ""
    channel: str = ""
    timeout: float = 10.0

    @model_validator(mode="after")
    def _apply_env_token(self) -> "SlackConfig":
        if not self.bot_token:
            self.bot_token = os.environ.get(SLACK_TOKEN_ENV, "")
        if self.enabled and not self.bot_token:
            raise ValueError(f"Slack is enabled but no bot_token or {SLACK_TOKEN_ENV} is set")
        if self.enabled and not self.channel:
            raise ValueError("Slack is enabled but no channel is configured")
        return self


class MessageConfig(BaseModel):
    """Labels used in delta and error reports."""

    header: str = "キミコミ連載情報の変更を検出しました"
    added_heading: str = "*【新規連載】*"
    removed_heading: str = "*【削除された連載】*"
    error_heading: str = "キミコミチェッカーエラー"


class WatchConfig(BaseModel):
    """Top-level configuration."""

    source: SourceConfig = Field(default_factory=SourceConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    slack: SlackConfig = Field(default_factory=SlackConfig)
    messages: MessageConfig = Field(default_factory=MessageConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)


__all__ = [
    "DEFAULT_USER_AGENT",
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
