from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from series_watch.config import (
    HttpConfig,
    ScheduleConfig,
    ScheduleType,
    SlackConfig,
    SourceConfig,
    StorageConfig,
    WatchConfig,
)


def test_defaults_describe_the_kimicomi_listing() -> None:
    config = WatchConfig()
    assert config.source.listing_url == "https://kimicomi.com/category/manga"
    assert config.source.partitions == ["月", "火", "水", "木", "金", "土", "日", "その他"]
    assert config.source.extra_params == {"type": "連載中"}
    assert config.source.title_marker.value == "title-text"
    assert config.storage.backend == "file"
    assert config.slack.enabled is False
    assert config.schedule.type is ScheduleType.CRON


@pytest.mark.parametrize(
    "overrides",
    [{"entity_prefix": ""}, {"partitions": []}],
)
def test_source_rejects_unusable_rules(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        SourceConfig(**overrides)


@pytest.mark.parametrize("overrides", [{"timeout": 0}, {"retry_on_fail": -1}])
def test_http_rejects_invalid_values(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        HttpConfig(**overrides)


def test_s3_backend_requires_bucket() -> None:
    with pytest.raises(ValidationError):
        StorageConfig(backend="s3")
    assert StorageConfig(backend="s3", bucket="kimicomi").bucket == "kimicomi"


def test_storage_path_resolves_against_base(tmp_path: Path) -> None:
    assert StorageConfig().resolved_path(tmp_path) == (tmp_path / "data" / "series.json").resolve()
    absolute = tmp_path / "elsewhere.json"
    assert StorageConfig(path=absolute).resolved_path(Path("/unused")) == absolute


def test_slack_token_falls_back_to_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SERIES_WATCH_SLACK_TOKEN", "xoxb-env")
    config = SlackConfig(enabled=True, channel="#manga")
    assert config.bot_token == "xoxb-env"
    assert SlackConfig(bot_token="xoxb-file").bot_token == "xoxb-file"


@pytest.mark.parametrize(
    "payload",
    [{"enabled": True, "channel": "#manga"}, {"enabled": True, "bot_token": "xoxb"}],
)
def test_enabled_slack_needs_token_and_channel(payload: dict) -> None:
    with pytest.raises(ValidationError):
        SlackConfig(**payload)


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "cron", "value": 5},
        {"type": "interval", "value": "soon"},
        {"type": "once", "value": 12},
    ],
)
def test_schedule_value_must_match_type(payload: dict) -> None:
    with pytest.raises(ValidationError):
        ScheduleConfig(**payload)


def test_schedule_accepts_interval_kwargs() -> None:
    schedule = ScheduleConfig(type="interval", value={"minutes": 30})
    assert schedule.type is ScheduleType.INTERVAL
