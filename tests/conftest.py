"""Shared fixtures: listing-page builders, stub collaborators, configs."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable, Mapping

import pytest
import structlog

from series_watch.config import SourceConfig, StorageConfig, WatchConfig
from series_watch.engine import Entity, Snapshot
from series_watch.engine.fetcher import FetchResponse
from series_watch.errors import FetchError, NotificationError, SnapshotNotFoundError
from series_watch.infra import Notifier, SnapshotStore

PREFIX = "https://kimicomi.com/series/"


def card(entity_id: str, title: str | None, prefix: str = PREFIX) -> str:
    """One listing card; ``title=None`` leaves out the title container."""

    title_html = f'<div class="title-text">{title}</div>' if title is not None else ""
    return (
        f'<li class="card"><a href="{prefix}{entity_id}">'
        f'<img src="/thumb/{entity_id}.jpg">{title_html}</a></li>'
    )


def listing(*cards: str) -> str:
    return "<html><body><ul class=\"series\">" + "".join(cards) + "</ul></body></html>"


def entity(entity_id: str, title: str | None = None) -> Entity:
    return Entity(id=entity_id, url=f"{PREFIX}{entity_id}", title=title or entity_id.upper())


class StubFetcher:
    def __init__(self, pages: Mapping[str, str], failing: Iterable[str] = ()) -> None:
        self.pages = dict(pages)
        self.failing = set(failing)
        self.calls: list[str] = []
        self.closed = False

    def fetch(self, partition: str) -> FetchResponse:
        self.calls.append(partition)
        if partition in self.failing:
            raise FetchError(f"unexpected status code 500 for {partition}", partition=partition)
        return FetchResponse(
            partition=partition,
            url=f"https://kimicomi.com/category/manga?day={partition}",
            status_code=200,
            text=self.pages.get(partition, listing()),
            headers={},
        )

    def close(self) -> None:
        self.closed = True


class MemoryStore(SnapshotStore):
    def __init__(
        self,
        snapshot: Snapshot | None = None,
        load_error: Exception | None = None,
        save_error: Exception | None = None,
    ) -> None:
        self.snapshot = snapshot
        self.load_error = load_error
        self.save_error = save_error
        self.saved: list[Snapshot] = []

    @property
    def location(self) -> str:
        return "memory://snapshot"

    def load(self) -> Snapshot:
        if self.load_error is not None:
            raise self.load_error
        if self.snapshot is None:
            raise SnapshotNotFoundError("nothing stored")
        return self.snapshot

    def save(self, snapshot: Snapshot) -> None:
        if self.save_error is not None:
            raise self.save_error
        self.saved.append(snapshot)
        self.snapshot = snapshot


class RecordingNotifier(Notifier):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.messages: list[str] = []
        self.closed = False

    def send(self, message: str) -> None:
        self.messages.append(message)
        if self.fail:
            raise NotificationError("channel_not_found")

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("SERIES_WATCH_HOME", str(tmp_path))
    monkeypatch.delenv("SERIES_WATCH_SLACK_TOKEN", raising=False)
    return tmp_path


@pytest.fixture
def test_logger() -> structlog.BoundLogger:
    return structlog.get_logger("series_watch.tests")


@pytest.fixture
def sample_config(tmp_path: Path) -> Callable[..., WatchConfig]:
    def _builder(**overrides: Any) -> WatchConfig:
        base: dict[str, Any] = {
            "source": SourceConfig(partitions=["月", "火", "水"]),
            "storage": StorageConfig(backend="file", path=tmp_path / "series.json"),
        }
        base.update(overrides)
        return WatchConfig(**base)

    return _builder
