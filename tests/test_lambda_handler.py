from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import MemoryStore, RecordingNotifier, StubFetcher, card, listing
from series_watch import lambda_handler
from series_watch.errors import ConfigError, FetchError
from series_watch.orchestrator import Orchestrator


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"source": {"partitions": ["月"]}}), encoding="utf-8")
    monkeypatch.setenv("SERIES_WATCH_CONFIG", str(path))
    return path


def install_orchestrator(monkeypatch, test_logger, failing=()):
    def fake_build(config, project_root, logger=None):
        return Orchestrator(
            config=config,
            fetcher=StubFetcher({"月": listing(card("a", "Alpha"))}, failing=failing),
            store=MemoryStore(),
            notifier=RecordingNotifier(),
            logger=test_logger,
        )

    monkeypatch.setattr(lambda_handler, "build_orchestrator", fake_build)


def test_handler_reports_completion(config_file, monkeypatch, test_logger) -> None:
    install_orchestrator(monkeypatch, test_logger)
    message = lambda_handler.handler({}, None)
    assert message.startswith("Processing complete")
    assert "1 series" in message


def test_handler_raises_on_cycle_failure(config_file, monkeypatch, test_logger) -> None:
    install_orchestrator(monkeypatch, test_logger, failing=["月"])
    with pytest.raises(FetchError):
        lambda_handler.handler({}, None)


def test_handler_requires_config_file(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("SERIES_WATCH_CONFIG", str(tmp_path / "missing.json"))
    with pytest.raises(ConfigError):
        lambda_handler.handler({}, None)
