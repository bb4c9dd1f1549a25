"""Configuration loading helpers for series-watch."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .models import SLACK_TOKEN_ENV, WatchConfig

CONFIG_EXTENSIONS = (".yaml", ".yml", ".json")
CONFIG_FILENAME = "config.yaml"
HOME_ENV = "SERIES_WATCH_HOME"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")
    return data


def _write_file(path: Path, payload: dict) -> None:
    with path.open("w", encoding="utf-8") as stream:
        if path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(payload, stream, allow_unicode=True, sort_keys=False)
        else:
            json.dump(payload, stream, indent=2, ensure_ascii=False)


@dataclass(slots=True)
class ConfigLocator:
    """Resolve important paths from project root."""

    project_root: Path | None = None
    data_dir: Path | None = None
    logs_dir: Path | None = None
    config_file: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV)
        if self.project_root is not None:
            root = Path(self.project_root).expanduser().resolve()
        elif env_root:
            root = Path(env_root).expanduser().resolve()
        else:
            root = Path.cwd().resolve()
        self.project_root = root
        self.data_dir = (root / "data").resolve()
        self.logs_dir = (root / "logs").resolve()
        if self.config_file is not None:
            self.config_file = Path(self.config_file).expanduser().resolve()
        self.ensure_directories()

    def ensure_directories(self) -> None:
        for directory in (self.data_dir, self.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def config_path(self) -> Path:
        if self.config_file is not None:
            return self.config_file
        for extension in CONFIG_EXTENSIONS:
            candidate = self.data_dir / f"config{extension}"
            if candidate.exists():
                return candidate
        return self.data_dir / CONFIG_FILENAME


class ConfigRepository:
    """Repository encapsulating config IO and schema validation."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()
        self._cache: WatchConfig | None = None

    def load_config(self) -> WatchConfig:
        if self._cache is not None:
            return self._cache
        path = self.locator.config_path()
        if path.exists():
            try:
                payload = _read_file(path)
                config = WatchConfig.model_validate(payload)
            except (ValidationError, ValueError, OSError, yaml.YAMLError) as exc:
                raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc
        elif self.locator.config_file is not None:
            raise ConfigError(f"Configuration file not found: {path}")
        else:
            config = WatchConfig()
            self.save_config(config)
        self._cache = config
        return config

    def save_config(self, config: WatchConfig) -> Path:
        path = self.locator.config_path()
        payload = config.model_dump(mode="json")
        # Tokens picked up from the environment stay out of the file.
        if payload["slack"]["bot_token"] == os.environ.get(SLACK_TOKEN_ENV):
            payload["slack"]["bot_token"] = ""
        _write_file(path, payload)
        self._cache = config
        return path

    def snapshot_path(self) -> Path:
        config = self.load_config()
        return config.storage.resolved_path(self.locator.project_root)


__all__ = ["CONFIG_EXTENSIONS", "ConfigLocator", "ConfigRepository", "HOME_ENV"]
