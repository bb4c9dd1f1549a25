"""AWS Lambda entrypoint running one reconciliation cycle per invocation."""

from __future__ import annotations

import os
from pathlib import Path

from .config import ConfigLocator, ConfigRepository
from .logging_conf import configure_logging
from .orchestrator import build_orchestrator

CONFIG_ENV = "SERIES_WATCH_CONFIG"


def handler(event: dict | None = None, context: object | None = None) -> str:
    """Raise on failure so the invocation is reported as failed."""

    # Only /tmp is writable inside Lambda.
    locator = ConfigLocator(
        project_root=Path(os.environ.get("SERIES_WATCH_HOME", "/tmp/series-watch")),
        config_file=Path(os.environ.get(CONFIG_ENV, "config.json")),
    )
    logger = configure_logging(to_files=False)
    config = ConfigRepository(locator).load_config()
    with build_orchestrator(config, locator.project_root, logger=logger) as orchestrator:
        result = orchestrator.run_cycle()
    return f"Processing complete: {result.total} series, {len(result.added)} added, {len(result.removed)} removed"


__all__ = ["handler"]
