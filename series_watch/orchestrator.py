"""Run one reconciliation cycle: aggregate, diff, notify, persist."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from .config import WatchConfig
from .engine import (
    DocumentFetcher,
    Entity,
    EntityExtractor,
    ExtractionRule,
    PartitionedAggregator,
    Snapshot,
    diff_snapshots,
    format_delta,
    format_error,
)
from .errors import NotificationError, SnapshotNotFoundError, StorageReadError
from .infra import Notifier, SnapshotStore, build_notifier, build_store
from .logging_conf import configure_logging


@dataclass(slots=True)
class CycleResult:
    """Outcome of a successful cycle."""

    total: int
    added: tuple[Entity, ...] = field(default_factory=tuple)
    removed: tuple[Entity, ...] = field(default_factory=tuple)
    notified: bool = False
    saved: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


class Orchestrator:
    """Central coordinator wiring the engine to storage and notification."""

    def __init__(
        self,
        config: WatchConfig,
        fetcher: DocumentFetcher,
        store: SnapshotStore,
        notifier: Notifier,
        persist: bool = True,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.fetcher = fetcher
        self.store = store
        self.notifier = notifier
        self.persist = persist
        self.logger = (logger or configure_logging()).bind(component="orchestrator")
        self.aggregator = PartitionedAggregator(
            fetcher,
            EntityExtractor(ExtractionRule.from_source(config.source)),
            logger=self.logger.bind(component="aggregator"),
        )

    def __enter__(self) -> "Orchestrator":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.fetcher.close()
        self.notifier.close()

    def run_cycle(self) -> CycleResult:
        """Run one cycle; any failure is alerted through the notifier and re-raised."""

        try:
            return self._run()
        except Exception as exc:
            self.logger.error("cycle_failed", error=str(exc), error_type=type(exc).__name__)
            self._alert(exc)
            raise

    def _run(self) -> CycleResult:
        self.logger.info("cycle_started", partitions=len(self.config.source.partitions))
        current = self.aggregator.aggregate_all(self.config.source.partitions)
        previous = self._load_previous()
        delta = diff_snapshots(previous, current)
        result = CycleResult(total=len(current), added=delta.added, removed=delta.removed)

        if delta.is_empty:
            self.logger.info("no_changes_detected")
        else:
            self.logger.info("changes_detected", added=len(delta.added), removed=len(delta.removed))
            try:
                self.notifier.send(format_delta(delta, self.config.messages))
                result.notified = True
            except NotificationError as exc:
                self.logger.error("notification_failed", error=str(exc))

        if self.persist:
            self.store.save(current)
            result.saved = True
            self.logger.info("snapshot_saved", location=self.store.location, total=len(current))
        self.logger.info("cycle_completed", total=result.total)
        return result

    def _load_previous(self) -> Snapshot:
        try:
            previous = self.store.load()
        except SnapshotNotFoundError:
            self.logger.info("previous_snapshot_missing", location=self.store.location)
            return Snapshot()
        except StorageReadError as exc:
            self.logger.warning(
                "previous_snapshot_unreadable", location=self.store.location, error=str(exc)
            )
            return Snapshot()
        self.logger.info("previous_snapshot_loaded", total=len(previous))
        return previous

    def _alert(self, error: BaseException) -> None:
        try:
            self.notifier.send(format_error(error, self.config.messages))
        except NotificationError as exc:
            self.logger.error("error_alert_failed", error=str(exc))


def build_orchestrator(
    config: WatchConfig,
    project_root: Path,
    dry_run: bool = False,
    logger: structlog.BoundLogger | None = None,
) -> Orchestrator:
    logger = logger or configure_logging()
    fetcher = DocumentFetcher(config.source, config.http, logger=logger.bind(component="fetcher"))
    return Orchestrator(
        config=config,
        fetcher=fetcher,
        store=build_store(config.storage, project_root),
        notifier=build_notifier(config.slack, dry_run=dry_run),
        persist=not dry_run,
        logger=logger,
    )


__all__ = ["CycleResult", "Orchestrator", "build_orchestrator"]
