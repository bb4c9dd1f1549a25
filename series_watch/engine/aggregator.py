"""Merge the entities of every partition into one snapshot."""

from __future__ import annotations

from typing import Sequence

import structlog

from ..errors import FetchError, ParseError
from .extractor import EntityExtractor
from .fetcher import DocumentFetcher
from .models import Entity, Snapshot


class PartitionedAggregator:
    """Fetch partitions in order and merge their entities, last partition wins."""

    def __init__(
        self,
        source: DocumentFetcher,
        extractor: EntityExtractor,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.source = source
        self.extractor = extractor
        self.logger = logger or structlog.get_logger("series_watch").bind(component="aggregator")

    def aggregate_all(self, partition_keys: Sequence[str]) -> Snapshot:
        merged: dict[str, Entity] = {}
        for partition in partition_keys:
            response = self.source.fetch(partition)
            try:
                found = self.extractor.extract(response.text)
            except ParseError as exc:
                raise FetchError(
                    f"failed to parse document for partition {partition}: {exc}",
                    partition=partition,
                ) from exc
            self.logger.info("partition_fetched", partition=partition, count=len(found))
            merged.update(found)
        self.logger.info("aggregate_completed", total=len(merged))
        return Snapshot(merged)


__all__ = ["PartitionedAggregator"]
