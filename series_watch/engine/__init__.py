"""Engine components: fetch → extract → merge → diff → format."""

from .aggregator import PartitionedAggregator
from .differ import diff_snapshots
from .extractor import EntityExtractor, ExtractionRule, extract
from .fetcher import DocumentFetcher, FetchResponse
from .formatter import format_delta, format_error
from .models import Delta, Entity, Snapshot, StoredSnapshot

__all__ = [
    "Delta",
    "DocumentFetcher",
    "Entity",
    "EntityExtractor",
    "ExtractionRule",
    "FetchResponse",
    "PartitionedAggregator",
    "Snapshot",
    "StoredSnapshot",
    "diff_snapshots",
    "extract",
    "format_delta",
    "format_error",
]
