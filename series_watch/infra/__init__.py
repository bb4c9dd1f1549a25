"""Infra layer collaborators (snapshot storage, notification sinks)."""

from .notifier import ConsoleNotifier, Notifier, SlackNotifier, build_notifier
from .storage import FileSnapshotStore, S3SnapshotStore, SnapshotStore, build_store

__all__ = [
    "ConsoleNotifier",
    "FileSnapshotStore",
    "Notifier",
    "S3SnapshotStore",
    "SlackNotifier",
    "SnapshotStore",
    "build_notifier",
    "build_store",
]
