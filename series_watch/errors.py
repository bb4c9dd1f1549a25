"""Exception hierarchy shared by the engine and its collaborators."""

from __future__ import annotations


class WatchError(Exception):
    """Base class for every error raised by series-watch."""


class ConfigError(WatchError):
    """Configuration file is missing required values or fails validation."""


class ParseError(WatchError):
    """A markup document could not be parsed at all."""


class FetchError(WatchError):
    """Retrieving or parsing a partition document failed."""

    def __init__(self, message: str, partition: str | None = None) -> None:
        super().__init__(message)
        self.partition = partition


class StorageError(WatchError):
    """Base class for snapshot storage failures."""


class StorageReadError(StorageError):
    """The previous snapshot could not be read."""


class SnapshotNotFoundError(StorageReadError):
    """No snapshot has been stored yet."""


class StorageWriteError(StorageError):
    """The current snapshot could not be persisted."""


class NotificationError(WatchError):
    """A report could not be delivered to the notification sink."""


__all__ = [
    "ConfigError",
    "FetchError",
    "NotificationError",
    "ParseError",
    "SnapshotNotFoundError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "WatchError",
]
