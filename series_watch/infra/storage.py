"""Snapshot persistence backends (S3 object or local JSON file)."""

from __future__ import annotations

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from ..config import StorageConfig
from ..engine.models import Snapshot
from ..errors import SnapshotNotFoundError, StorageReadError, StorageWriteError

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


def encode_snapshot(snapshot: Snapshot) -> bytes:
    return json.dumps(snapshot.to_payload(), indent=2, ensure_ascii=False).encode("utf-8")


def decode_snapshot(data: bytes | str, location: str) -> Snapshot:
    try:
        payload = json.loads(data)
        return Snapshot.from_payload(payload)
    except (ValueError, ValidationError) as exc:
        raise StorageReadError(f"failed to decode snapshot at {location}: {exc}") from exc


class SnapshotStore(ABC):
    """Uniform storage contract for the previous/current snapshot."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Human readable location used in logs."""

    @abstractmethod
    def load(self) -> Snapshot:
        """Return the stored snapshot or raise ``StorageReadError``."""

    @abstractmethod
    def save(self, snapshot: Snapshot) -> None:
        """Overwrite the stored snapshot or raise ``StorageWriteError``."""


class FileSnapshotStore(SnapshotStore):
    def __init__(self, path: Path) -> None:
        self.path = path

    @property
    def location(self) -> str:
        return str(self.path)

    def load(self) -> Snapshot:
        if not self.path.exists():
            raise SnapshotNotFoundError(f"no snapshot stored at {self.path}")
        try:
            data = self.path.read_bytes()
        except OSError as exc:
            raise StorageReadError(f"failed to read snapshot {self.path}: {exc}") from exc
        return decode_snapshot(data, self.location)

    def save(self, snapshot: Snapshot) -> None:
        data = encode_snapshot(snapshot)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as stream:
                stream.write(data)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            raise StorageWriteError(f"failed to write snapshot {self.path}: {exc}") from exc


class S3SnapshotStore(SnapshotStore):
    def __init__(
        self,
        bucket: str,
        key: str,
        region: str | None = None,
        client: Any | None = None,
    ) -> None:
        self.bucket = bucket
        self.key = key
        self._client = client or boto3.client("s3", region_name=region)

    @property
    def location(self) -> str:
        return f"s3://{self.bucket}/{self.key}"

    def load(self) -> Snapshot:
        try:
            result = self._client.get_object(Bucket=self.bucket, Key=self.key)
            data = result["Body"].read()
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _MISSING_CODES:
                raise SnapshotNotFoundError(f"no snapshot stored at {self.location}") from exc
            raise StorageReadError(
                f"failed to get object from S3 {self.location}: {exc}"
            ) from exc
        except BotoCoreError as exc:
            raise StorageReadError(
                f"failed to get object from S3 {self.location}: {exc}"
            ) from exc
        return decode_snapshot(data, self.location)

    def save(self, snapshot: Snapshot) -> None:
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=self.key,
                Body=encode_snapshot(snapshot),
                ContentType="application/json",
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageWriteError(
                f"failed to put object to S3 {self.location}: {exc}"
            ) from exc


def build_store(config: StorageConfig, base_dir: Path) -> SnapshotStore:
    if config.backend == "s3":
        return S3SnapshotStore(config.bucket or "", config.key, region=config.region)
    return FileSnapshotStore(config.resolved_path(base_dir))


__all__ = [
    "FileSnapshotStore",
    "S3SnapshotStore",
    "SnapshotStore",
    "build_store",
    "decode_snapshot",
    "encode_snapshot",
]
