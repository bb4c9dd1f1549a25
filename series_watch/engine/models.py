"""Entity, snapshot and delta value types plus the stored JSON schema."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

from pydantic import BaseModel, Field


@dataclass(frozen=True, slots=True)
class Entity:
    """A series discovered on a listing page."""

    id: str
    url: str
    title: str


class Snapshot:
    """All known entities as of one run, keyed by ``id``."""

    __slots__ = ("_entities",)

    def __init__(self, entities: Iterable[Entity] | Mapping[str, Entity] = ()) -> None:
        if isinstance(entities, Mapping):
            entities = entities.values()
        merged: dict[str, Entity] = {}
        for entity in entities:
            merged[entity.id] = entity
        self._entities = merged

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        for key in sorted(self._entities):
            yield self._entities[key]

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Snapshot):
            return NotImplemented
        return self._entities == other._entities

    def __repr__(self) -> str:
        return f"Snapshot({len(self._entities)} entities)"

    def get(self, entity_id: str) -> Entity | None:
        return self._entities.get(entity_id)

    def ids(self) -> frozenset[str]:
        return frozenset(self._entities)

    def to_payload(self) -> dict[str, Any]:
        return StoredSnapshot.from_snapshot(self).model_dump(mode="json")

    @classmethod
    def from_payload(cls, payload: Any) -> "Snapshot":
        return StoredSnapshot.model_validate(payload).to_snapshot()


@dataclass(frozen=True, slots=True)
class Delta:
    """Entities added and removed between two snapshots, ordered by id."""

    added: tuple[Entity, ...] = field(default_factory=tuple)
    removed: tuple[Entity, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.added and not self.removed


class StoredEntity(BaseModel):
    id: str
    url: str
    title: str


class StoredSnapshot(BaseModel):
    """On-disk representation: ``{"series": [{"id", "url", "title"}, ...]}``."""

    series: list[StoredEntity] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "StoredSnapshot":
        return cls(
            series=[StoredEntity(id=e.id, url=e.url, title=e.title) for e in snapshot]
        )

    def to_snapshot(self) -> Snapshot:
        return Snapshot(Entity(id=item.id, url=item.url, title=item.title) for item in self.series)


__all__ = ["Delta", "Entity", "Snapshot", "StoredEntity", "StoredSnapshot"]
