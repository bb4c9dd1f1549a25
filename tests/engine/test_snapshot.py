from __future__ import annotations

import pytest
from pydantic import ValidationError

from conftest import entity
from series_watch.engine import Entity, Snapshot


def test_snapshot_deduplicates_by_id_last_wins() -> None:
    snapshot = Snapshot([Entity("a", "u1", "first"), Entity("a", "u2", "second")])
    assert len(snapshot) == 1
    assert snapshot.get("a").title == "second"


def test_payload_is_sorted_series_list() -> None:
    payload = Snapshot([entity("b"), entity("a")]).to_payload()
    assert payload == {
        "series": [
            {"id": "a", "url": "https://kimicomi.com/series/a", "title": "A"},
            {"id": "b", "url": "https://kimicomi.com/series/b", "title": "B"},
        ]
    }


def test_from_payload_tolerates_missing_series_and_extra_fields() -> None:
    assert len(Snapshot.from_payload({})) == 0
    snapshot = Snapshot.from_payload(
        {"series": [{"id": "a", "url": "u", "title": "t", "extra": 1}], "version": 2}
    )
    assert snapshot.get("a") == Entity("a", "u", "t")


def test_from_payload_rejects_invalid_entries() -> None:
    with pytest.raises(ValidationError):
        Snapshot.from_payload({"series": [{"id": "a"}]})


def test_entities_are_immutable() -> None:
    item = entity("a")
    with pytest.raises(AttributeError):
        item.title = "changed"  # type: ignore[misc]
