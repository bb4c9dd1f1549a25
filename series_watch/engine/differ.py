"""Set reconciliation between the stored and the freshly computed snapshot."""

from __future__ import annotations

from .models import Delta, Snapshot


def diff_snapshots(previous: Snapshot, current: Snapshot) -> Delta:
    """Return entities added to and removed from ``previous``.

    Entities are compared by id only; a changed title or url under an
    existing id is neither added nor removed.
    """

    previous_ids = previous.ids()
    current_ids = current.ids()
    added = tuple(entity for entity in current if entity.id not in previous_ids)
    removed = tuple(entity for entity in previous if entity.id not in current_ids)
    return Delta(added=added, removed=removed)


__all__ = ["diff_snapshots"]
