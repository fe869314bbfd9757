"""Veto reconciliation for entries with unconfirmed local edits."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from readsync.domain.ports.persistence import PendingEditQueue


def is_pending(queue: PendingEditQueue, source: str, remote_id: str) -> bool:
    """Return whether a local read-state change for ``remote_id`` is still in flight."""

    return queue.contains(source, remote_id)
