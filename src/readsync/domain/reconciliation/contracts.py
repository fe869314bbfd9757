"""Value types passed between reconciliation stages."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class EntryState:
    """Read state the remote service reports for one entry."""

    remote_id: str
    is_read: bool


@dataclass(slots=True)
class ReconcileResult:
    """Outcome of one reconciliation pass."""

    entries: int = 0
    changed: int = 0
    missing_id: int = 0
    unresolved: int = 0
    vetoed: int = 0
    parse_failed: bool = False
