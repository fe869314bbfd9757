"""Reconciliation of remote read state with the local item store."""

from __future__ import annotations

from .cache import IdentifierCache
from .contracts import EntryState, ReconcileResult
from .engine import FeedSubscriptionReconciler
from .errors import MissingIdentifierError, ReconciliationError
from .extract import READ_LABEL, extract_entry_state
from .guard import is_pending
from .resolve import resolve_item_by_source_id

__all__ = [
    "READ_LABEL",
    "EntryState",
    "FeedSubscriptionReconciler",
    "IdentifierCache",
    "MissingIdentifierError",
    "ReconcileResult",
    "ReconciliationError",
    "extract_entry_state",
    "is_pending",
    "resolve_item_by_source_id",
]
