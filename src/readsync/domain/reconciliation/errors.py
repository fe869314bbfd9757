"""Errors raised while reconciling remote read state."""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Base class for reconciliation failures scoped to a single entry or pass."""


class MissingIdentifierError(ReconciliationError):
    """Raised when a remote entry carries no identifier."""
