"""Domain model for feed subscriptions and their items."""

from __future__ import annotations

from .enums import LoginState, UpdateFlags
from .item import Item
from .subscription import DEFAULT_SERVICE_HOST, ReaderSource, Subscription, new_node_id

__all__ = [
    "DEFAULT_SERVICE_HOST",
    "Item",
    "LoginState",
    "ReaderSource",
    "Subscription",
    "UpdateFlags",
    "new_node_id",
]
