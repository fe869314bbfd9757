"""Ports for persisting subscriptions, items and pending edits."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from readsync.domain.model import Item, Subscription


@runtime_checkable
class SubscriptionRepository(Protocol):
    """Persistence contract for feed subscriptions."""

    def add(self, subscription: Subscription) -> None: ...

    def get(self, node_id: str) -> Subscription | None: ...

    def list(self) -> Sequence[Subscription]: ...


@runtime_checkable
class ItemStore(Protocol):
    """Checkout/release access to locally persisted items.

    Items are addressed only by surrogate key; the store offers no lookup by
    remote identifier. Every item obtained from ``load`` must be handed back via
    ``release`` once the caller is done with it.
    """

    def add(self, item: Item) -> None: ...

    def load(self, key: int) -> Item | None: ...

    def release(self, item: Item) -> None: ...

    def remove_by_surrogate_key(self, key: int) -> None: ...

    def item_sequence_for(self, subscription: Subscription) -> Sequence[int]: ...


@runtime_checkable
class PendingEditQueue(Protocol):
    """Remote ids with a local read-state change submitted but not yet confirmed."""

    def contains(self, source: str, remote_id: str) -> bool: ...


@runtime_checkable
class MutablePendingEditQueue(PendingEditQueue, Protocol):
    """Pending-edit queue as seen by the code that submits and confirms edits."""

    def add(self, source: str, remote_id: str, *, read: bool) -> None: ...

    def remove(self, source: str, remote_id: str) -> None: ...
