"""Subscription metadata accessors."""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from readsync.domain.model import Subscription

FEED_ID_KEY = "theoldreader-feed-id"


def metadata_get(subscription: Subscription, key: str) -> str | None:
    return subscription.metadata.get(key)


def metadata_set(subscription: Subscription, key: str, value: str | None) -> None:
    """Set ``key`` to ``value``; ``None`` removes the key."""

    # Reassign rather than mutate so ORM change tracking sees the update.
    updated = dict(subscription.metadata)
    if value is None:
        updated.pop(key, None)
    else:
        updated[key] = value
    subscription.metadata = updated


@contextmanager
def preserved_metadata(subscription: Subscription, key: str) -> Iterator[None]:
    """Restore ``key`` to its current value (or absence) when the block exits."""

    saved = metadata_get(subscription, key)
    try:
        yield
    finally:
        metadata_set(subscription, key, saved)
