"""Match remote identifiers to locally stored items.

The item store can only enumerate a subscription's surrogate keys in order, so
lookups scan forward from where the previous lookup stopped and record every
remote id seen on the way. Across one pass each item is loaded for inspection
at most once; later lookups for ids already seen are served from the cache.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from readsync.domain.model import Item, Subscription
    from readsync.domain.ports.persistence import ItemStore

    from .cache import IdentifierCache

log = getLogger(__name__)


def resolve_item_by_source_id(
    store: ItemStore,
    subscription: Subscription,
    remote_id: str,
    cache: IdentifierCache,
) -> Item | None:
    """Return the checked-out item whose ``source_id`` equals ``remote_id``.

    The caller owns the returned item and must release it. ``None`` means no
    local item matches, which is expected when items were purged locally after
    the remote snapshot was taken.
    """

    cached = _load_cached(store, remote_id, cache)
    if cached is not None:
        return cached

    keys = store.item_sequence_for(subscription)
    for position in range(cache.visited, len(keys)):
        key = keys[position]
        cache.visited = position + 1
        item = store.load(key)
        if item is None:
            continue
        if item.source_id:
            cache.insert(item.source_id, key)
            if item.source_id == remote_id:
                return item
        store.release(item)

    log.warning("Could not find item for %s in subscription %s", remote_id, subscription.id)
    return None


def _load_cached(store: ItemStore, remote_id: str, cache: IdentifierCache) -> Item | None:
    key = cache.lookup(remote_id)
    if key is None:
        return None
    item = store.load(key)
    if item is None:
        return None
    if item.source_id != remote_id:
        log.debug("Cached key %s no longer carries source id %s", key, remote_id)
        store.release(item)
        return None
    return item
