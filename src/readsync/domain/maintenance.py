"""Housekeeping for locally stored feed items."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from readsync.domain.model import Subscription
    from readsync.domain.ports.persistence import ItemStore

log = getLogger(__name__)


def purge_foreign_items(store: ItemStore, subscription: Subscription, *, prefix: str) -> int:
    """Delete items whose remote id does not start with ``prefix``.

    Such items cannot be matched against the remote service. Items without a
    remote id are kept. Returns the number of removed items.
    """

    removed = 0
    for key in list(store.item_sequence_for(subscription)):
        item = store.load(key)
        if item is None:
            continue
        source_id = item.source_id
        store.release(item)
        if source_id and not source_id.startswith(prefix):
            log.debug("Item with sourceId [%s] will be deleted.", source_id)
            store.remove_by_surrogate_key(key)
            removed += 1
    return removed
