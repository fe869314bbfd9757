"""Item read-state changes and their effect on the new-item counter."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from readsync.domain.model import Item
    from readsync.domain.ports.state import NewItemCounter

log = getLogger(__name__)


@dataclass(slots=True)
class ItemStateService:
    """Apply read/unread transitions to items.

    A user-visible read-state change counts as acknowledging the feed list, so by
    default it resets the global new-item counter. Synchronization code passes
    ``notify=False`` to leave the counter alone.
    """

    counter: NewItemCounter

    def set_read_state(self, item: Item, read: bool, *, notify: bool = True) -> None:
        if item.read == read:
            return
        item.read = read
        if read:
            item.new = False
        log.debug("Item %s marked %s", item.id, "read" if read else "unread")
        if notify:
            self.counter.set(0)


@contextmanager
def preserved_new_item_count(counter: NewItemCounter) -> Iterator[int]:
    """Snapshot the new-item counter and restore it when the block exits."""

    saved = counter.get()
    try:
        yield saved
    finally:
        counter.set(saved)
