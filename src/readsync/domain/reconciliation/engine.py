"""Apply a remote subscription snapshot's read state to local items.

One pass runs after every completed fetch of a feed subscription:

1) the generic feed parser refreshes items and the feed header, with the
   remote feed id carried across because the parser drops unknown metadata
2) each Atom ``entry`` in the fetched document is matched to a local item
3) items whose read flag differs from the remote flag are updated, unless a
   local edit for the same entry is still waiting for confirmation

Read-state changes made here must not disturb the global new-item counter.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING
from xml.etree import ElementTree

from readsync.domain.item_state import preserved_new_item_count
from readsync.domain.metadata import FEED_ID_KEY, preserved_metadata
from readsync.domain.model import UpdateFlags

from .cache import IdentifierCache
from .contracts import ReconcileResult
from .errors import MissingIdentifierError
from .extract import extract_entry_state, local_name
from .guard import is_pending
from .resolve import resolve_item_by_source_id

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from readsync.domain.model import ReaderSource, Subscription
    from readsync.domain.ports.fetching import FeedContentProcessor, UpdateResult
    from readsync.domain.ports.persistence import ItemStore, PendingEditQueue
    from readsync.domain.ports.state import NewItemCounter, ReadStateMutator

log = getLogger(__name__)


@dataclass(slots=True)
class FeedSubscriptionReconciler:
    """Process update results for feed subscriptions of one reader source.

    Callers must hold exclusive access to the subscription for the whole call.
    """

    source: ReaderSource
    items: ItemStore
    pending_edits: PendingEditQueue
    counter: NewItemCounter
    mutator: ReadStateMutator
    content: FeedContentProcessor
    log_raw_payloads: bool = False

    def process_update_result(
        self,
        subscription: Subscription,
        result: UpdateResult,
        flags: UpdateFlags = UpdateFlags.NONE,
    ) -> ReconcileResult:
        with preserved_metadata(subscription, FEED_ID_KEY):
            self.content.process(subscription, result, flags)

        if not result.data:
            return ReconcileResult()
        return self.reconcile(subscription, result.data)

    def reconcile(self, subscription: Subscription, body: bytes) -> ReconcileResult:
        """Sync local read flags of ``subscription`` with the remote document ``body``."""

        if self.log_raw_payloads:
            log.debug("Remote document for %s: %s", subscription.id, body.decode(errors="replace"))

        outcome = ReconcileResult()
        with preserved_new_item_count(self.counter):
            try:
                root = ElementTree.fromstring(body)
            except ElementTree.ParseError as exc:
                log.warning(
                    "Could not parse remote document for subscription %s: %s",
                    subscription.id,
                    exc,
                )
                outcome.parse_failed = True
                return outcome

            cache = IdentifierCache()
            for entry in root:
                if local_name(entry.tag) != "entry":
                    continue
                outcome.entries += 1
                self._retrieve_status(entry, subscription, cache, outcome)

        log.info(
            "Reconciled subscription %s: entries=%s, changed=%s, unresolved=%s, vetoed=%s",
            subscription.id,
            outcome.entries,
            outcome.changed,
            outcome.unresolved,
            outcome.vetoed,
        )
        return outcome

    def _retrieve_status(
        self,
        entry: Element,
        subscription: Subscription,
        cache: IdentifierCache,
        outcome: ReconcileResult,
    ) -> None:
        try:
            state = extract_entry_state(entry)
        except MissingIdentifierError:
            log.warning("Skipping entry without id in subscription %s", subscription.id)
            outcome.missing_id += 1
            return

        item = resolve_item_by_source_id(self.items, subscription, state.remote_id, cache)
        if item is None:
            outcome.unresolved += 1
            return

        try:
            if item.source_id != state.remote_id:
                return
            if is_pending(self.pending_edits, self.source.id, state.remote_id):
                log.debug("Edit for %s still pending, keeping local state", state.remote_id)
                outcome.vetoed += 1
                return
            if item.read != state.is_read:
                self.mutator.set_read_state(item, state.is_read, notify=False)
                outcome.changed += 1
        finally:
            self.items.release(item)
