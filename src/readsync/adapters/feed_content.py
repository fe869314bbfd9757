"""Generic feed parsing backed by feedparser."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Any

import feedparser

from readsync.domain.model import Item, UpdateFlags

if TYPE_CHECKING:
    from collections.abc import Mapping

    from readsync.domain.model import Subscription
    from readsync.domain.ports.fetching import FeedContentProcessor, UpdateResult
    from readsync.domain.ports.persistence import ItemStore
    from readsync.domain.ports.state import NewItemCounter

log = getLogger(__name__)

HOMEPAGE_KEY = "homepage"
DESCRIPTION_KEY = "description"


@dataclass(slots=True)
class FeedparserContentProcessor:
    """Create items for unseen entries and refresh the subscription's feed header.

    The feed header is authoritative for subscription metadata: the metadata map
    is rebuilt from it on every update, so keys the feed does not provide are
    dropped.
    """

    items: ItemStore
    counter: NewItemCounter

    def process(
        self,
        subscription: Subscription,
        result: UpdateResult,
        flags: UpdateFlags,
    ) -> None:
        if not result.data:
            log.debug("No content to parse for subscription %s", subscription.id)
            return

        parsed = feedparser.parse(result.data)
        if parsed.bozo and not parsed.entries:
            log.warning(
                "Could not parse feed content for subscription %s: %s",
                subscription.id,
                parsed.get("bozo_exception"),
            )
            return

        feed: Mapping[str, Any] = parsed.feed
        title = feed.get("title")
        if title and (flags & UpdateFlags.RESET_TITLE or not subscription.title):
            subscription.title = title
        subscription.metadata = _header_metadata(feed)
        subscription.updated_at = datetime.now(UTC)

        known = self._known_source_ids(subscription)
        added = 0
        # Feeds list newest first; add oldest first so the newest gets the highest key.
        for entry in reversed(parsed.entries):
            source_id = entry.get("id") or entry.get("link")
            if not source_id or source_id in known:
                continue
            self.items.add(
                Item(
                    subscription_id=subscription.id,
                    source_id=source_id,
                    title=entry.get("title"),
                    link=entry.get("link"),
                    published_at=_published_at(entry),
                )
            )
            known.add(source_id)
            added += 1

        if added:
            self.counter.set(self.counter.get() + added)
        log.info("Feed %s: %s new item(s)", subscription.id, added)

    def _known_source_ids(self, subscription: Subscription) -> set[str]:
        known: set[str] = set()
        for key in self.items.item_sequence_for(subscription):
            item = self.items.load(key)
            if item is None:
                continue
            if item.source_id:
                known.add(item.source_id)
            self.items.release(item)
        return known


def _header_metadata(feed: Mapping[str, Any]) -> dict[str, str]:
    metadata: dict[str, str] = {}
    link = feed.get("link")
    if link:
        metadata[HOMEPAGE_KEY] = str(link)
    description = feed.get("subtitle")
    if description:
        metadata[DESCRIPTION_KEY] = str(description)
    return metadata


def _published_at(entry: Mapping[str, Any]) -> datetime | None:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    return datetime(*parsed[:6], tzinfo=UTC)


if TYPE_CHECKING:
    from typing import cast

    _processor_check: FeedContentProcessor = FeedparserContentProcessor(
        items=cast("ItemStore", object()),
        counter=cast("NewItemCounter", object()),
    )
