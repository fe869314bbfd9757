from __future__ import annotations

from readsync.adapters.feed_content import (
    DESCRIPTION_KEY,
    HOMEPAGE_KEY,
    FeedparserContentProcessor,
)
from readsync.domain.metadata import FEED_ID_KEY
from readsync.domain.model import Item, UpdateFlags
from readsync.domain.ports.fetching import UpdateResult
from tests.helpers.feeds import FakeItemStore, FakeNewItemCounter, make_subscription

ATOM_FEED = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example feed</title>
  <subtitle>All the examples</subtitle>
  <link rel="alternate" href="https://example.org/"/>
  <id>tag:google.com,2005:reader/feed/https://example.org/feed.xml</id>
  <entry>
    <id>tag:google.com,2005:reader/item/0000000000000002</id>
    <title>Second</title>
    <link rel="alternate" href="https://example.org/2"/>
    <published>2024-01-02T00:00:00Z</published>
  </entry>
  <entry>
    <id>tag:google.com,2005:reader/item/0000000000000001</id>
    <title>First</title>
    <link rel="alternate" href="https://example.org/1"/>
    <published>2024-01-01T00:00:00Z</published>
  </entry>
</feed>
"""


def test_process_adds_unseen_entries_oldest_first() -> None:
    store = FakeItemStore()
    counter = FakeNewItemCounter(1)
    subscription = make_subscription()

    FeedparserContentProcessor(store, counter).process(
        subscription,
        UpdateResult(source="x", data=ATOM_FEED),
        UpdateFlags.NONE,
    )

    assert [item.title for item in store.items.values()] == ["First", "Second"]
    assert store.items[2].source_id == "tag:google.com,2005:reader/item/0000000000000002"
    assert store.items[2].link == "https://example.org/2"
    assert store.items[1].published_at is not None
    assert counter.get() == 3


def test_process_skips_known_entries() -> None:
    store = FakeItemStore(
        [Item(subscription_id="sub1", source_id="tag:google.com,2005:reader/item/0000000000000001")]
    )
    counter = FakeNewItemCounter()

    FeedparserContentProcessor(store, counter).process(
        make_subscription(),
        UpdateResult(source="x", data=ATOM_FEED),
        UpdateFlags.NONE,
    )

    assert len(store.items) == 2
    assert counter.get() == 1
    assert store.checked_out == set()


def test_process_rebuilds_metadata_from_feed_header() -> None:
    subscription = make_subscription(feed_id="feed/1")

    FeedparserContentProcessor(FakeItemStore(), FakeNewItemCounter()).process(
        subscription,
        UpdateResult(source="x", data=ATOM_FEED),
        UpdateFlags.NONE,
    )

    assert subscription.metadata == {
        HOMEPAGE_KEY: "https://example.org/",
        DESCRIPTION_KEY: "All the examples",
    }
    assert FEED_ID_KEY not in subscription.metadata
    assert subscription.updated_at is not None


def test_title_is_kept_unless_reset_requested() -> None:
    subscription = make_subscription()
    processor = FeedparserContentProcessor(FakeItemStore(), FakeNewItemCounter())
    result = UpdateResult(source="x", data=ATOM_FEED)

    processor.process(subscription, result, UpdateFlags.NONE)
    assert subscription.title == "Example"

    processor.process(subscription, result, UpdateFlags.RESET_TITLE)
    assert subscription.title == "Example feed"


def test_process_ignores_empty_result() -> None:
    subscription = make_subscription(feed_id="feed/1")
    store = FakeItemStore()

    FeedparserContentProcessor(store, FakeNewItemCounter()).process(
        subscription,
        UpdateResult(source="x", data=None, http_status=304),
        UpdateFlags.NONE,
    )

    assert store.items == {}
    assert subscription.metadata == {FEED_ID_KEY: "feed/1"}
