from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from readsync.app import (
    _SUBSCRIPTION_LOCKS,
    SubscriptionNotFoundError,
    add_pending_edit,
    purge_subscription_items,
    remove_pending_edit,
    subscribe_feed,
    sync_feed_subscription,
)
from readsync.config import SyncConfig
from readsync.domain.metadata import FEED_ID_KEY
from readsync.domain.model import Item
from tests.helpers.feeds import (
    FakeFeedFetcher,
    FakeItemStore,
    FakeNewItemCounter,
    FakePendingEditQueue,
    FakeUnitOfWork,
    atom_document,
    atom_entry,
    make_repositories,
    make_source,
    make_subscription,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from readsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyFeedUnitOfWork
    from readsync.domain.model import ReaderSource

FEED_ID = "feed/00157a17b192950b65be3791"


def test_sync_applies_remote_read_state() -> None:
    subscription = make_subscription(feed_id=FEED_ID)
    repositories = make_repositories(
        subscriptions=[subscription],
        items=[
            Item(subscription_id="sub1", source_id="A", read=False),
            Item(subscription_id="sub1", source_id="B", read=True, new=False),
        ],
    )
    uow = FakeUnitOfWork(repositories)
    counter = FakeNewItemCounter(7)
    fetcher = FakeFeedFetcher(
        atom_document(atom_entry("A", read=True), atom_entry("B", read=False))
    )

    result = sync_feed_subscription(
        "sub1",
        fetcher=fetcher,
        unit_of_work_factory=lambda: uow,
        source=make_source(),
        counter=counter,
        sync_config=SyncConfig(),
    )

    assert result is not None
    assert result.changed == 2
    assert [request.source for request in fetcher.requests] == [
        "http://theoldreader.com/reader/atom/feed/00157a17b192950b65be3791"
    ]
    assert fetcher.requests[0].auth_value == "GoogleLogin auth=secret"
    store = repositories.items
    assert isinstance(store, FakeItemStore)
    assert store.items[1].read is True
    assert store.items[2].read is False
    assert subscription.metadata[FEED_ID_KEY] == FEED_ID
    assert counter.get() == 7
    assert uow.committed == 1


def test_sync_without_login_defers_to_source_update() -> None:
    repositories = make_repositories(subscriptions=[make_subscription()])
    fetcher = FakeFeedFetcher(atom_document())
    deferred: list[ReaderSource] = []
    source = make_source(logged_in=False)

    result = sync_feed_subscription(
        "sub1",
        fetcher=fetcher,
        unit_of_work_factory=lambda: FakeUnitOfWork(repositories),
        source=source,
        counter=FakeNewItemCounter(),
        sync_config=SyncConfig(),
        on_login_required=deferred.append,
    )

    assert result is None
    assert deferred == [source]
    assert fetcher.requests == []


def test_sync_skips_subscription_without_feed_id() -> None:
    repositories = make_repositories(subscriptions=[make_subscription(feed_id=None)])
    fetcher = FakeFeedFetcher(atom_document())
    deferred: list[ReaderSource] = []

    result = sync_feed_subscription(
        "sub1",
        fetcher=fetcher,
        unit_of_work_factory=lambda: FakeUnitOfWork(repositories),
        source=make_source(),
        counter=FakeNewItemCounter(),
        sync_config=SyncConfig(),
        on_login_required=deferred.append,
    )

    assert result is None
    assert deferred == []
    assert fetcher.requests == []


def test_sync_unknown_subscription_raises() -> None:
    repositories = make_repositories()

    with pytest.raises(SubscriptionNotFoundError):
        sync_feed_subscription(
            "missing",
            fetcher=FakeFeedFetcher(None),
            unit_of_work_factory=lambda: FakeUnitOfWork(repositories),
            source=make_source(),
            counter=FakeNewItemCounter(),
            sync_config=SyncConfig(),
        )


def test_purge_subscription_items_uses_prefix() -> None:
    repositories = make_repositories(
        subscriptions=[make_subscription()],
        items=[
            Item(subscription_id="sub1", source_id="tag:google.com,2005:reader/item/1"),
            Item(subscription_id="sub1", source_id="urn:other:2"),
        ],
    )
    uow = FakeUnitOfWork(repositories)

    removed = purge_subscription_items(
        "sub1",
        prefix="tag:google.com",
        unit_of_work_factory=lambda: uow,
    )

    assert removed == 1
    assert uow.committed == 1


def test_pending_edit_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("THEOLDREADER_SOURCE_ID", raising=False)
    repositories = make_repositories()
    queue = repositories.pending_edits
    assert isinstance(queue, FakePendingEditQueue)

    add_pending_edit("A", read=True, unit_of_work_factory=lambda: FakeUnitOfWork(repositories))
    assert queue.pending == {("theoldreader", "A"): True}

    remove_pending_edit("A", unit_of_work_factory=lambda: FakeUnitOfWork(repositories))
    assert queue.pending == {}


def test_subscribe_and_sync_with_sqlalchemy(
    sqlite_unit_of_work: Callable[[], SqlAlchemyFeedUnitOfWork],
) -> None:
    subscription = subscribe_feed(
        source_url="https://example.org/feed.xml",
        feed_id=FEED_ID,
        title="Example",
        unit_of_work_factory=sqlite_unit_of_work,
    )
    with sqlite_unit_of_work() as uow:
        uow.repositories.items.add(Item(subscription_id=subscription.id, source_id="A"))
        uow.repositories.items.add(Item(subscription_id=subscription.id, source_id="B"))
        uow.repositories.pending_edits.add("theoldreader", "B", read=False)
        uow.commit()

    fetcher = FakeFeedFetcher(
        atom_document(
            atom_entry("A", read=True),
            atom_entry("B", read=True),
            atom_entry("C", read=True),
        )
    )
    counter = FakeNewItemCounter()

    result = sync_feed_subscription(
        subscription.id,
        fetcher=fetcher,
        unit_of_work_factory=sqlite_unit_of_work,
        source=make_source(),
        counter=counter,
        sync_config=SyncConfig(),
    )

    assert result is not None
    assert result.changed == 2
    assert result.vetoed == 1
    assert result.unresolved == 0
    assert counter.get() == 1

    with sqlite_unit_of_work() as uow:
        stored = uow.repositories.subscriptions.get(subscription.id)
        assert stored is not None
        assert stored.metadata[FEED_ID_KEY] == FEED_ID
        states: dict[str | None, bool] = {}
        for key in uow.repositories.items.item_sequence_for(stored):
            item = uow.repositories.items.load(key)
            assert item is not None
            states[item.source_id] = item.read
            uow.repositories.items.release(item)

    assert states == {"A": True, "B": False, "C": True}


def test_sync_does_not_retain_subscription_lock() -> None:
    repositories = make_repositories(subscriptions=[make_subscription(node_id="transient")])

    sync_feed_subscription(
        "transient",
        fetcher=FakeFeedFetcher(atom_document()),
        unit_of_work_factory=lambda: FakeUnitOfWork(repositories),
        source=make_source(),
        counter=FakeNewItemCounter(),
        sync_config=SyncConfig(),
    )

    assert "transient" not in _SUBSCRIPTION_LOCKS
