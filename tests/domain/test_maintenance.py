from __future__ import annotations

from readsync.domain.maintenance import purge_foreign_items
from readsync.domain.model import Item
from tests.helpers.feeds import FakeItemStore, make_subscription


def test_purge_removes_items_with_foreign_source_ids() -> None:
    store = FakeItemStore(
        [
            Item(subscription_id="sub1", source_id="tag:google.com,2005:reader/item/1"),
            Item(subscription_id="sub1", source_id="https://example.org/post/2"),
            Item(subscription_id="sub1", source_id=None),
            Item(subscription_id="other", source_id="https://example.org/post/4"),
        ]
    )

    removed = purge_foreign_items(store, make_subscription(), prefix="tag:google.com")

    assert removed == 1
    assert store.removed == [2]
    assert sorted(store.items) == [1, 3, 4]
    assert store.checked_out == set()
