"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, exists, select

from readsync.adapters.sqlalchemy.mappings import (
    item_table,
    pending_edit_table,
    subscription_table,
)
from readsync.domain.model import Item, Subscription

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.orm import Session


class SqlAlchemySubscriptionRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, subscription: Subscription) -> None:
        self.session.add(subscription)

    def get(self, node_id: str) -> Subscription | None:
        return self.session.get(Subscription, node_id)

    def list(self) -> Sequence[Subscription]:
        stmt = select(Subscription).order_by(subscription_table.c.id)
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyItemStore:
    """Item store that keeps at most the checked-out items in the session.

    ``release`` flushes pending changes of the item and evicts it from the
    session's identity map, so scanning a large item set does not accumulate
    loaded rows.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, item: Item) -> None:
        self.session.add(item)
        self.session.flush()

    def load(self, key: int) -> Item | None:
        return self.session.get(Item, key)

    def release(self, item: Item) -> None:
        if item not in self.session:
            return
        self.session.flush()
        self.session.expunge(item)

    def remove_by_surrogate_key(self, key: int) -> None:
        self.session.execute(delete(item_table).where(item_table.c.id == key))

    def item_sequence_for(self, subscription: Subscription) -> Sequence[int]:
        stmt = (
            select(item_table.c.id)
            .where(item_table.c.subscription_id == subscription.id)
            .order_by(item_table.c.id.desc())
        )
        return cast("Sequence[int]", self.session.execute(stmt).scalars().all())


class SqlAlchemyPendingEditQueue:
    """Pending upstream read-state edits, keyed by reader source and remote id."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def contains(self, source: str, remote_id: str) -> bool:
        stmt = select(
            exists()
            .where(pending_edit_table.c.source == source)
            .where(pending_edit_table.c.remote_id == remote_id)
        )
        return bool(self.session.execute(stmt).scalar())

    def add(self, source: str, remote_id: str, *, read: bool) -> None:
        self.remove(source, remote_id)
        self.session.execute(
            pending_edit_table.insert().values(
                source=source,
                remote_id=remote_id,
                read=read,
                submitted_at=datetime.now(UTC),
            )
        )

    def remove(self, source: str, remote_id: str) -> None:
        self.session.execute(
            delete(pending_edit_table)
            .where(pending_edit_table.c.source == source)
            .where(pending_edit_table.c.remote_id == remote_id)
        )


if TYPE_CHECKING:
    from readsync.domain.ports.persistence import (
        ItemStore,
        PendingEditQueue,
        SubscriptionRepository,
    )

    _session_stub = cast("Session", object())
    _subscription_repo: SubscriptionRepository = SqlAlchemySubscriptionRepository(_session_stub)
    _item_store: ItemStore = SqlAlchemyItemStore(_session_stub)
    _pending_edits: PendingEditQueue = SqlAlchemyPendingEditQueue(_session_stub)
