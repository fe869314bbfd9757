"""Application orchestration entry points."""

from __future__ import annotations

import threading
import weakref
from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from readsync.adapters.feed_content import FeedparserContentProcessor
from readsync.adapters.feedlist import get_new_item_counter
from readsync.adapters.sqlalchemy.unit_of_work import SqlAlchemyFeedUnitOfWork, is_started, startup
from readsync.adapters.theoldreader import TheOldReaderFetcher
from readsync.config import get_source_id, get_sync_config, get_theoldreader_config
from readsync.domain.item_state import ItemStateService
from readsync.domain.maintenance import purge_foreign_items
from readsync.domain.metadata import FEED_ID_KEY
from readsync.domain.model import LoginState, ReaderSource, Subscription, UpdateFlags
from readsync.domain.ports.fetching import UpdateRequest
from readsync.domain.ports.unit_of_work import FeedUnitOfWork
from readsync.domain.reconciliation import FeedSubscriptionReconciler
from readsync.domain.update_request import NotReadyError, NotReadyReason, prepare_update_request

if TYPE_CHECKING:
    from readsync.config import SyncConfig, TheOldReaderConfig
    from readsync.domain.ports.fetching import FeedContentProcessor, FeedFetcher
    from readsync.domain.ports.persistence import ItemStore
    from readsync.domain.ports.state import NewItemCounter
    from readsync.domain.reconciliation import ReconcileResult

UnitOfWorkFactory = Callable[[], FeedUnitOfWork]
ContentProcessorFactory = Callable[["ItemStore", "NewItemCounter"], "FeedContentProcessor"]


log = getLogger(__name__)

# entries vanish once no caller holds the lock
_SUBSCRIPTION_LOCKS: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
_SUBSCRIPTION_LOCKS_GUARD = threading.Lock()


class SubscriptionNotFoundError(LookupError):
    """Raised when a node id does not name a stored feed subscription."""


def _subscription_lock(node_id: str) -> threading.Lock:
    with _SUBSCRIPTION_LOCKS_GUARD:
        return _SUBSCRIPTION_LOCKS.setdefault(node_id, threading.Lock())


def _default_unit_of_work_factory() -> UnitOfWorkFactory:
    if not is_started():
        startup()
    return SqlAlchemyFeedUnitOfWork


def _require_subscription(uow: FeedUnitOfWork, node_id: str) -> Subscription:
    subscription = uow.repositories.subscriptions.get(node_id)
    if subscription is None:
        raise SubscriptionNotFoundError(f"Unknown subscription: {node_id}")
    return subscription


def build_reader_source(config: TheOldReaderConfig | None = None) -> ReaderSource:
    """Build the logged-in reader source from the configured auth token."""

    effective = config or get_theoldreader_config()
    return ReaderSource(
        id=effective.source_id,
        login_state=LoginState.ACTIVE,
        auth_header_value=effective.auth_header_value,
        host=effective.host,
    )


def subscribe_feed(
    *,
    source_url: str,
    feed_id: str,
    title: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Subscription:
    """Store a new feed subscription bound to the remote feed ``feed_id``."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    subscription = Subscription(source=source_url, title=title, metadata={FEED_ID_KEY: feed_id})
    with effective_uow() as uow:
        uow.repositories.subscriptions.add(subscription)
        uow.commit()
    log.info("Subscribed %s as %s", source_url, subscription.id)
    return subscription


def sync_feed_subscription(  # noqa: PLR0913
    node_id: str,
    *,
    fetcher: FeedFetcher | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    source: ReaderSource | None = None,
    counter: NewItemCounter | None = None,
    sync_config: SyncConfig | None = None,
    content_factory: ContentProcessorFactory | None = None,
    flags: UpdateFlags = UpdateFlags.NONE,
    on_login_required: Callable[[ReaderSource], None] | None = None,
) -> ReconcileResult | None:
    """Fetch one feed subscription and reconcile local read state with it.

    Returns ``None`` when the subscription is not ready to be fetched on its own.
    For a source that is not logged in, ``on_login_required`` receives the source
    so the caller can schedule a source-level update instead.
    """

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    reader = source or build_reader_source()
    effective_counter = counter or get_new_item_counter()
    effective_config = sync_config or get_sync_config()
    effective_content = content_factory or FeedparserContentProcessor

    with _subscription_lock(node_id):
        with effective_uow() as uow:
            subscription = _require_subscription(uow, node_id)
            try:
                request = prepare_update_request(
                    subscription,
                    reader,
                    UpdateRequest(source=subscription.source),
                )
            except NotReadyError as exc:
                if exc.reason is NotReadyReason.LOGIN_REQUIRED and on_login_required is not None:
                    on_login_required(reader)
                log.info("Not updating subscription %s: %s", node_id, exc)
                return None

        effective_fetcher = fetcher or TheOldReaderFetcher()
        log.info("Fetching subscription %s from %s", node_id, request.source)
        result = effective_fetcher(request)

        with effective_uow() as uow:
            subscription = _require_subscription(uow, node_id)
            repositories = uow.repositories
            reconciler = FeedSubscriptionReconciler(
                source=reader,
                items=repositories.items,
                pending_edits=repositories.pending_edits,
                counter=effective_counter,
                mutator=ItemStateService(effective_counter),
                content=effective_content(repositories.items, effective_counter),
                log_raw_payloads=effective_config.log_raw_payloads,
            )
            outcome = reconciler.process_update_result(subscription, result, flags)
            uow.commit()

    log.info(
        f"Finished sync of {node_id}: entries={outcome.entries}, changed={outcome.changed}, "
        f"unresolved={outcome.unresolved}, vetoed={outcome.vetoed}"
    )
    return outcome


def purge_subscription_items(
    node_id: str,
    *,
    prefix: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Remove items of ``node_id`` whose remote id the service cannot have issued."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    effective_prefix = prefix or get_sync_config().source_id_prefix
    with _subscription_lock(node_id), effective_uow() as uow:
        subscription = _require_subscription(uow, node_id)
        removed = purge_foreign_items(uow.repositories.items, subscription, prefix=effective_prefix)
        uow.commit()
    log.info("Removed %s items from subscription %s", removed, node_id)
    return removed


def add_pending_edit(
    remote_id: str,
    *,
    read: bool,
    source_id: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> None:
    """Record a local read-state change the remote service has not confirmed yet."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    effective_source = source_id or get_source_id()
    with effective_uow() as uow:
        uow.repositories.pending_edits.add(effective_source, remote_id, read=read)
        uow.commit()


def remove_pending_edit(
    remote_id: str,
    *,
    source_id: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> None:
    """Drop a pending edit once the remote service has confirmed it."""

    effective_uow = unit_of_work_factory or _default_unit_of_work_factory()
    effective_source = source_id or get_source_id()
    with effective_uow() as uow:
        uow.repositories.pending_edits.remove(effective_source, remote_id)
        uow.commit()
