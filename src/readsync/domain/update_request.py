"""Prepare fetch requests for TheOldReader feed subscriptions."""

from __future__ import annotations

from dataclasses import replace
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from readsync.domain.metadata import FEED_ID_KEY, metadata_get

if TYPE_CHECKING:
    from readsync.domain.model import ReaderSource, Subscription
    from readsync.domain.ports.fetching import UpdateRequest

log = getLogger(__name__)


class NotReadyReason(StrEnum):
    LOGIN_REQUIRED = "login_required"
    MISSING_FEED_ID = "missing_feed_id"


class NotReadyError(RuntimeError):
    """Raised when a subscription cannot be fetched on its own yet."""

    def __init__(self, message: str, *, reason: NotReadyReason) -> None:
        super().__init__(message)
        self.reason = reason


def atom_feed_url(host: str, feed_id: str) -> str:
    return f"http://{host}/reader/atom/{feed_id}"


def prepare_update_request(
    subscription: Subscription,
    source: ReaderSource,
    request: UpdateRequest,
) -> UpdateRequest:
    """Point ``request`` at the subscription's Atom stream and attach credentials.

    Raises ``NotReadyError`` when the source is not logged in (the caller should
    update the whole source instead, which logs in first) or when the
    subscription lacks its remote feed id.
    """

    log.debug("Preparing TheOldReader feed subscription %s for update", subscription.id)
    if not source.logged_in:
        raise NotReadyError(
            f"Source {source.id} is not logged in",
            reason=NotReadyReason.LOGIN_REQUIRED,
        )

    feed_id = metadata_get(subscription, FEED_ID_KEY)
    if not feed_id:
        log.warning(
            "Skipping TheOldReader feed '%s' (%s) without id!",
            subscription.source,
            subscription.id,
        )
        raise NotReadyError(
            f"Subscription {subscription.id} has no remote feed id",
            reason=NotReadyReason.MISSING_FEED_ID,
        )

    log.debug("Setting credentials for TheOldReader subscription '%s'", subscription.source)
    return replace(
        request,
        source=atom_feed_url(source.host, feed_id),
        auth_value=source.auth_header_value,
    )
