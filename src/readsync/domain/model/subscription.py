"""Feed subscriptions and the reader account that owns them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import uuid4

from readsync.domain.model.enums import LoginState

if TYPE_CHECKING:
    from datetime import datetime

DEFAULT_SERVICE_HOST = "theoldreader.com"


def new_node_id() -> str:
    return uuid4().hex[:12]


@dataclass(eq=False, kw_only=True)
class Subscription:
    """One remote feed binding in the local feed list.

    ``metadata`` holds string values keyed by name. Keys the feed parser does not
    know about (such as the remote feed id) are dropped whenever the feed header
    is refreshed, so callers that rely on them must carry them across refreshes.
    """

    id: str = field(default_factory=new_node_id)
    source: str
    title: str | None = None
    metadata: dict[str, str] = field(default_factory=dict[str, str])
    updated_at: datetime | None = None


@dataclass(eq=False, kw_only=True)
class ReaderSource:
    """The synchronization account node feed subscriptions belong to."""

    id: str
    login_state: LoginState = LoginState.NONE
    auth_header_value: str | None = None
    host: str = DEFAULT_SERVICE_HOST

    @property
    def logged_in(self) -> bool:
        return self.login_state is not LoginState.NONE and bool(self.auth_header_value)
