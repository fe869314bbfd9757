"""Locally persisted feed items."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class Item:
    """A feed item keyed by a locally assigned surrogate ``id``.

    ``source_id`` is the identifier the remote service uses for the same entry and
    may be absent for items that never came from the remote service.
    """

    subscription_id: str
    source_id: str | None = None
    title: str | None = None
    link: str | None = None
    read: bool = False
    new: bool = True
    published_at: datetime | None = None
    id: int | None = None
