"""Ports for fetching and processing remote feed documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from readsync.domain.model import Subscription, UpdateFlags


@dataclass(slots=True)
class UpdateRequest:
    """Where and how to fetch one subscription's remote document."""

    source: str
    auth_value: str | None = None


@dataclass(slots=True)
class UpdateResult:
    """A completed fetch with its body fully materialized in memory."""

    source: str
    data: bytes | None = None
    http_status: int = 200


@runtime_checkable
class FeedFetcher(Protocol):
    """Callable port for retrieving a remote feed document."""

    def __call__(self, request: UpdateRequest) -> UpdateResult: ...


@runtime_checkable
class FeedContentProcessor(Protocol):
    """Generic feed parsing step that creates items and refreshes the feed header."""

    def process(
        self,
        subscription: Subscription,
        result: UpdateResult,
        flags: UpdateFlags,
    ) -> None: ...


__all__ = [
    "FeedContentProcessor",
    "FeedFetcher",
    "UpdateRequest",
    "UpdateResult",
]
