"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import FeedContentProcessor, FeedFetcher, UpdateRequest, UpdateResult
from .persistence import (
    ItemStore,
    MutablePendingEditQueue,
    PendingEditQueue,
    SubscriptionRepository,
)
from .state import NewItemCounter, ReadStateMutator
from .unit_of_work import FeedRepositories, FeedUnitOfWork, RepositoryCollection, UnitOfWork

__all__ = [
    "FeedContentProcessor",
    "FeedFetcher",
    "FeedRepositories",
    "FeedUnitOfWork",
    "ItemStore",
    "MutablePendingEditQueue",
    "NewItemCounter",
    "PendingEditQueue",
    "ReadStateMutator",
    "RepositoryCollection",
    "SubscriptionRepository",
    "UnitOfWork",
    "UpdateRequest",
    "UpdateResult",
]
