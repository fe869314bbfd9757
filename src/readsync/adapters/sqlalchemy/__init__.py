"""SQLAlchemy adapter package for readsync."""

from __future__ import annotations

from .mappings import mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyItemStore,
    SqlAlchemyPendingEditQueue,
    SqlAlchemySubscriptionRepository,
)
from .unit_of_work import SqlAlchemyFeedUnitOfWork, shutdown, startup

__all__ = [
    "SqlAlchemyFeedUnitOfWork",
    "SqlAlchemyItemStore",
    "SqlAlchemyPendingEditQueue",
    "SqlAlchemySubscriptionRepository",
    "mapper_registry",
    "start_mappers",
    "shutdown",
    "startup",
]
