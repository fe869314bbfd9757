"""SQLAlchemy mapping metadata for the readsync domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
    orm,
)
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import configure_mappers

from readsync.domain.model import Item, Subscription

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

subscription_table = Table(
    "subscription",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("source", String, nullable=False),
    Column("title", String, nullable=True),
    Column(
        "metadata_json",
        MutableDict.as_mutable(JSON()),
        key="metadata",
        nullable=False,
        default=dict,
    ),
    Column("updated_at", UTCDateTime(), nullable=True),
)

item_table = Table(
    "item",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "subscription_id",
        String,
        ForeignKey("subscription.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("source_id", String, nullable=True),
    Column("title", String, nullable=True),
    Column("link", String, nullable=True),
    Column("read", Boolean, nullable=False, default=False),
    Column("new", Boolean, nullable=False, default=True),
    Column("published_at", UTCDateTime(), nullable=True),
    Index("ix_item_subscription_id", "subscription_id"),
)

pending_edit_table = Table(
    "pending_edit",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("source", String, nullable=False),
    Column("remote_id", String, nullable=False),
    Column("read", Boolean, nullable=False),
    Column("submitted_at", UTCDateTime(), nullable=False),
    UniqueConstraint("source", "remote_id"),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Subscription, subscription_table)
    mapper_registry.map_imperatively(Item, item_table)

    configure_mappers()
    return mapper_registry

