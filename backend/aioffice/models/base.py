"""Declarative base, portable column types and shared mixins.

Production runs on PostgreSQL (native UUID and JSONB); the test suite
runs on SQLite, where UUIDs are stored as 36-character strings and JSON
as text. Models only ever see ``uuid.UUID`` and plain Python structures.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Dialect, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column
from sqlalchemy.types import CHAR, TypeDecorator

JSONType = JSON().with_variant(JSONB(), "postgresql")


def utc_now() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(UTC)


class GUID(TypeDecorator[uuid.UUID]):
    """UUID column: native on PostgreSQL, CHAR(36) elsewhere.

    Bind parameters may be ``uuid.UUID`` or any string ``uuid.UUID``
    accepts; results are always ``uuid.UUID``.
    """

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> Any:
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value: uuid.UUID | str | None, dialect: Dialect) -> Any:
        if value is None:
            return None
        as_uuid = value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
        return as_uuid if dialect.name == "postgresql" else str(as_uuid)

    def process_result_value(
        self,
        value: Any,
        dialect: Dialect,  # noqa: ARG002 - Part of SQLAlchemy API
    ) -> uuid.UUID | None:
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))


class Base(DeclarativeBase):
    """Declarative base for workflows and runs."""


class UUIDMixin:
    """Client-generated UUID primary key, so ids exist before flush."""

    @declared_attr
    def id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(GUID(), primary_key=True, default=uuid.uuid4)


class TimestampMixin:
    """``created_at`` set on insert and ``updated_at`` refreshed on update."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            nullable=False,
            default=utc_now,
            server_default=func.now(),
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            nullable=False,
            default=utc_now,
            onupdate=utc_now,
            server_default=func.now(),
        )


__all__ = [
    "GUID",
    "Base",
    "JSONType",
    "TimestampMixin",
    "UUIDMixin",
    "utc_now",
]
