"""
Base class and AuditMixin for all SQLAlchemy ORM models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

from shared.config.constants import BitLimits

# BIGINT primary keys, plain INTEGER on SQLite so rowid autoincrement works
IdType = BigInteger().with_variant(Integer, "sqlite")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from backends without tz support."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class AuditMixin:
    """
    Mixin providing audit timestamps and the admin who last touched the row.

    Fields added:
    - created_at, updated_at: Audit timestamps
    - updated_by_email: Admin identity forwarded by the auth proxy
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=utcnow, nullable=True
    )
    updated_by_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def set_updated_by(self, user_email: str | None) -> None:
        self.updated_by_email = user_email
        self.updated_at = utcnow()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


class ReferenceItemMixin(AuditMixin):
    """
    Columns shared by bit-indexed reference tables.

    bit_index is unique per table and must stay in the usable bit range.
    Rows created before bit indexes existed may still hold NULL until the
    backfill command runs.
    """

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    bit_index: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, unique=True)

    @declared_attr.directive
    def __table_args__(cls):
        return (
            CheckConstraint(
                f"bit_index IS NULL OR (bit_index >= {BitLimits.MIN_BIT_INDEX} "
                f"AND bit_index <= {BitLimits.MAX_BIT_INDEX})",
                name=f"ck_{cls.__tablename__}_bit_index_range",
            ),
        )
