"""
Subscription Models: PromoCode, UserProfile, SubscriptionAuditLog.

User profiles are written by the consumer app; the admin API only reads
them and edits premium_sub_end_at.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import AuditMixin, Base, IdType, utcnow


class PromoCode(AuditMixin, Base):
    __tablename__ = "promo_codes"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    code: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    premium_end_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), index=True)
    used_by_user_id: Mapped[Optional[str]] = mapped_column(String(36))


class UserProfile(AuditMixin, Base):
    """
    App user with onboarding answers.
    diets, allergies, kitchen_equipment and batch_cooking_goals hold id lists.
    """

    __tablename__ = "user_profiles"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    # Identity from the auth provider
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, unique=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    firstname: Mapped[Optional[str]] = mapped_column(String(100))
    premium_sub_end_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    diets: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    allergies: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    kitchen_equipment: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    batch_cooking_goals: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    batch_cooking_frequency: Mapped[Optional[int]] = mapped_column(Integer)
    batch_cooking_session_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    meal_people_quantity: Mapped[Optional[int]] = mapped_column(Integer)
    appetite: Mapped[Optional[str]] = mapped_column(String(2))

    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class SubscriptionAuditLog(Base):
    """One row per premium change made from the dashboard."""

    __tablename__ = "subscription_audit_logs"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    admin_id: Mapped[Optional[str]] = mapped_column(String(64))
    admin_email: Mapped[Optional[str]] = mapped_column(String(255))
    action: Mapped[str] = mapped_column(String(32), nullable=False)
    previous_end_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    new_end_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    note: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
