"""
Batch Cooking Models: BatchCookingSession, BatchCookingSessionReview.

Sessions are generated by the consumer app. A session regenerated from
another one points at it through parent_id; sessions with no parent are
the originals.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import GenerationStatus
from .base import AuditMixin, Base, IdType, utcnow
from .subscription import UserProfile


def _status_column():
    return mapped_column(String(16), default=GenerationStatus.PENDING, nullable=False)


class BatchCookingSession(AuditMixin, Base):
    """
    One generated cooking session.
    recipes, ingredients and the step lists are stored as generated (JSON).
    """

    __tablename__ = "batch_cooking_sessions"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    meal_count: Mapped[int] = mapped_column(Integer, nullable=False)
    people_count: Mapped[int] = mapped_column(Integer, nullable=False)
    recipe_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    recipes: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    ingredients: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    detailed_ingredients: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    starting_steps: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    cooking_steps: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    assembly_steps: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    meals: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    cooking_steps_text: Mapped[Optional[str]] = mapped_column(Text)

    recipe_generation_status: Mapped[str] = _status_column()
    ingredient_generation_status: Mapped[str] = _status_column()
    cooking_step_generation_status: Mapped[str] = _status_column()
    assembly_step_generation_status: Mapped[str] = _status_column()

    is_cooked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    cooked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    time_saved: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    money_saved: Mapped[float] = mapped_column(Float, default=0, nullable=False)

    # Generator inputs
    is_original: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    seed: Mapped[Optional[str]] = mapped_column(String(64))
    algo_version: Mapped[Optional[str]] = mapped_column(String(32))
    parent_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("batch_cooking_sessions.id", ondelete="SET NULL"), index=True
    )
    created_by: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("user_profiles.id", ondelete="SET NULL"), index=True
    )


class BatchCookingSessionReview(Base):
    """A user's rating of a session they cooked."""

    __tablename__ = "batch_cooking_session_reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_session_review_rating_range"),
    )

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text)
    session_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("batch_cooking_sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("user_profiles.id", ondelete="SET NULL"), index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

    session: Mapped["BatchCookingSession"] = relationship()
    user_profile: Mapped[Optional["UserProfile"]] = relationship()
