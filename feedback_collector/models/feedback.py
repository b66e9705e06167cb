"""Feedback model for user feedback submissions."""

import enum

from sqlalchemy import CheckConstraint, Enum, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from feedback_collector.models.base import Base


class FeedbackCategory(str, enum.Enum):
    """Fixed set of feedback categories."""
    GENERAL = "general"
    BUG = "bug"
    FEATURE = "feature"
    COMPLAINT = "complaint"
    COMPLIMENT = "compliment"


DEFAULT_RATING = 5
MIN_RATING = 1
MAX_RATING = 5


class Feedback(Base):
    """User feedback submission."""
    
    __tablename__ = "feedback"
    __table_args__ = (
        CheckConstraint(
            f"rating >= {MIN_RATING} AND rating <= {MAX_RATING}",
            name="ck_feedback_rating_range",
        ),
        Index("ix_feedback_created_at", "created_at"),
        Index("ix_feedback_category", "category"),
    )
    
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, default=DEFAULT_RATING, nullable=False)
    # Stored by value ("bug"), not by member name
    category: Mapped[FeedbackCategory] = mapped_column(
        Enum(
            FeedbackCategory,
            name="feedback_category",
            values_callable=lambda members: [m.value for m in members],
        ),
        default=FeedbackCategory.GENERAL,
        nullable=False,
    )
    
    def __repr__(self) -> str:
        return f"<Feedback {self.email} [{self.category.value}] ({self.created_at})>"
