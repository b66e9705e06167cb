"""Feedback Collector database models."""

from feedback_collector.models.base import Base
from feedback_collector.models.feedback import Feedback, FeedbackCategory

__all__ = [
    "Base",
    "Feedback",
    "FeedbackCategory",
]
