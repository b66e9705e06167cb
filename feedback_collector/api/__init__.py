"""Feedback Collector API routes."""

from feedback_collector.api.feedback import FeedbackController, FeedbackNotFoundException
from feedback_collector.api.health import health

__all__ = ["FeedbackController", "FeedbackNotFoundException", "health"]
