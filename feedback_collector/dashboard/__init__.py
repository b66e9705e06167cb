"""Feedback dashboard: view state and page routes."""

from feedback_collector.dashboard.state import Dashboard, FeedbackForm, Filters, Pagination, ViewMode

__all__ = ["Dashboard", "FeedbackForm", "Filters", "Pagination", "ViewMode"]
