"""Presentation helpers for feedback records."""

from datetime import datetime
from typing import Dict, List

from feedback_collector.models import FeedbackCategory

CATEGORY_LABELS = {
    FeedbackCategory.GENERAL.value: "General",
    FeedbackCategory.BUG.value: "Bug Report",
    FeedbackCategory.FEATURE.value: "Feature Request",
    FeedbackCategory.COMPLAINT.value: "Complaint",
    FeedbackCategory.COMPLIMENT.value: "Compliment",
}

CATEGORY_COLORS = {
    FeedbackCategory.GENERAL.value: "blue",
    FeedbackCategory.BUG.value: "red",
    FeedbackCategory.FEATURE.value: "green",
    FeedbackCategory.COMPLAINT.value: "orange",
    FeedbackCategory.COMPLIMENT.value: "purple",
}
DEFAULT_COLOR = "blue"


def _key(category) -> str:
    return category.value if isinstance(category, FeedbackCategory) else str(category)


def category_color(category) -> str:
    return CATEGORY_COLORS.get(_key(category), DEFAULT_COLOR)


def category_label(category) -> str:
    key = _key(category)
    return CATEGORY_LABELS.get(key, key.capitalize())


def category_options() -> List[Dict[str, str]]:
    """Select options in display order."""
    return [
        {"value": c.value, "label": category_label(c), "color": category_color(c)}
        for c in FeedbackCategory
    ]


def format_timestamp(value: datetime) -> str:
    """E.g. ``Mar 04, 2025, 02:15 PM``."""
    return value.strftime("%b %d, %Y, %I:%M %p")
