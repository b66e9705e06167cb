"""Translate list filter parameters into a store query and a page window."""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import List, Optional

from sqlalchemy import ColumnElement, false, or_

from feedback_collector.models import Feedback, FeedbackCategory

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
ALL_CATEGORIES = "all"


@dataclass(frozen=True)
class PageWindow:
    """Which slice of the sorted, filtered result set to return."""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


@dataclass(frozen=True)
class FeedbackFilter:
    """Parsed filter; None means the constraint is not applied."""
    search: Optional[str] = None
    category: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def conditions(self) -> List[ColumnElement[bool]]:
        """SQL predicates for this filter, combined with AND by the store."""
        clauses: List[ColumnElement[bool]] = []

        if self.search:
            clauses.append(or_(
                Feedback.name.icontains(self.search, autoescape=True),
                Feedback.email.icontains(self.search, autoescape=True),
                Feedback.message.icontains(self.search, autoescape=True),
            ))

        if self.category:
            try:
                clauses.append(Feedback.category == FeedbackCategory(self.category))
            except ValueError:
                # Unknown categories match nothing rather than everything
                clauses.append(false())

        if self.start is not None:
            clauses.append(Feedback.created_at >= self.start)
        if self.end is not None:
            clauses.append(Feedback.created_at <= self.end)

        return clauses


@dataclass(frozen=True)
class FeedbackQuery:
    """Everything the store needs to answer a list request."""
    filter: FeedbackFilter
    window: PageWindow

    def conditions(self) -> List[ColumnElement[bool]]:
        return self.filter.conditions()


def _blank(raw: Optional[str]) -> bool:
    return raw is None or not str(raw).strip()


def coerce_positive_int(raw, default: int) -> int:
    """Parse a positive integer, falling back to the default on anything else."""
    if _blank(raw):
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if value > 0 else default


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date_bound(raw: Optional[str]) -> Optional[datetime]:
    """Inclusive date bound in UTC; a bare date means midnight UTC of that day."""
    if _blank(raw):
        return None
    text = str(raw).strip()
    try:
        if len(text) == 10:
            return datetime.combine(date.fromisoformat(text), time.min, tzinfo=timezone.utc)
        return _to_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return None


def build_feedback_query(
    search: Optional[str] = None,
    category: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
) -> FeedbackQuery:
    """Build the store query for a list request from raw query-string values."""
    category_value = None if _blank(category) else category.strip()
    if category_value == ALL_CATEGORIES:
        category_value = None

    return FeedbackQuery(
        filter=FeedbackFilter(
            search=None if _blank(search) else search.strip(),
            category=category_value,
            start=parse_date_bound(start_date),
            end=parse_date_bound(end_date),
        ),
        window=PageWindow(
            page=coerce_positive_int(page, DEFAULT_PAGE),
            limit=coerce_positive_int(limit, DEFAULT_LIMIT),
        ),
    )
