"""Dashboard view state: submission form, filter bar, paginated list and delete confirmation."""

import enum
import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional

from feedback_collector.client import FeedbackApiError, FeedbackGateway
from feedback_collector.config import Settings
from feedback_collector.dashboard.debounce import Debouncer
from feedback_collector.dashboard.display import category_color, category_label, format_timestamp
from feedback_collector.models.feedback import DEFAULT_RATING, MAX_RATING, FeedbackCategory
from feedback_collector.query import ALL_CATEGORIES, DEFAULT_LIMIT
from feedback_collector.schemas import FeedbackOut, validate_feedback

logger = logging.getLogger("FeedbackCollector.dashboard")

DEFAULT_SEARCH_DEBOUNCE = 0.5


class ViewMode(str, enum.Enum):
    """What the dashboard is currently showing."""
    LOADING = "loading"
    IDLE = "idle"
    FORM_OPEN = "formOpen"
    DELETE_CONFIRM = "deleteConfirm"


@dataclass
class Filters:
    search: str = ""
    category: str = ALL_CATEGORIES
    start_date: str = ""
    end_date: str = ""

    def as_params(self) -> Dict[str, str]:
        return {
            "search": self.search,
            "category": self.category,
            "startDate": self.start_date,
            "endDate": self.end_date,
        }


# Filter names as they appear in the UI and on the wire
FILTER_FIELDS = {
    "search": "search",
    "category": "category",
    "startDate": "start_date",
    "endDate": "end_date",
    **{f.name: f.name for f in fields(Filters)},
}


@dataclass
class Pagination:
    current_page: int = 1
    total_pages: int = 1
    total: int = 0

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def empty_form() -> Dict[str, Any]:
    return {
        "name": "",
        "email": "",
        "message": "",
        "rating": DEFAULT_RATING,
        "category": FeedbackCategory.GENERAL.value,
    }


class FeedbackForm:
    """Submission form with the same validation rules the API applies."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.data: Dict[str, Any] = empty_form()
        self.errors: Dict[str, str] = {}
        self.is_submitting = False

    def set_field(self, name: str, value: Any) -> None:
        if name not in self.data:
            raise KeyError(f"Unknown form field: {name}")
        self.data[name] = value
        # Clear the error as soon as the user edits the field
        self.errors.pop(name, None)

    def set_rating(self, rating: int) -> None:
        self.set_field("rating", int(rating))

    def validate(self) -> bool:
        _, errors = validate_feedback(self.data)
        self.errors = {}
        for error in errors:
            self.errors.setdefault(error.field, error.msg)
        return not self.errors

    async def submit(self, gateway: FeedbackGateway) -> Optional[FeedbackOut]:
        """Validate locally, then send. Returns the created record or None."""
        if not self.validate():
            return None

        self.is_submitting = True
        try:
            created = await gateway.create_feedback(self.data)
        except FeedbackApiError as e:
            logger.warning(f"Feedback submission failed: {e.message}")
            self.errors = dict(e.field_errors)
            self.errors["submit"] = e.message
            return None
        finally:
            self.is_submitting = False

        self.reset()
        return created


class Dashboard:
    """
    Headless dashboard view.

    Category and date changes re-fetch page 1 at once; search changes are
    debounced. Only the most recently issued list request may update the view,
    so a slow earlier response never overwrites a newer one.
    """

    def __init__(
        self,
        gateway: FeedbackGateway,
        page_size: int = DEFAULT_LIMIT,
        search_debounce: float = DEFAULT_SEARCH_DEBOUNCE,
    ):
        self.gateway = gateway
        self.page_size = page_size
        self.feedback: List[FeedbackOut] = []
        self.is_loading = True
        self.list_error: Optional[str] = None
        self.action_error: Optional[str] = None
        self.filters = Filters()
        self.pagination = Pagination()
        self.form = FeedbackForm()
        self.form_open = False
        self.delete_target: Optional[str] = None
        self._search_debouncer = Debouncer(search_debounce)
        self._latest_request = 0

    @classmethod
    def from_settings(cls, gateway: FeedbackGateway, settings: Settings) -> "Dashboard":
        return cls(
            gateway,
            page_size=settings.page_size,
            search_debounce=settings.search_debounce_ms / 1000,
        )

    @property
    def mode(self) -> ViewMode:
        if self.delete_target is not None:
            return ViewMode.DELETE_CONFIRM
        if self.form_open:
            return ViewMode.FORM_OPEN
        if self.is_loading:
            return ViewMode.LOADING
        return ViewMode.IDLE

    @property
    def search_pending(self) -> bool:
        return self._search_debouncer.pending

    # --- List ---

    async def mount(self) -> None:
        await self.load(1)

    async def load(self, page: int = 1) -> bool:
        """Fetch one page with the current filters. Returns True if the view was updated."""
        self._latest_request += 1
        request_id = self._latest_request
        self.is_loading = True

        params = {**self.filters.as_params(), "page": page, "limit": self.page_size}
        try:
            response = await self.gateway.list_feedback(params)
        except FeedbackApiError as e:
            logger.warning(f"Error loading feedback: {e.message}")
            if request_id == self._latest_request:
                # Previous list content stays on screen
                self.list_error = e.message
                self.is_loading = False
            return False

        if request_id != self._latest_request:
            logger.debug(f"Discarding stale response for page {page}")
            return False

        self.feedback = list(response.feedback)
        self.pagination = Pagination(
            current_page=response.current_page,
            total_pages=response.total_pages,
            total=response.total,
        )
        self.list_error = None
        self.is_loading = False
        return True

    async def set_filter(self, name: str, value: str) -> None:
        attr = FILTER_FIELDS[name]
        setattr(self.filters, attr, value)
        self.pagination.current_page = 1

        if attr == "search":
            self._search_debouncer.call(self.load, 1)
        else:
            # The immediate fetch already includes the latest search text
            self._search_debouncer.cancel()
            await self.load(1)

    async def clear_filters(self) -> None:
        self._search_debouncer.cancel()
        self.filters = Filters()
        self.pagination.current_page = 1
        await self.load(1)

    async def go_to_page(self, page: int) -> bool:
        """Out-of-range pages are ignored."""
        if not 1 <= page <= self.pagination.total_pages:
            return False
        await self.load(page)
        return True

    async def next_page(self) -> bool:
        return await self.go_to_page(self.pagination.current_page + 1)

    async def previous_page(self) -> bool:
        return await self.go_to_page(self.pagination.current_page - 1)

    # --- Submission form ---

    def open_form(self) -> None:
        self.form_open = True

    def close_form(self) -> None:
        self.form_open = False

    async def submit_form(self) -> Optional[FeedbackOut]:
        created = await self.form.submit(self.gateway)
        if created is None:
            return None
        self.form_open = False
        # The new record is the newest, so it shows on page 1
        await self.load(1)
        return created

    # --- Delete confirmation ---

    def request_delete(self, feedback_id: str) -> None:
        self.action_error = None
        self.delete_target = str(feedback_id)

    def cancel_delete(self) -> None:
        self.delete_target = None

    async def confirm_delete(self) -> bool:
        target = self.delete_target
        if target is None:
            return False
        try:
            await self.gateway.delete_feedback(target)
        except FeedbackApiError as e:
            logger.warning(f"Error deleting feedback {target}: {e.message}")
            self.action_error = "Failed to delete feedback. Please try again."
            self.delete_target = None
            return False

        self.delete_target = None
        # No walk-back: the current page may now be short or empty
        await self.load(self.pagination.current_page)
        return True

    # --- Rendering ---

    def rows(self) -> List[Dict[str, Any]]:
        """Display-ready rows for the current page."""
        return [
            {
                "id": str(item.id),
                "name": item.name,
                "email": item.email,
                "message": item.message,
                "rating": item.rating,
                "stars": "★" * item.rating + "☆" * (MAX_RATING - item.rating),
                "category": item.category.value,
                "category_label": category_label(item.category),
                "category_color": category_color(item.category),
                "created": format_timestamp(item.created_at),
            }
            for item in self.feedback
        ]

    async def settle(self) -> None:
        """Wait for a pending debounced search to run."""
        await self._search_debouncer.wait()

    def close(self) -> None:
        self._search_debouncer.cancel()
