"""Dashboard page routes."""

from litestar import get
from litestar.response import Template

from feedback_collector.config import Settings
from feedback_collector.dashboard.display import category_options
from feedback_collector.schemas import (
    EMAIL_PATTERN,
    EMAIL_MAX_LENGTH,
    MESSAGE_MAX_LENGTH,
    MESSAGE_MIN_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
)


@get("/", sync_to_thread=False, include_in_schema=False)
def dashboard_page(settings: Settings) -> Template:
    """Feedback dashboard (served at root)."""
    return Template(
        template_name="dashboard/index.html",
        context={
            "categories": category_options(),
            "page_size": settings.page_size,
            "search_debounce_ms": settings.search_debounce_ms,
            "name_min_length": NAME_MIN_LENGTH,
            "name_max_length": NAME_MAX_LENGTH,
            "email_max_length": EMAIL_MAX_LENGTH,
            "message_min_length": MESSAGE_MIN_LENGTH,
            "message_max_length": MESSAGE_MAX_LENGTH,
            "email_pattern": EMAIL_PATTERN.pattern,
        },
    )


routes = [dashboard_page]
