"""Liveness endpoint."""

from datetime import datetime, timezone
from typing import Any, Dict

from litestar import get

from feedback_collector.schemas import HealthResponse


@get("/api/health", sync_to_thread=False)
def health() -> Dict[str, Any]:
    """Report that the API process is up. Does not check the database."""
    return HealthResponse(
        message="Feedback Collector API is running!",
        timestamp=datetime.now(timezone.utc),
    ).to_wire()
