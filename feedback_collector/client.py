"""HTTP gateway the dashboard uses to talk to the feedback API."""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional

import httpx
from pydantic import ValidationError

from feedback_collector.schemas import (
    CreateFeedbackResponse,
    FeedbackListResponse,
    FeedbackOut,
    FieldError,
    MessageResponse,
)

logger = logging.getLogger("FeedbackCollector.client")

FEEDBACK_PATH = "/api/feedback"


class FeedbackApiError(Exception):
    """
    A failed API call.

    ``payload`` is the JSON body the server sent (``{"message": ...}`` or
    ``{"errors": [...]}``). ``status_code`` is None when the server could not
    be reached or answered with something that is not JSON.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}

    @property
    def is_transport_error(self) -> bool:
        return self.status_code is None

    @property
    def errors(self) -> List[FieldError]:
        raw = self.payload.get("errors") or []
        errors = []
        for item in raw:
            if isinstance(item, dict):
                errors.append(FieldError(
                    field=str(item.get("field") or item.get("key") or "body"),
                    msg=str(item.get("msg") or item.get("message") or "Invalid value"),
                    value=item.get("value"),
                ))
        return errors

    @property
    def field_errors(self) -> Dict[str, str]:
        """First message per field, for inline rendering."""
        result: Dict[str, str] = {}
        for error in self.errors:
            result.setdefault(error.field, error.msg)
        return result


def build_query_params(filters: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Query-string parameters with every falsy value left out."""
    return {key: str(value) for key, value in (filters or {}).items() if value}


@dataclass
class FeedbackGateway:
    """Calls to the feedback API over a shared httpx client."""

    http: httpx.AsyncClient

    async def list_feedback(self, filters: Optional[Mapping[str, Any]] = None) -> FeedbackListResponse:
        body = await self._request(
            "GET", FEEDBACK_PATH, "Failed to load feedback", params=build_query_params(filters)
        )
        return self._parse(FeedbackListResponse, body)

    async def create_feedback(self, data: Mapping[str, Any]) -> FeedbackOut:
        body = await self._request("POST", FEEDBACK_PATH, "Failed to submit feedback", json=dict(data))
        return self._parse(CreateFeedbackResponse, body).feedback

    async def delete_feedback(self, feedback_id: str) -> str:
        body = await self._request(
            "DELETE", f"{FEEDBACK_PATH}/{feedback_id}", "Failed to delete feedback"
        )
        return self._parse(MessageResponse, body).message

    async def _request(self, method: str, url: str, failure: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise FeedbackApiError(f"{failure}: could not reach the server") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            payload = body if isinstance(body, dict) else {}
            message = payload.get("message") or failure
            raise FeedbackApiError(message, status_code=response.status_code, payload=payload)

        if not isinstance(body, dict):
            raise FeedbackApiError(f"{failure}: malformed response", payload={})
        return body

    @staticmethod
    def _parse(model, body: Dict[str, Any]):
        try:
            return model.model_validate(body)
        except ValidationError as e:
            raise FeedbackApiError("Malformed response from server") from e


@asynccontextmanager
async def open_gateway(
    base_url: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[FeedbackGateway]:
    """Gateway bound to ``base_url`` whose HTTP client is closed on exit."""
    async with httpx.AsyncClient(base_url=base_url, transport=transport) as http:
        yield FeedbackGateway(http)
