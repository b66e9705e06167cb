"""Feedback API endpoints."""

import logging
from typing import Annotated, Any, Dict, Optional

from litestar import Controller, Request, delete, get, post
from litestar.exceptions import (
    InternalServerException,
    NotFoundException,
    SerializationException,
    ValidationException,
)
from litestar.params import Parameter
from litestar.response import Response
from litestar.status_codes import HTTP_200_OK, HTTP_201_CREATED

from feedback_collector.query import build_feedback_query
from feedback_collector.schemas import (
    CreateFeedbackResponse,
    FeedbackListResponse,
    FeedbackOut,
    MessageResponse,
    validate_feedback,
)
from feedback_collector.store import FeedbackStore, StoreError
from feedback_collector.utils.logging import error_log

logger = logging.getLogger("FeedbackCollector.feedback")


class FeedbackNotFoundException(NotFoundException):
    """The referenced feedback record does not exist."""


class FeedbackController(Controller):
    """List, create and delete feedback submissions."""

    path = "/api/feedback"
    tags = ["feedback"]

    @get("/")
    async def list_feedback(
        self,
        store: FeedbackStore,
        search: Optional[str] = None,
        category: Optional[str] = None,
        start_date: Annotated[Optional[str], Parameter(query="startDate")] = None,
        end_date: Annotated[Optional[str], Parameter(query="endDate")] = None,
        page: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Filtered, paginated feedback, newest first."""
        query = build_feedback_query(
            search=search,
            category=category,
            start_date=start_date,
            end_date=end_date,
            page=page,
            limit=limit,
        )
        try:
            records, total = await store.find(query)
        except StoreError as e:
            error_log(
                "Failed to fetch feedback",
                exc=e,
                context={"search": search, "category": category, "page": query.window.page},
            )
            raise InternalServerException(detail="Server error while fetching feedback") from e

        return FeedbackListResponse(
            feedback=[FeedbackOut.model_validate(r) for r in records],
            total_pages=query.window.total_pages(total),
            current_page=query.window.page,
            total=total,
        ).to_wire()

    @post("/")
    async def create_feedback(
        self,
        request: Request,
        store: FeedbackStore,
    ) -> Response[Dict[str, Any]]:
        """Validate and store a new submission."""
        # The raw body is validated here so every field error is reported together
        try:
            data = await request.json()
        except SerializationException:
            data = None

        submission, errors = validate_feedback(data)
        if errors:
            logger.info(f"Rejected feedback submission: {', '.join(e.field for e in errors)}")
            raise ValidationException(
                detail="Feedback validation failed",
                extra=[e.model_dump(mode="json") for e in errors],
            )

        try:
            feedback = await store.add(submission)
        except StoreError as e:
            error_log(
                "Failed to create feedback",
                exc=e,
                context={"email": submission.email, "category": submission.category.value},
            )
            raise InternalServerException(detail="Server error while creating feedback") from e

        logger.info(f"Feedback {feedback.id} submitted from {feedback.email}")
        body = CreateFeedbackResponse(
            message="Feedback submitted successfully",
            feedback=FeedbackOut.model_validate(feedback),
        )
        return Response(content=body.to_wire(), status_code=HTTP_201_CREATED)

    @delete("/{feedback_id:str}", status_code=HTTP_200_OK)
    async def delete_feedback(
        self,
        feedback_id: str,
        store: FeedbackStore,
    ) -> Dict[str, Any]:
        """Delete a submission permanently."""
        try:
            deleted = await store.delete(feedback_id)
        except StoreError as e:
            error_log("Failed to delete feedback", exc=e, context={"feedback_id": feedback_id})
            raise InternalServerException(detail="Server error while deleting feedback") from e

        if not deleted:
            raise FeedbackNotFoundException(detail="Feedback not found")

        logger.info(f"Feedback {feedback_id} deleted")
        return MessageResponse(message="Feedback deleted successfully").to_wire()
