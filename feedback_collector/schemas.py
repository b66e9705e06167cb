"""Request/response schemas shared by the API, the client gateway and the dashboard."""

import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from feedback_collector.models.feedback import (
    DEFAULT_RATING,
    MAX_RATING,
    MIN_RATING,
    FeedbackCategory,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

NAME_MIN_LENGTH = 2
MESSAGE_MIN_LENGTH = 10
# Column limits from the feedback table
NAME_MAX_LENGTH = 200
EMAIL_MAX_LENGTH = 200
MESSAGE_MAX_LENGTH = 5000

CATEGORY_VALUES = [c.value for c in FeedbackCategory]


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


# --- Request Schemas ---

class FeedbackCreate(BaseModel):
    """
    Request to submit feedback.

    Every field runs its own validator so that all violations are reported
    together. Messages are user-facing and rendered next to the form fields.
    """
    model_config = ConfigDict(validate_default=True)

    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None
    rating: int = DEFAULT_RATING
    category: FeedbackCategory = FeedbackCategory.GENERAL

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value: Any) -> str:
        name = _text(value)
        if not name:
            raise PydanticCustomError("name_required", "Name is required")
        if len(name) < NAME_MIN_LENGTH:
            raise PydanticCustomError(
                "name_too_short", f"Name must be at least {NAME_MIN_LENGTH} characters"
            )
        if len(name) > NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "name_too_long", f"Name must be at most {NAME_MAX_LENGTH} characters"
            )
        return name

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value: Any) -> str:
        email = _text(value)
        if not email:
            raise PydanticCustomError("email_required", "Email is required")
        if not EMAIL_PATTERN.match(email):
            raise PydanticCustomError("email_invalid", "Please include a valid email")
        if len(email) > EMAIL_MAX_LENGTH:
            raise PydanticCustomError(
                "email_too_long", f"Email must be at most {EMAIL_MAX_LENGTH} characters"
            )
        return email.lower()

    @field_validator("message", mode="before")
    @classmethod
    def check_message(cls, value: Any) -> str:
        message = _text(value)
        if not message:
            raise PydanticCustomError("message_required", "Message is required")
        if len(message) < MESSAGE_MIN_LENGTH:
            raise PydanticCustomError(
                "message_too_short",
                f"Message must be at least {MESSAGE_MIN_LENGTH} characters",
            )
        if len(message) > MESSAGE_MAX_LENGTH:
            raise PydanticCustomError(
                "message_too_long",
                f"Message must be at most {MESSAGE_MAX_LENGTH} characters",
            )
        return message

    @field_validator("rating", mode="before")
    @classmethod
    def check_rating(cls, value: Any) -> int:
        # Missing, null, empty and zero all fall back to the default
        if value is None or value == "" or (value == 0 and not isinstance(value, bool)):
            return DEFAULT_RATING
        rating = None
        if isinstance(value, int) and not isinstance(value, bool):
            rating = value
        elif isinstance(value, float) and value.is_integer():
            rating = int(value)
        elif isinstance(value, str) and value.strip().lstrip("-").isdigit():
            rating = int(value.strip())
        if rating is None or not MIN_RATING <= rating <= MAX_RATING:
            raise PydanticCustomError(
                "rating_invalid",
                f"Rating must be a whole number between {MIN_RATING} and {MAX_RATING}",
            )
        return rating

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, value: Any) -> FeedbackCategory:
        if value is None or value == "":
            return FeedbackCategory.GENERAL
        if isinstance(value, str) and value in CATEGORY_VALUES:
            return FeedbackCategory(value)
        raise PydanticCustomError(
            "category_invalid",
            "Category must be one of: {allowed}",
            {"allowed": ", ".join(CATEGORY_VALUES)},
        )


class FieldError(BaseModel):
    """A single field-level validation failure."""
    field: str
    msg: str
    value: Any = None


def collect_field_errors(exc: ValidationError) -> List[FieldError]:
    """Flatten a pydantic ValidationError into field errors, in field order."""
    errors = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        if loc:
            errors.append(FieldError(field=str(loc[0]), msg=err["msg"], value=err.get("input")))
        else:
            errors.append(FieldError(field="body", msg="Request body must be a JSON object"))
    return errors


def validate_feedback(data: Any) -> Tuple[Optional[FeedbackCreate], List[FieldError]]:
    """Validate raw submission data; returns the parsed request or every error found."""
    try:
        return FeedbackCreate.model_validate(data), []
    except ValidationError as e:
        return None, collect_field_errors(e)


# --- Response Schemas ---

class CamelModel(BaseModel):
    """Wire models use camelCase keys; Python code uses snake_case."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class FeedbackOut(CamelModel):
    """Stored feedback record."""
    id: uuid.UUID
    name: str
    email: str
    message: str
    rating: int
    category: FeedbackCategory
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive datetimes; everything is stored as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class FeedbackListResponse(CamelModel):
    """One page of feedback plus figures for the whole filtered set."""
    feedback: List[FeedbackOut]
    total_pages: int
    current_page: int
    total: int


class CreateFeedbackResponse(CamelModel):
    """Response after submitting feedback."""
    message: str
    feedback: FeedbackOut


class MessageResponse(CamelModel):
    """Plain acknowledgement or error message."""
    message: str


class HealthResponse(CamelModel):
    """Liveness probe response."""
    message: str
    timestamp: datetime
