"""Request and response bodies for account and like endpoints."""

from datetime import datetime
from typing import Self

from pydantic import BaseModel, Field

from beatdrops.constants import MAX_ID
from beatdrops.errors import AuthFailed, ValidationFailed
from beatdrops.schemas import CamelModel


class UserOut(CamelModel):
    """Public view of a user. Never includes the password hash."""

    id: int
    username: str
    email: str
    liked: list[int]
    created_at: datetime


class UserEnvelope(BaseModel):
    """``{"user": ...}`` wrapper used by signup, login and GET /user/{id}."""

    user: UserOut


class LikedResponse(BaseModel):
    """Response for GET /user/{id}/liked."""

    liked: list[int]


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    email: str = ""
    password: str = ""


class LikeToggleRequest(BaseModel):
    """Request body for PATCH /user/{id}/liked.

    ``liked`` is whether the user likes the post *before* this request.
    """

    post: int = Field(le=MAX_ID)
    liked: bool


class FieldErrors(BaseModel):
    """Per-field messages; empty string where the field is fine."""

    username: str = ""
    email: str = ""
    password: str = ""

    @classmethod
    def from_exception(cls, exc: ValidationFailed | AuthFailed) -> Self:
        """Flatten a validation or auth failure into field messages."""
        if isinstance(exc, AuthFailed):
            return cls.model_validate({exc.field: exc.reason})
        messages: dict[str, str] = {}
        for error in exc.errors:
            messages.setdefault(error.field, error.reason)
        return cls.model_validate(messages)


class ErrorsResponse(BaseModel):
    """``{"errors": {...}}`` body for 400 responses."""

    errors: FieldErrors
