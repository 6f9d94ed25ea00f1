"""Error envelope schemas for status-only error responses."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import Field


class ErrorDetail(BaseModel):
    """Single field-level validation issue."""

    field: str
    issue: str


class ErrorObject(BaseModel):
    """Canonical error payload object."""

    code: str
    message: str
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    """Top-level error response envelope, used when a status line alone reports the failure.

    Carries the same request-scoped attributes as a rendered error view.
    """

    error: ErrorObject
    profiles: str
    timestamp: str
    switch_state: str = Field(serialization_alias="switchState")
