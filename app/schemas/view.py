"""Rendered view documents."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import Field


class ErrorSummary(BaseModel):
    """Error object as exposed to a view model."""

    type: str
    message: str
    trace: list[str] | None = None


class ViewResponse(BaseModel):
    """A named view and the model attributes it displays."""

    view: str
    status: int = 200
    model: dict[str, Any] = Field(default_factory=dict)
