"""Render named views, and the request-scoped attributes every view carries."""

from __future__ import annotations

from collections.abc import Mapping
from collections.abc import Sequence
from datetime import datetime
from datetime import timezone
from http import HTTPStatus
from typing import Any
import traceback

from fastapi import Request
from fastapi import status
from fastapi.responses import JSONResponse

from app.core.config import Settings
from app.core.resolution import ErrorRecord
from app.core.resolution import ResolutionResult
from app.core.resolution import ResolverState
from app.core.resolution import SUPPORT_VIEW
from app.schemas.error import ErrorDetail
from app.schemas.error import ErrorObject
from app.schemas.error import ErrorResponse
from app.schemas.view import ErrorSummary
from app.schemas.view import ViewResponse


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_resolver_state(request: Request) -> ResolverState:
    return request.app.state.resolver_state


def timestamp_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def request_attributes(request: Request, *, include_switch_state: bool = False) -> dict[str, Any]:
    """Attributes added to the model of every rendered view."""
    attributes: dict[str, Any] = {
        "profiles": get_app_settings(request).profiles,
        "timestamp": timestamp_now(),
    }
    if include_switch_state:
        attributes["switchState"] = get_resolver_state(request).switch_state
    return attributes


def render_view(
    request: Request,
    view_name: str,
    *,
    status_code: int = status.HTTP_200_OK,
    model: Mapping[str, Any] | None = None,
    include_switch_state: bool = False,
) -> JSONResponse:
    """Render ``view_name`` with the request attributes merged under ``model``."""
    payload = request_attributes(request, include_switch_state=include_switch_state)
    if model:
        payload.update(model)
    document = ViewResponse(view=view_name, status=status_code, model=payload)
    return JSONResponse(status_code=status_code, content=document.model_dump(mode="json"))


def render_status(request: Request, status_code: int, reason: str | None) -> JSONResponse:
    """Answer with the status line only, wrapped in the shared error envelope."""
    return build_error_response(
        request,
        status_code=status_code,
        code=http_error_code(status_code),
        message=reason or _reason_phrase(status_code),
    )


def render_resolution(request: Request, result: ResolutionResult) -> JSONResponse:
    """Render a handled resolution result."""
    if not result.view_name:
        return render_status(request, result.status, result.reason)

    model = {
        name: _expose(value, with_trace=result.view_name == SUPPORT_VIEW)
        for name, value in result.diagnostics.items()
    }
    return render_view(
        request,
        result.view_name,
        status_code=result.status,
        model=model,
        include_switch_state=True,
    )


def render_default_error(
    request: Request,
    *,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
) -> JSONResponse:
    """Generic error page; never exposes exception details."""
    return render_view(
        request,
        get_app_settings(request).default_error_view,
        status_code=status_code,
        model={
            "status": status_code,
            "error": _reason_phrase(status_code),
            "path": request.url.path,
        },
        include_switch_state=True,
    )


def build_error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: Sequence[ErrorDetail] | None = None,
) -> JSONResponse:
    attributes = request_attributes(request, include_switch_state=True)
    payload = ErrorResponse(
        error=ErrorObject(code=code, message=message, details=list(details) if details else None),
        profiles=attributes["profiles"],
        timestamp=attributes["timestamp"],
        switch_state=attributes["switchState"],
    )
    return JSONResponse(status_code=status_code, content=payload.model_dump(by_alias=True, exclude_none=True))


def http_error_code(status_code: int) -> str:
    if status_code == status.HTTP_404_NOT_FOUND:
        return "not_found"
    if status_code == status.HTTP_400_BAD_REQUEST:
        return "validation_error"
    if status_code == status.HTTP_409_CONFLICT:
        return "conflict"
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return "internal_error"
    return "bad_request"


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Request failed"


def _expose(value: Any, *, with_trace: bool) -> Any:
    if isinstance(value, ErrorRecord):
        trace = None
        if with_trace and value.exception is not None:
            trace = traceback.format_exception(type(value.exception), value.exception, value.exception.__traceback__)
        return ErrorSummary(type=value.error_type, message=value.message, trace=trace).model_dump(exclude_none=True)
    if isinstance(value, datetime):
        return value.isoformat()
    return value
