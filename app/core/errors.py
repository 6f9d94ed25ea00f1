"""Demo exceptions and the handler strategies that resolve them into responses."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Coroutine
from typing import Any
import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import Response
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.resolution import ErrorRecord
from app.core.resolution import declare_status
from app.core.resolution import resolve
from app.core.resolution import response_status
from app.schemas.error import ErrorDetail
from app.views import build_error_response
from app.views import get_app_settings
from app.views import get_resolver_state
from app.views import http_error_code
from app.views import render_default_error
from app.views import render_resolution

logger = logging.getLogger(__name__)


class DemoError(Exception):
    """Base class for every exception the demo routes raise."""


@response_status(status.HTTP_404_NOT_FOUND, "No such Order")
class OrderNotFoundException(DemoError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"{order_id} not found")
        self.order_id = order_id


class DataIntegrityViolationException(DemoError):
    pass


# Declared outside the class, the way a handler-level status mapping is.
declare_status(DataIntegrityViolationException, status.HTTP_409_CONFLICT, "Data integrity violation")


class SQLException(DemoError):
    pass


class DataAccessException(DemoError):
    pass


class DatabaseException(DemoError):
    pass


class InvalidCreditCardException(DemoError):
    def __init__(self, card_number: str) -> None:
        super().__init__(f"Invalid credit card number {card_number}")
        self.card_number = card_number


class CustomException(DemoError):
    pass


class UnhandledException(DemoError):
    pass


def resolve_exception(request: Request, exc: BaseException) -> JSONResponse:
    """Run the resolution policy for ``exc`` and render the outcome."""
    settings = get_app_settings(request)
    record = ErrorRecord.from_exception(exc, request.url.path)
    result = resolve(
        record,
        get_resolver_state(request),
        settings.exception_mappings,
        exception_attribute=settings.exception_attribute,
    )
    if result.handled:
        return render_resolution(request, result)

    logger.warning("Request: %s raised unresolved %s, showing default error view", record.request_path, record.error_type)
    return render_default_error(request)


class ResolvingRoute(APIRoute):
    """Route class that resolves ``DemoError`` raised by its own endpoint.

    Only routers built with this route class get these handlers; other routes
    fall through to the application-level handlers.
    """

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        route_handler = super().get_route_handler()

        async def resolving_route_handler(request: Request) -> Response:
            try:
                return await route_handler(request)
            except DemoError as exc:
                return resolve_exception(request, exc)

        return resolving_route_handler


def _validation_details(exc: RequestValidationError) -> list[ErrorDetail]:
    details: list[ErrorDetail] = []
    for issue in exc.errors():
        location = issue.get("loc", ())
        if isinstance(location, (tuple, list)):
            field = ".".join(str(part) for part in location if part not in {"body", "query", "path"}) or "request"
        else:
            field = str(location)
        details.append(ErrorDetail(field=field, issue=str(issue.get("msg", "Invalid value"))))
    return details


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI validation errors to the error envelope."""

    return build_error_response(
        request,
        status_code=status.HTTP_400_BAD_REQUEST,
        code="validation_error",
        message="Request validation failed",
        details=_validation_details(exc),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize HTTP exceptions to the error envelope."""

    message = str(exc.detail) if isinstance(exc.detail, str) and exc.detail else "Request failed"
    return build_error_response(
        request,
        status_code=exc.status_code,
        code=http_error_code(exc.status_code),
        message=message,
    )


async def demo_error_handler(request: Request, exc: DemoError) -> JSONResponse:
    """Application-wide resolution of demo errors, whichever route raised them."""

    return resolve_exception(request, exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Show the default error view without leaking internals."""

    logger.error("Request: %s raised %s outside any exception handler", request.url.path, type(exc).__name__)
    return render_default_error(request)


def register_error_handlers(app: FastAPI, *, global_handlers: bool = False) -> None:
    """Attach the application-level error handlers.

    ``global_handlers`` adds resolution of ``DemoError`` for every route;
    without it only routers using ``ResolvingRoute`` resolve them.
    """

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    if global_handlers:
        app.add_exception_handler(DemoError, demo_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
