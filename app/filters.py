"""Request filters that run outside the exception handler strategies."""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.base import RequestResponseEndpoint

logger = logging.getLogger(__name__)


class FilterException(RuntimeError):
    """Raised by ``BrokenFilter``; no route handler ever sees it."""


class BrokenFilter(BaseHTTPMiddleware):
    """Fail every request whose path ends in ``broken``."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path.endswith("broken"):
            logger.critical("Broken filter forces an exception for %s", request.url.path)
            raise FilterException("Failure in BrokenFilter")
        return await call_next(request)
