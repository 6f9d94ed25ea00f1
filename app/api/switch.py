"""Administrative switch for the exception mapping resolver."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi import Depends
from fastapi import status
from fastapi.responses import RedirectResponse

from app.core.resolution import ResolverState
from app.core.resolution import set_enabled
from app.views import get_resolver_state

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


@router.get("/simpleMappingExceptionResolver/{action}")
def switch_resolver_endpoint(
    action: str,
    state: ResolverState = Depends(get_resolver_state),
) -> RedirectResponse:
    """Turn the resolver on for ``on`` (any case); anything else turns it off."""
    logger.info("Exception mapping resolver switch requested: %s", action)
    enabled = set_enabled(state, action)
    target = "/unannotated" if enabled else "/no-handler"
    return RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)
