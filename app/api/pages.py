"""Home and status pages."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Request
from fastapi.responses import JSONResponse

from app.views import render_view

router = APIRouter(tags=["pages"])


@router.get("/")
def home(request: Request) -> JSONResponse:
    """Home page listing the demo links."""
    return render_view(request, "index")


@router.get("/unannotated")
def unannotated(request: Request) -> JSONResponse:
    """Shown after the mapping resolver has been switched on."""
    return render_view(request, "unannotated", include_switch_state=True)


@router.get("/no-handler")
def no_handler(request: Request) -> JSONResponse:
    """Shown after the mapping resolver has been switched off."""
    return render_view(request, "no-handler", include_switch_state=True)
