"""FastAPI application entrypoint for the exception handling demo."""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI

from app.api.demo import build_demo_router
from app.api.pages import router as pages_router
from app.api.switch import router as switch_router
from app.core.config import Profile
from app.core.config import Settings
from app.core.config import get_settings
from app.core.errors import register_error_handlers
from app.core.logging import WEB_LOGGERS
from app.core.logging import configure_logging
from app.core.logging import set_log_level
from app.core.resolution import ResolverState
from app.filters import BrokenFilter

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application for the configured profile and resolver setup."""
    settings = settings or get_settings()
    global_handlers = settings.profile is Profile.GLOBAL

    application = FastAPI(title="Exception Handling Demo")
    application.state.settings = settings
    application.state.resolver_state = ResolverState(
        enabled=settings.resolver_initially_enabled,
        switchable=settings.resolver_switchable,
    )

    register_error_handlers(application, global_handlers=global_handlers)
    application.add_middleware(BrokenFilter)
    application.include_router(pages_router)
    application.include_router(build_demo_router(local_handlers=not global_handlers))
    application.include_router(switch_router)

    @application.get("/health")
    def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok"}

    logger.info("Application configuration: profiles = %s", settings.profiles)
    logger.info("Application configuration: settings = %s", settings.safe_for_logging())
    return application


def run() -> None:
    """Run the demo with uvicorn."""
    settings = get_settings()
    configure_logging(settings.log_level)
    for name in WEB_LOGGERS:
        set_log_level(name, settings.web_log_level)
    logger.info("Go to this URL: http://localhost:8080/")
    uvicorn.run(create_app(settings), host="0.0.0.0", port=8080)


app = create_app()
