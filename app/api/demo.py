"""Routes that raise a labelled exception on demand."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.routing import APIRoute

from app.core.errors import CustomException
from app.core.errors import DataAccessException
from app.core.errors import DataIntegrityViolationException
from app.core.errors import DatabaseException
from app.core.errors import InvalidCreditCardException
from app.core.errors import OrderNotFoundException
from app.core.errors import ResolvingRoute
from app.core.errors import SQLException
from app.core.errors import UnhandledException

logger = logging.getLogger(__name__)


def throw_order_not_found(order_id: int = 12345) -> None:
    logger.info("Throw OrderNotFoundException for unknown order %s", order_id)
    raise OrderNotFoundException(str(order_id))


def throw_data_integrity_violation() -> None:
    logger.info("Throw DataIntegrityViolationException")
    raise DataIntegrityViolationException("Duplicate id")


def throw_sql_exception() -> None:
    logger.info("Throw SQLException")
    raise SQLException()


def throw_data_access_exception() -> None:
    logger.info("Throw DataAccessException")
    raise DataAccessException("Error accessing database")


def throw_invalid_credit_card() -> None:
    logger.info("Throw InvalidCreditCardException")
    raise InvalidCreditCardException("1234123412341234")


def throw_database_exception() -> None:
    logger.info("Throw DatabaseException")
    raise DatabaseException("Database not found: info.db")


def throw_custom_exception() -> None:
    logger.info("Throw CustomException")
    raise CustomException("Custom exception occurred")


def throw_unhandled_exception() -> None:
    logger.info("Throw UnhandledException")
    raise UnhandledException("Some exception occurred")


DEMO_ROUTES = {
    "/orderNotFound": throw_order_not_found,
    "/dataIntegrityViolation": throw_data_integrity_violation,
    "/databaseError1": throw_sql_exception,
    "/databaseError2": throw_data_access_exception,
    "/invalidCreditCard": throw_invalid_credit_card,
    "/databaseException": throw_database_exception,
    "/customException": throw_custom_exception,
    "/unhandledException": throw_unhandled_exception,
}


def build_demo_router(*, local_handlers: bool) -> APIRouter:
    """Build the exception-raising router.

    With ``local_handlers`` the router resolves its own exceptions, the
    equivalent of handler methods living on the controller.
    """
    router = APIRouter(tags=["demo"], route_class=ResolvingRoute if local_handlers else APIRoute)
    for path, endpoint in DEMO_ROUTES.items():
        router.add_api_route(path, endpoint, methods=["GET"])
    return router
