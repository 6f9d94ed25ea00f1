"""Unit tests for the handler strategies on throwaway applications."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Profile
from app.core.config import ResolverSetup
from app.core.config import Settings
from app.core.errors import CustomException
from app.core.errors import InvalidCreditCardException
from app.core.errors import ResolvingRoute
from app.core.errors import SQLException
from app.core.errors import register_error_handlers
from app.core.resolution import MappingTable
from app.core.resolution import ResolverState


def _settings(profile: Profile) -> Settings:
    return Settings(
        profile=profile,
        resolver_setup=ResolverSetup.STATIC,
        exception_mappings=MappingTable({"InvalidCreditCardException": "creditCardError"}),
        exception_attribute="ex",
        default_error_view="error",
        log_level="INFO",
        web_log_level="DEBUG",
    )


def _build_client(*, global_handlers: bool) -> TestClient:
    app = FastAPI()
    app.state.settings = _settings(Profile.GLOBAL if global_handlers else Profile.CONTROLLER)
    app.state.resolver_state = ResolverState(enabled=True)
    register_error_handlers(app, global_handlers=global_handlers)

    local = APIRouter(route_class=ResolvingRoute)

    @local.get("/local/database")
    def local_database() -> None:
        raise SQLException()

    plain = APIRouter()

    @plain.get("/plain/database")
    def plain_database() -> None:
        raise SQLException()

    @plain.get("/plain/credit-card")
    def plain_credit_card() -> None:
        raise InvalidCreditCardException("4111")

    @plain.get("/plain/custom")
    def plain_custom() -> None:
        raise CustomException("Custom exception occurred")

    @plain.get("/query")
    def query(limit: int) -> dict[str, int]:
        return {"limit": limit}

    @plain.get("/http")
    def http_error() -> None:
        raise StarletteHTTPException(status_code=404, detail="Order not found")

    app.include_router(local)
    app.include_router(plain)
    return TestClient(app, raise_server_exceptions=False)


def test_local_route_class_resolves_its_own_errors() -> None:
    client = _build_client(global_handlers=False)

    response = client.get("/local/database")

    assert response.status_code == 500
    assert response.json()["view"] == "databaseError"


def test_local_handlers_do_not_cover_other_routers() -> None:
    client = _build_client(global_handlers=False)

    response = client.get("/plain/database")

    assert response.status_code == 500
    payload = response.json()
    assert payload["view"] == "error"
    assert payload["model"]["error"] == "Internal Server Error"
    assert "exception" not in payload["model"]


def test_global_handlers_cover_every_router() -> None:
    client = _build_client(global_handlers=True)

    database = client.get("/plain/database")
    credit_card = client.get("/plain/credit-card")

    assert database.json()["view"] == "databaseError"
    assert credit_card.json()["view"] == "creditCardError"
    assert credit_card.json()["model"]["ex"] == {
        "type": "InvalidCreditCardException",
        "message": "Invalid credit card number 4111",
    }
    assert credit_card.json()["model"]["switchState"] == "on"


def test_support_view_carries_trace_and_request_url() -> None:
    client = _build_client(global_handlers=True)

    response = client.get("/plain/custom")

    payload = response.json()
    assert payload["view"] == "support"
    assert payload["model"]["url"] == "/plain/custom"
    assert payload["model"]["exception"]["type"] == "CustomException"
    assert any("CustomException" in line for line in payload["model"]["exception"]["trace"])


def test_request_validation_errors_are_normalized_to_envelope() -> None:
    client = _build_client(global_handlers=True)

    response = client.get("/query")

    assert response.status_code == 400
    payload = response.json()
    assert payload["error"]["code"] == "validation_error"
    assert payload["error"]["message"] == "Request validation failed"
    assert payload["error"]["details"][0]["field"] == "limit"


def test_http_errors_are_wrapped_in_shared_envelope() -> None:
    client = _build_client(global_handlers=False)

    response = client.get("/http")

    assert response.status_code == 404
    payload = response.json()
    assert payload["error"] == {"code": "not_found", "message": "Order not found"}
    assert payload["profiles"] == "controller, static"
    assert payload["switchState"] == "on"
    assert payload["timestamp"]
