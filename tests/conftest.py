"""Shared pytest fixtures for the demo test suites."""

from collections.abc import Callable
from collections.abc import Generator
from pathlib import Path
import os
import sys

import pytest
from fastapi.testclient import TestClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

_ENV_PREFIX = "EXDEMO_"


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test from default settings."""
    for name in list(os.environ):
        if name.startswith(_ENV_PREFIX):
            monkeypatch.delenv(name)


@pytest.fixture
def make_client(monkeypatch: pytest.MonkeyPatch) -> Generator[Callable[..., TestClient], None, None]:
    """Build a fresh app from ``EXDEMO_*`` overrides, e.g. ``make_client(PROFILE="global")``."""
    from app.core.config import load_settings
    from app.main import create_app

    clients: list[TestClient] = []

    def _make(*, raise_server_exceptions: bool = True, **env: str) -> TestClient:
        for key, value in env.items():
            monkeypatch.setenv(f"{_ENV_PREFIX}{key}", value)
        test_client = TestClient(create_app(load_settings()), raise_server_exceptions=raise_server_exceptions)
        clients.append(test_client)
        return test_client

    yield _make

    for test_client in clients:
        test_client.close()


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    """Provide a client for the default (controller, switchable) configuration."""
    return make_client()
