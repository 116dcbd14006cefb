"""
Shared pytest fixtures for audioserve-auth tests.

This module provides:
- A static configuration provider with fixed test secrets
- A FastAPI test client for an app with a protected route
- A frozen clock for expiry tests
"""

import time
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from audioserve_auth.config.provider import APIConfig, AuthConfig
from audioserve_auth.main import create_app

SHARED_SECRET = "kulisak"
SIGNING_SECRET = b"integration signing secret"


class StaticConfigProvider:
    """Config provider returning fixed values instead of reading the environment."""

    def __init__(self, token_validity_hours: int = 24, login_path: str = "/authenticate"):
        self.auth_config = AuthConfig(
            shared_secret=SHARED_SECRET,
            signing_secret=SIGNING_SECRET,
            token_validity_hours=token_validity_hours,
            login_path=login_path,
        )

    def get_auth_config(self) -> AuthConfig:
        return self.auth_config

    def get_api_config(self) -> APIConfig:
        return APIConfig(port=8080, host="127.0.0.1", debug=False, log_level="INFO")


@pytest.fixture
def config_provider():
    return StaticConfigProvider()


@pytest.fixture
def app(config_provider):
    """App with a protected route standing in for the real service."""
    app = create_app(config_provider)

    @app.get("/folder/{name}")
    async def folder(name: str):
        return {"folder": name}

    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def frozen_time():
    """Patch the clock used by the token module; yields a setter."""
    current = {"now": time.time()}

    with patch(
        "audioserve_auth.modules.auth.token._now",
        side_effect=lambda: int(current["now"]),
    ):
        yield current
