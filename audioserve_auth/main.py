#!/usr/bin/env python3
"""
audioserve-auth - Main Entry Point

Thin orchestration layer that:
1. Loads configuration
2. Builds the authenticator
3. Wires it in front of the FastAPI application

All authentication logic is in the modules, following black box principles.
"""

import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request

from audioserve_auth import __version__
from audioserve_auth.config.provider import ConfigProvider, EnvConfigProvider
from audioserve_auth.logging_config import configure_logging, get_logging_config
from audioserve_auth.modules.auth.factory import AuthFactory
from audioserve_auth.modules.auth.interfaces import Authenticator
from audioserve_auth.modules.middleware import AuthMiddleware

logger = logging.getLogger(__name__)

SKIP_AUTH_PATHS = {"/health": ["GET"]}


def create_app(
    config_provider: Optional[ConfigProvider] = None,
    authenticator: Optional[Authenticator] = None,
) -> FastAPI:
    """
    Create the FastAPI application with authentication in front of every route.

    Args:
        config_provider: Configuration source, environment by default
        authenticator: Prebuilt authenticator, built from config if not given

    Returns:
        FastAPI app; services add their own routes to it
    """
    if authenticator is None:
        authenticator = AuthFactory.build(config_provider or EnvConfigProvider())

    app = FastAPI(
        title="audioserve-auth",
        description="Shared secret authentication with stateless tokens",
        version=__version__,
    )
    app.state.authenticator = authenticator

    auth_middleware = AuthMiddleware(authenticator, skip_paths=SKIP_AUTH_PATHS)

    @app.middleware("http")
    async def authenticate(request: Request, call_next):
        return await auth_middleware(request, call_next)

    @app.get("/health")
    async def health():
        """Liveness probe, no authentication required."""
        return {"status": "healthy"}

    return app


def main() -> None:
    config_provider = EnvConfigProvider()
    api_config = config_provider.get_api_config()
    configure_logging(api_config.log_level)

    app = create_app(config_provider)
    logger.info(f"Starting audioserve-auth on {api_config.host}:{api_config.port}")

    # Use dict config for logging, not file path
    uvicorn.run(
        app,
        host=api_config.host,
        port=api_config.port,
        log_level=api_config.log_level.lower(),
        log_config=get_logging_config(api_config.log_level),
    )


if __name__ == "__main__":
    main()
