"""
Authentication Middleware Module - Black Box Interface

Purpose: Put an Authenticator in front of a FastAPI application
Interface: AuthMiddleware, create_shared_secret_middleware()
Hidden: Outcome handling, skip rules

Works with any Authenticator implementation.
"""

import logging
from typing import Dict, Optional

from fastapi import Request

from ..auth.factory import AuthFactory
from ..auth.interfaces import Authenticator, PassThrough
from ...config.provider import AuthConfig

logger = logging.getLogger(__name__)


class AuthMiddleware:
    """
    Authentication middleware for FastAPI applications.

    Every request goes through the authenticator unless its path and method
    are listed in skip_paths.
    """

    def __init__(
        self,
        authenticator: Authenticator,
        skip_paths: Optional[Dict[str, list]] = None,
        log_attempts: bool = True
    ):
        """
        Initialize authentication middleware.

        Args:
            authenticator: Authenticator deciding on each request
            skip_paths: Dict of {path: [methods]} to skip authentication
            log_attempts: Whether to log authentication outcomes
        """
        self.authenticator = authenticator
        self.skip_paths = skip_paths or {}
        self.log_attempts = log_attempts

    def should_skip_auth(self, request: Request) -> bool:
        """Check if authentication should be skipped for this request."""
        path = str(request.url.path)
        method = request.method.upper()

        if path in self.skip_paths:
            allowed_methods = self.skip_paths[path]
            if "*" in allowed_methods or method in allowed_methods:
                return True

        return False

    async def __call__(self, request: Request, call_next):
        """Process the request through the authenticator."""
        if self.should_skip_auth(request):
            if self.log_attempts:
                logger.debug(f"Skipping auth for {request.method} {request.url.path}")
            return await call_next(request)

        # RandomSourceUnavailable is fatal and propagates to the server
        outcome = await self.authenticator.authenticate(request)

        if isinstance(outcome, PassThrough):
            request.state.credentials = outcome.credentials
            return await call_next(outcome.request)

        if self.log_attempts:
            logger.info(
                f"{request.method} {request.url.path} answered by authenticator "
                f"with {outcome.response.status_code}"
            )
        return outcome.response


def create_shared_secret_middleware(
    auth_config: AuthConfig,
    skip_paths: Optional[Dict[str, list]] = None
) -> AuthMiddleware:
    """
    Factory function to create shared secret authentication middleware.

    Args:
        auth_config: Loaded authentication configuration
        skip_paths: Paths to skip authentication {"/path": ["GET"]}

    Returns:
        Configured AuthMiddleware instance
    """
    return AuthMiddleware(
        authenticator=AuthFactory.from_config(auth_config),
        skip_paths=skip_paths
    )


# Module interface - what this module provides
__all__ = [
    "AuthMiddleware",
    "create_shared_secret_middleware"
]
