"""Authentication interfaces following Black Box Design principles."""
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Union

from starlette.requests import Request
from starlette.responses import Response

from .token import Token


@dataclass(frozen=True)
class PassThrough:
    """Request is authenticated and continues downstream."""
    request: Request
    # Single identity system - always None for now
    credentials: Optional[Any] = None


@dataclass(frozen=True)
class Denied:
    """Request is rejected with a ready 401 response."""
    response: Response


@dataclass(frozen=True)
class TokenIssued:
    """Login succeeded; response carries the new token."""
    response: Response
    token: Token


AuthOutcome = Union[PassThrough, Denied, TokenIssued]


class Authenticator(Protocol):
    """Protocol for request authenticators - allows swappable implementations."""

    async def authenticate(self, request: Request) -> AuthOutcome:
        """
        Decide whether a request may proceed.

        Args:
            request: Incoming request

        Returns:
            PassThrough to continue, or Denied/TokenIssued with a response to send
        """
        ...
