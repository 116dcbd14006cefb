"""
Shared-secret authenticator.

Two request paths:
- POST to the login path exchanges the shared secret commitment for a token
- every other request must present a valid token (Bearer header or cookie)

Validation is stateless: a token is checked only against its own bytes, the
signing secret and the current time.
"""

import logging
from typing import Dict, Optional
from urllib.parse import parse_qsl

from starlette.requests import Request
from starlette.responses import PlainTextResponse

from .interfaces import AuthOutcome, Denied, PassThrough, TokenIssued
from .login import verify_login_secret
from .token import MissingCredential, Token, TokenError

logger = logging.getLogger(__name__)

COOKIE_NAME = "audioserve_token"
ACCESS_DENIED = "Access denied"
COOKIE_MAX_AGE = 10 * 365 * 24 * 3600
DEFAULT_LOGIN_PATH = "/authenticate"


def deny() -> Denied:
    """Build the uniform denial outcome."""
    return Denied(PlainTextResponse(ACCESS_DENIED, status_code=401))


class SharedSecretAuthenticator:
    """
    Authenticator for a single user holding a shared secret.

    Holds only read-only configuration, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        shared_secret: str,
        signing_secret: bytes,
        token_validity_hours: int,
        login_path: str = DEFAULT_LOGIN_PATH,
    ):
        """
        Initialize authenticator.

        Args:
            shared_secret: Secret the client proves knowledge of at login
            signing_secret: Server-only HMAC key for tokens
            token_validity_hours: Lifetime of issued tokens
            login_path: Path that accepts login requests
        """
        self._shared_secret = shared_secret
        self._signing_secret = signing_secret
        self.token_validity_hours = token_validity_hours
        self.login_path = login_path

    async def authenticate(self, request: Request) -> AuthOutcome:
        """Authenticate a request; see module docstring for the two paths."""
        if request.method == "POST" and request.url.path == self.login_path:
            return await self._login(request)

        token = self.extract_token(request)
        if token is None:
            logger.debug(f"No token for {request.method} {request.url.path}")
            return deny()

        if not self.token_ok(token):
            return deny()

        return PassThrough(request, None)

    async def _login(self, request: Request) -> AuthOutcome:
        body = await request.body()
        params: Dict[str, str] = dict(
            parse_qsl(body.decode("utf-8", errors="replace"), keep_blank_values=True)
        )

        secret = params.get("secret")
        if secret is None:
            logger.warning(f"Login rejected: {MissingCredential('no secret field')}")
            return deny()

        logger.debug("Authenticating user")
        if not verify_login_secret(secret, self._shared_secret):
            logger.warning("Login rejected: invalid shared secret")
            return deny()

        logger.debug("Authentication success")
        token = Token.create(self.token_validity_hours, self._signing_secret)
        encoded = token.encode()
        response = PlainTextResponse(encoded, status_code=200)
        response.headers.append(
            "set-cookie", f"{COOKIE_NAME}={encoded}; Max-Age={COOKIE_MAX_AGE}"
        )
        return TokenIssued(response, token)

    @staticmethod
    def extract_token(request: Request) -> Optional[str]:
        """
        Find the candidate token in the request.

        Prefers "Authorization: Bearer <token>", falls back to the cookie.
        """
        authorization = request.headers.get("authorization")
        if authorization:
            scheme, _, value = authorization.partition(" ")
            if scheme.lower() == "bearer" and value.strip():
                return value.strip()

        return request.cookies.get(COOKIE_NAME)

    def token_ok(self, token: str) -> bool:
        """Decode and verify token text, logging why it failed."""
        try:
            Token.decode(token).check(self._signing_secret)
        except TokenError as e:
            logger.warning(f"Invalid token ({type(e).__name__}): {e}")
            return False
        return True


__all__ = [
    "SharedSecretAuthenticator",
    "COOKIE_NAME",
    "ACCESS_DENIED",
    "COOKIE_MAX_AGE",
    "DEFAULT_LOGIN_PATH",
    "deny",
]
