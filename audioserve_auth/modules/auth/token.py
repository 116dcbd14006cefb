"""
Self-verifying session tokens.

Binary layout (72 bytes, transported as URL-safe base64):

    random     32 bytes  secure random nonce
    validity    8 bytes  big-endian unsigned Unix timestamp of expiry
    signature  32 bytes  HMAC-SHA256(signing_secret, random || validity)

The server keeps no per-token state. A token is valid when its signature
matches under the current signing secret and its validity lies in the future.
"""

import base64
import binascii
import hashlib
import hmac
import secrets
import time
from dataclasses import dataclass
from typing import Optional

RANDOM_SIZE = 32
VALIDITY_SIZE = 8
SIGNATURE_SIZE = 32
TOKEN_SIZE = RANDOM_SIZE + VALIDITY_SIZE + SIGNATURE_SIZE


class AuthError(Exception):
    """Base class for authentication failures."""


class TokenError(AuthError):
    """Token could not be decoded or did not pass verification."""


class InvalidEncoding(TokenError):
    """Token string is not valid URL-safe base64."""


DecodeError = InvalidEncoding


class InvalidSize(TokenError):
    """Decoded token does not have the fixed token size."""

    def __init__(self, size: int):
        super().__init__(f"Invalid token size {size}, expected {TOKEN_SIZE} bytes")
        self.size = size


class SignatureMismatch(TokenError):
    """Token signature does not match its content."""


class Expired(TokenError):
    """Token signature is valid but its validity has passed."""


class MissingCredential(AuthError):
    """No login secret or token was presented."""


class RandomSourceUnavailable(AuthError):
    """Secure random source failed; tokens cannot be issued safely."""


def _now() -> int:
    return int(time.time())


def _sign(signing_secret: bytes, random: bytes, validity: bytes) -> bytes:
    return hmac.new(signing_secret, random + validity, hashlib.sha256).digest()


@dataclass(frozen=True)
class Token:
    """Signed session token. Immutable once created."""

    random: bytes
    validity: bytes
    signature: bytes

    @classmethod
    def create(
        cls,
        validity_hours: int,
        signing_secret: bytes,
        now: Optional[int] = None,
    ) -> "Token":
        """
        Mint a new token.

        Args:
            validity_hours: How long the token stays valid
            signing_secret: HMAC key held by the server
            now: Current Unix time, defaults to the wall clock

        Returns:
            Newly signed Token

        Raises:
            RandomSourceUnavailable: If the OS cannot provide secure randomness
        """
        try:
            random = secrets.token_bytes(RANDOM_SIZE)
        except (NotImplementedError, OSError) as e:
            raise RandomSourceUnavailable(f"Cannot generate random bytes: {e}") from e

        if now is None:
            now = _now()
        expires = now + validity_hours * 3600
        validity = expires.to_bytes(VALIDITY_SIZE, "big")

        return cls(
            random=random,
            validity=validity,
            signature=_sign(signing_secret, random, validity),
        )

    @property
    def expires_at(self) -> int:
        """Unix timestamp after which the token is expired."""
        return int.from_bytes(self.validity, "big")

    def check(self, signing_secret: bytes, now: Optional[int] = None) -> None:
        """
        Verify the token, raising on failure.

        Raises:
            SignatureMismatch: If the signature was not made with signing_secret
            Expired: If the signature is fine but the token has expired
        """
        expected = _sign(signing_secret, self.random, self.validity)
        if not hmac.compare_digest(expected, self.signature):
            raise SignatureMismatch("Token signature mismatch")

        if now is None:
            now = _now()
        if self.expires_at <= now:
            raise Expired(f"Token expired at {self.expires_at}")

    def verify(self, signing_secret: bytes, now: Optional[int] = None) -> bool:
        """Return True if the signature matches and the token has not expired."""
        try:
            self.check(signing_secret, now)
        except TokenError:
            return False
        return True

    def to_bytes(self) -> bytes:
        return self.random + self.validity + self.signature

    def encode(self) -> str:
        """Encode as URL/cookie safe base64 text."""
        return base64.urlsafe_b64encode(self.to_bytes()).decode("ascii")

    @classmethod
    def decode(cls, text: str) -> "Token":
        """
        Parse token text. Does not verify the signature.

        Args:
            text: Encoded token as produced by encode()

        Returns:
            Token with the decoded fields

        Raises:
            InvalidEncoding: If text is not valid URL-safe base64
            InvalidSize: If the decoded data is not exactly TOKEN_SIZE bytes
        """
        # b64decode maps altchars onto "+/" and would then accept those too
        if "+" in text or "/" in text:
            raise InvalidEncoding("Invalid token encoding: standard base64 alphabet")
        try:
            data = base64.b64decode(text.encode("ascii"), altchars=b"-_", validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            raise InvalidEncoding(f"Invalid token encoding: {e}") from e

        if len(data) != TOKEN_SIZE:
            raise InvalidSize(len(data))

        return cls(
            random=data[:RANDOM_SIZE],
            validity=data[RANDOM_SIZE:RANDOM_SIZE + VALIDITY_SIZE],
            signature=data[RANDOM_SIZE + VALIDITY_SIZE:],
        )


def create_token(validity_hours: int, signing_secret: bytes) -> Token:
    return Token.create(validity_hours, signing_secret)


def verify_token(token: Token, signing_secret: bytes) -> bool:
    return token.verify(signing_secret)


def encode_token(token: Token) -> str:
    return token.encode()


def decode_token(text: str) -> Token:
    return Token.decode(text)


__all__ = [
    "Token",
    "TOKEN_SIZE",
    "AuthError",
    "TokenError",
    "InvalidEncoding",
    "DecodeError",
    "InvalidSize",
    "SignatureMismatch",
    "Expired",
    "MissingCredential",
    "RandomSourceUnavailable",
    "create_token",
    "verify_token",
    "encode_token",
    "decode_token",
]
