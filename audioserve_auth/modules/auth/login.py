"""
Shared-secret login commitment.

The client proves it knows the shared secret without sending it in clear:

    secret = base64(salt) + "|" + base64(SHA-256(shared_secret || salt))

This is independent from token signing; it is only used to bootstrap a token.
"""

import base64
import binascii
import hashlib
import hmac
import logging
import secrets
from typing import List, Optional

logger = logging.getLogger(__name__)

SALT_SIZE = 32


def _commitment(shared_secret: str, salt: bytes) -> bytes:
    return hashlib.sha256(shared_secret.encode("utf-8") + salt).digest()


def _decode_segments(presented: str) -> List[bytes]:
    """Base64-decode every "|" separated segment, dropping ones that do not decode."""
    parts = []
    for segment in presented.split("|"):
        try:
            parts.append(base64.b64decode(segment.encode("ascii"), validate=True))
        except (binascii.Error, UnicodeEncodeError):
            continue
    return parts


def verify_login_secret(presented: str, shared_secret: str) -> bool:
    """
    Check a login commitment against the configured shared secret.

    Args:
        presented: Value of the "secret" form field
        shared_secret: Shared secret configured on the server

    Returns:
        True if the commitment was made with shared_secret
    """
    parts = _decode_segments(presented)
    if len(parts) != 2:
        logger.error(f"Incorrectly formed login secret - {len(parts)} parts")
        return False

    salt, digest = parts
    return hmac.compare_digest(_commitment(shared_secret, salt), digest)


def build_login_secret(shared_secret: str, salt: Optional[bytes] = None) -> str:
    """
    Build the login commitment a client sends to the login path.

    Args:
        shared_secret: Shared secret known to the client
        salt: Salt to use, a fresh random one if not given

    Returns:
        Value for the "secret" form field
    """
    if salt is None:
        salt = secrets.token_bytes(SALT_SIZE)
    return "|".join(
        base64.b64encode(part).decode("ascii")
        for part in (salt, _commitment(shared_secret, salt))
    )


__all__ = ["verify_login_secret", "build_login_secret"]
