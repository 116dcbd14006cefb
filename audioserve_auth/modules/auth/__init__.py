"""
Authentication Module - Black Box Interface

Purpose: Issue and validate self-verifying session tokens
Interface: Authenticator.authenticate(), Token, AuthFactory
Hidden: Token layout, login commitment scheme, signing

This module can be replaced with any other Authenticator implementation
(multi-user, OAuth) without affecting request dispatch.
"""

from .auth import COOKIE_NAME, SharedSecretAuthenticator
from .factory import AuthFactory
from .interfaces import Authenticator, AuthOutcome, Denied, PassThrough, TokenIssued
from .login import build_login_secret, verify_login_secret
from .token import (
    AuthError,
    DecodeError,
    Expired,
    InvalidEncoding,
    InvalidSize,
    MissingCredential,
    RandomSourceUnavailable,
    SignatureMismatch,
    Token,
    TokenError,
)

__all__ = [
    "Authenticator",
    "AuthOutcome",
    "PassThrough",
    "Denied",
    "TokenIssued",
    "SharedSecretAuthenticator",
    "AuthFactory",
    "COOKIE_NAME",
    "Token",
    "build_login_secret",
    "verify_login_secret",
    "AuthError",
    "TokenError",
    "InvalidEncoding",
    "DecodeError",
    "InvalidSize",
    "SignatureMismatch",
    "Expired",
    "MissingCredential",
    "RandomSourceUnavailable",
]
