"""Configuration provider following Black Box Design principles."""
import logging
import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

SIGNING_SECRET_SIZE = 32
DEFAULT_TOKEN_VALIDITY_HOURS = 24 * 365


@dataclass(frozen=True)
class AuthConfig:
    """Authentication configuration. Read-only after startup."""
    shared_secret: str
    signing_secret: bytes
    token_validity_hours: int
    login_path: str = "/authenticate"

    def __repr__(self) -> str:
        # Keep secrets out of logs and tracebacks
        return (
            f"AuthConfig(token_validity_hours={self.token_validity_hours}, "
            f"login_path={self.login_path!r})"
        )


@dataclass
class APIConfig:
    """API configuration."""
    port: int
    host: str
    debug: bool
    log_level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration."""
        ...

    def get_api_config(self) -> APIConfig:
        """Get API configuration."""
        ...


def load_signing_secret(path: Optional[str] = None) -> bytes:
    """
    Load the token signing secret, creating it when needed.

    Args:
        path: File holding the raw secret bytes. Created with a fresh random
            secret (mode 0600) if it does not exist yet.

    Returns:
        Signing secret bytes
    """
    if not path:
        logger.warning(
            "No SIGNING_SECRET or SIGNING_SECRET_FILE configured - using a random "
            "signing secret, issued tokens will not survive a restart"
        )
        return secrets.token_bytes(SIGNING_SECRET_SIZE)

    secret_file = Path(path)
    if secret_file.exists():
        secret = secret_file.read_bytes()
        if not secret:
            raise ValueError(f"Signing secret file {path} is empty")
        return secret

    secret = secrets.token_bytes(SIGNING_SECRET_SIZE)
    fd = os.open(secret_file, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "wb") as f:
        f.write(secret)
    logger.info(f"Generated new signing secret in {path}")
    return secret


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_auth_config(self) -> AuthConfig:
        """Get authentication configuration from environment variables."""
        # Shared secret is required - no default for security
        shared_secret = os.getenv("SHARED_SECRET")
        if not shared_secret:
            raise ValueError(
                "SHARED_SECRET environment variable is required. "
                "Clients exchange it for a session token at the login path."
            )

        signing_secret_env = os.getenv("SIGNING_SECRET")
        if signing_secret_env:
            signing_secret = signing_secret_env.encode("utf-8")
        else:
            signing_secret = load_signing_secret(os.getenv("SIGNING_SECRET_FILE"))

        validity_hours = int(
            os.getenv("TOKEN_VALIDITY_HOURS", str(DEFAULT_TOKEN_VALIDITY_HOURS))
        )
        if validity_hours <= 0:
            raise ValueError(
                f"TOKEN_VALIDITY_HOURS must be positive, got {validity_hours}"
            )

        return AuthConfig(
            shared_secret=shared_secret,
            signing_secret=signing_secret,
            token_validity_hours=validity_hours,
            login_path=os.getenv("LOGIN_PATH", "/authenticate"),
        )

    def get_api_config(self) -> APIConfig:
        """Get API configuration from environment variables."""
        return APIConfig(
            port=int(os.getenv("API_PORT", "8080")),
            host=os.getenv("API_HOST", "0.0.0.0"),
            debug=os.getenv("API_DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
