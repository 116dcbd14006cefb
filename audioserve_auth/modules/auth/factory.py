"""
Authentication Factory following Black Box Design principles.

This factory:
- Builds the authenticator from configuration
- Returns only the Authenticator interface
"""

import logging

from .auth import SharedSecretAuthenticator
from .interfaces import Authenticator
from ...config.provider import AuthConfig, ConfigProvider

logger = logging.getLogger(__name__)


class AuthFactory:
    """Composition root for the authentication stack."""

    @staticmethod
    def build(config_provider: ConfigProvider) -> Authenticator:
        """
        Build the authenticator.

        Args:
            config_provider: Configuration provider

        Returns:
            Authenticator (hides implementation details)
        """
        return AuthFactory.from_config(config_provider.get_auth_config())

    @staticmethod
    def from_config(auth_config: AuthConfig) -> Authenticator:
        """Build the authenticator from an already loaded AuthConfig."""
        logger.info(
            f"Building shared secret authenticator (login path {auth_config.login_path}, "
            f"token validity {auth_config.token_validity_hours}h)"
        )
        return SharedSecretAuthenticator(
            shared_secret=auth_config.shared_secret,
            signing_secret=auth_config.signing_secret,
            token_validity_hours=auth_config.token_validity_hours,
            login_path=auth_config.login_path,
        )
