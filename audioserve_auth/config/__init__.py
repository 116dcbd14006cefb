"""Configuration providers."""

from .provider import APIConfig, AuthConfig, ConfigProvider, EnvConfigProvider

__all__ = ["APIConfig", "AuthConfig", "ConfigProvider", "EnvConfigProvider"]
