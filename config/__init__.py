"""Configuration management package for certdesk"""

from .loader import ENV_PREFIX, ConfigError, ConfigLoader, get_config_loader

__all__ = [
    "ENV_PREFIX",
    "ConfigError",
    "ConfigLoader",
    "get_config_loader",
]
