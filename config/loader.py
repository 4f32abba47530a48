"""Configuration loader for the certdesk API client

Every setting is read from a ``CERTDESK_``-prefixed environment variable,
for example ``CERTDESK_API_URL``. A ``.env`` file in the working directory
can provide them too; variables already set in the environment win over the
file. Unset or blank variables fall back to the default.

A variable that is set but unusable (a timeout of "soon", an API URL
without a scheme) raises ConfigError naming the variable instead of being
silently replaced by the default.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

import httpx
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "CERTDESK_"


class ConfigError(ValueError):
    """A configuration variable is set to an unusable value"""

    def __init__(self, env_var: str, value: str, expected: str):
        self.env_var = env_var
        self.value = value
        super().__init__(f"{env_var}={value!r} is invalid: expected {expected}")


class ConfigLoader:
    """Reads typed settings from the environment and an optional .env file

    Args:
        env_path: Path to the .env file. Defaults to '.env' in the current directory.
        prefix: Prefix prepended to every setting name
    """

    def __init__(self, env_path: Optional[str] = None, prefix: str = ENV_PREFIX):
        self.prefix = prefix
        self.env_path = Path(env_path) if env_path else Path(".env")
        if self.env_path.exists():
            load_dotenv(dotenv_path=self.env_path, override=False)
            logger.debug(f"Loaded environment variables from {self.env_path}")

    def env_var(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def raw(self, name: str) -> Optional[str]:
        """Return the stripped value of a setting, or None when unset or blank"""
        value = os.getenv(self.env_var(name))
        if value is None or not value.strip():
            return None
        return value.strip()

    def get_str(self, name: str, default: str) -> str:
        value = self.raw(name)
        return default if value is None else value

    def get_timeout(self, name: str, default: float) -> float:
        """Read a timeout in seconds, which must be a positive number"""
        value = self.raw(name)
        if value is None:
            return default
        try:
            seconds = float(value)
        except ValueError:
            raise ConfigError(self.env_var(name), value, "a number of seconds") from None
        if seconds <= 0:
            raise ConfigError(self.env_var(name), value, "a positive number of seconds")
        return seconds

    def get_url(self, name: str, default: str) -> str:
        """Read an absolute http(s) URL, returned without a trailing slash"""
        value = self.raw(name)
        if value is None:
            return default
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL:
            raise ConfigError(self.env_var(name), value, "an http(s) URL") from None
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigError(self.env_var(name), value, "an http(s) URL")
        return value.rstrip("/")

    def get_path(self, name: str, default: str) -> str:
        """Read a file path, expanding a leading ``~``"""
        return str(Path(self.get_str(name, default)).expanduser())

    def get_choice(self, name: str, default: str, choices: Iterable[str]) -> str:
        """Read a case-insensitive value from a fixed set, returned lowercase"""
        value = self.raw(name)
        if value is None:
            return default
        allowed = tuple(choices)
        if value.lower() not in allowed:
            raise ConfigError(self.env_var(name), value, f"one of {', '.join(allowed)}")
        return value.lower()


_config_loader = None

def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
