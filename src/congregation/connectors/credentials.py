"""Credential providers.

Both providers answer get_credentials() with (access_token, instance_url).
The client asks once per operation, so a provider may rotate tokens between
calls.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from congregation.config import Config, config
from congregation.connectors.base import AuthenticationError


def _checked(access_token: Optional[str], instance_url: Optional[str], source: str) -> Tuple[str, str]:
    if not access_token:
        raise AuthenticationError(f"No access token configured ({source})", connector_name=source)
    if not instance_url:
        raise AuthenticationError(f"No instance URL configured ({source})", connector_name=source)
    return access_token, instance_url.rstrip("/")


@dataclass
class StaticCredentials:
    """Fixed token and instance URL."""

    access_token: str
    instance_url: str

    def get_credentials(self) -> Tuple[str, str]:
        return _checked(self.access_token, self.instance_url, "static")


class EnvironmentCredentials:
    """Token and instance URL from configuration.

    Reads CONGREGATION_ACCESS_TOKEN and CONGREGATION_INSTANCE_URL (via the
    global config, which loads .env).
    """

    def __init__(self, settings: Optional[Config] = None):
        self.settings = settings or config

    def get_credentials(self) -> Tuple[str, str]:
        return _checked(self.settings.access_token, self.settings.instance_url, "environment")
