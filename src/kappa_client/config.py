"""
Client configuration.

Holds the credentials and transport settings shared by every request a
connection issues.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional

from ._version import __version__

DEFAULT_BASE_URL = "https://api.twitch.tv/kraken/"


@dataclass
class ClientConfig:
    """
    Configuration for the Kappa API client.

    Setting ``debug`` puts the process-wide ``kappa_client`` logger at DEBUG
    level when a connection is created from this configuration.
    """

    client_id: str
    auth_token: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    debug: bool = False
    user_agent: str = f"kappa-client-python/{__version__}"

    @classmethod
    def from_env(cls, prefix: str = "KAPPA_") -> ClientConfig:
        """
        Build a configuration from environment variables.

        Reads ``<prefix>CLIENT_ID``, ``<prefix>AUTH_TOKEN``, ``<prefix>BASE_URL``,
        ``<prefix>TIMEOUT`` and ``<prefix>DEBUG``.

        Args:
            prefix: Environment variable prefix

        Returns:
            ClientConfig populated from the environment
        """
        debug = os.environ.get(f"{prefix}DEBUG", "").strip().lower() in ("1", "true", "yes", "on")
        timeout = os.environ.get(f"{prefix}TIMEOUT")
        return cls(
            client_id=os.environ.get(f"{prefix}CLIENT_ID", ""),
            auth_token=os.environ.get(f"{prefix}AUTH_TOKEN") or None,
            base_url=os.environ.get(f"{prefix}BASE_URL") or DEFAULT_BASE_URL,
            timeout=float(timeout) if timeout else 30.0,
            debug=debug,
        )
