"""
Kappa client facade.

The Kappa class is the primary entry point: it owns the connection and
exposes the v5 query objects.

Example:
    ```python
    from kappa_client import Kappa, ClientConfig

    with Kappa(ClientConfig(client_id="abc123")) as kappa:
        channel = kappa.channels.get("44322889")
        if channel is not None:
            for video in channel.videos(broadcast_type="highlight", limit=10):
                print(video.title)

            # Stream followers without holding them all in memory
            channel.followers(on_item=lambda user: print(user.name))
    ```
"""

from __future__ import annotations
import logging
from typing import Dict, Optional, Type

import requests

from .config import ClientConfig
from .connection import Connection, V2Connection, V5Connection
from .runtime.errors import ArgumentError
from .v5.queries import Channels, Streams, Users, Videos

logger = logging.getLogger(__name__)

CONNECTIONS: Dict[str, Type[Connection]] = {
    "v2": V2Connection,
    "v5": V5Connection,
}


class Kappa:
    """
    Main Kappa facade.

    Attributes:
        connection: Connection used for every request
        channels: Channel queries
        users: User queries
        streams: Stream queries
        videos: Video queries
    """

    def __init__(
        self,
        config: ClientConfig,
        api_version: str = "v5",
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the facade.

        Args:
            config: Client configuration
            api_version: ``v5`` (default) or ``v2``, selects the Accept header
            session: Optional shared requests.Session

        Raises:
            ArgumentError: If the configuration or API version is invalid
        """
        connection_class = CONNECTIONS.get(api_version)
        if connection_class is None:
            raise ArgumentError("api_version", f"Unsupported API version: {api_version}")

        self.connection = connection_class(config, session=session)
        self.channels = Channels(self)
        self.users = Users(self)
        self.streams = Streams(self)
        self.videos = Videos(self)

        logger.debug(f"Kappa client ready for {self.connection.base_url} ({api_version})")

    @classmethod
    def from_env(cls, api_version: str = "v5") -> Kappa:
        """Create a client configured from ``KAPPA_*`` environment variables."""
        return cls(ClientConfig.from_env(), api_version=api_version)

    def close(self) -> None:
        """Close the underlying connection."""
        self.connection.close()

    def __enter__(self) -> Kappa:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
