"""
Kraken v5 resources.

Domain models decoded from v5 responses and the query objects that fetch
them.
"""

from .models import Resource, User, Channel, ChannelRef, Subscription, Stream, Video
from .queries import Channels, Users, Streams, Videos, BROADCAST_TYPES

__all__ = [
    "Resource",
    "User",
    "Channel",
    "ChannelRef",
    "Subscription",
    "Stream",
    "Video",
    "Channels",
    "Users",
    "Streams",
    "Videos",
    "BROADCAST_TYPES",
]
