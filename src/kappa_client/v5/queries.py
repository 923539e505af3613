"""
Kraken v5 query objects.

Each query object wraps one family of endpoints. They are reached through
the client facade, e.g. ``client.channels.get("44322889")``.
"""

from __future__ import annotations
from typing import Any, Callable, List, Optional, Sequence, Union

from ..accumulation import AccumulationOptions
from ..runtime.errors import ArgumentError
from ..status import status_map
from .models import Channel, Stream, Subscription, User, Video, escape

BROADCAST_TYPES = ("archive", "highlight", "upload")


class Channels:
    """Query class for finding channels."""

    def __init__(self, query: Any):
        self._query = query

    def get(self, channel_id: str) -> Optional[Channel]:
        """
        Get a channel by id.

        Args:
            channel_id: Channel id

        Returns:
            The channel, or None if it does not exist
        """
        path = f"channels/{escape(channel_id)}"

        # HTTP 422 is returned for channels tied to a retired legacy account.
        return status_map(
            {404: None, 422: None},
            lambda: Channel.from_json(self._query.connection.get(path), self._query),
        )

    def subscriptions(
        self,
        channel_id: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        on_item: Optional[Callable[[Subscription], None]] = None
    ) -> Optional[List[Subscription]]:
        """
        Get the subscriptions to a channel.

        Requires a token authorized for the channel.

        Args:
            channel_id: Channel id
            limit: Maximum number of subscriptions returned
            offset: Offset into the subscription list
            on_item: Optional callback receiving each subscription

        Returns:
            List of subscriptions if no callback was given, None otherwise
        """
        query = self._query
        return query.connection.accumulate(
            AccumulationOptions(
                path=f"channels/{escape(channel_id)}/subscriptions",
                json="subscriptions",
                create=lambda data: Subscription.from_json(data, query),
                limit=limit,
                offset=offset,
            ),
            on_item,
        )

    def is_subscribed(self, user_id: str, channel_id: str) -> bool:
        """Is the user subscribed to the channel?"""
        path = f"channels/{escape(channel_id)}/subscriptions/{escape(user_id)}"

        def check() -> bool:
            self._query.connection.get(path)
            return True

        return status_map({400: False, 401: False, 404: False}, check)


class Users:
    """Query class for finding users."""

    def __init__(self, query: Any):
        self._query = query

    def get(self, user_id: str) -> Optional[User]:
        """Get a user by id, or None if the user does not exist."""
        path = f"users/{escape(user_id)}"
        return status_map(
            {404: None, 422: None},
            lambda: User.from_json(self._query.connection.get(path), self._query),
        )


class Streams:
    """Query class for finding live streams."""

    def __init__(self, query: Any):
        self._query = query

    def get(self, channel_id: str) -> Optional[Stream]:
        """
        Get the live stream of a channel.

        Args:
            channel_id: Channel id

        Returns:
            The stream, or None if the channel is offline or does not exist
        """
        path = f"streams/{escape(channel_id)}"

        def fetch() -> Optional[Stream]:
            data = self._query.connection.get(path)
            stream = data.get("stream") if isinstance(data, dict) else None
            if not stream:
                return None
            return Stream.from_json(stream, self._query)

        return status_map({404: None, 422: None}, fetch)


class Videos:
    """Query class for finding videos."""

    def __init__(self, query: Any):
        self._query = query

    def get(self, video_id: str) -> Optional[Video]:
        """Get a video by id, or None if it does not exist."""
        path = f"videos/{escape(video_id)}"
        return status_map(
            {404: None},
            lambda: Video.from_json(self._query.connection.get(path), self._query),
        )

    def for_channel(
        self,
        channel_id: str,
        broadcast_type: Optional[Union[str, Sequence[str]]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        on_item: Optional[Callable[[Video], None]] = None
    ) -> Optional[List[Video]]:
        """
        Get the videos of a channel, most recently created first.

        Args:
            channel_id: Channel id
            broadcast_type: One or more of ``archive``, ``highlight``, ``upload``
            limit: Maximum number of videos returned
            offset: Offset into the video list
            on_item: Optional callback receiving each video

        Returns:
            List of videos if no callback was given, None otherwise

        Raises:
            ArgumentError: If ``broadcast_type`` holds an unknown type
        """
        params = {}
        if broadcast_type is not None:
            types = [broadcast_type] if isinstance(broadcast_type, str) else list(broadcast_type)
            unknown = [t for t in types if t not in BROADCAST_TYPES]
            if not types or unknown:
                raise ArgumentError(
                    "broadcast_type",
                    f"Unknown broadcast type {unknown or types}, expected one of {', '.join(BROADCAST_TYPES)}",
                )
            params["broadcast_type"] = ",".join(types)

        query = self._query
        return query.connection.accumulate(
            AccumulationOptions(
                path=f"channels/{escape(channel_id)}/videos",
                json="videos",
                create=lambda data: Video.from_json(data, query),
                limit=limit,
                offset=offset,
                params=params,
            ),
            on_item,
        )
