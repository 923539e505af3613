"""
Kraken v5 domain models.

Each model validates the JSON returned by the API and fails with a
:class:`~kappa_client.runtime.errors.DecodeError` when a required field is
missing or malformed. Models compare and hash by type and ``id``.

Models built through a client keep a reference to it, which backs the lazy
sub-fetches (``channel.stream()``, ``channel.followers()``, ...). Each of
those issues additional requests.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import quote

from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator

from ..accumulation import AccumulationOptions
from ..runtime.errors import ArgumentError, DecodeError


def escape(value: Any) -> str:
    """Escape a value for use as a single path segment."""
    return quote(str(value), safe="")


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _bind_nested(value: Any, query: Any) -> None:
    # Resources may sit directly in a field or inside lists and dicts
    if isinstance(value, Resource):
        value.bind(query)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _bind_nested(item, query)
    elif isinstance(value, dict):
        for item in value.values():
            _bind_nested(item, query)


class Resource(BaseModel):
    """Base class for API resources identified by ``_id``."""

    id: str = Field(alias="_id")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    _query: Any = PrivateAttr(default=None)

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("*")
    @classmethod
    def timestamps_in_utc(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return _as_utc(value)
        return value

    @classmethod
    def from_json(cls, data: Any, query: Any = None):
        """
        Decode a resource from API JSON.

        Args:
            data: JSON object for one resource
            query: Client used for lazy sub-fetches

        Returns:
            Decoded resource bound to ``query``

        Raises:
            DecodeError: If the JSON does not match the resource schema
        """
        try:
            resource = cls.model_validate(data)
        except ValidationError as e:
            raise DecodeError(cls.__name__, str(e), e) from e
        return resource.bind(query)

    def bind(self, query: Any):
        """Attach ``query`` to this resource and to nested resources."""
        self._query = query
        for name in type(self).model_fields:
            _bind_nested(getattr(self, name), query)
        return self

    def _client(self) -> Any:
        if self._query is None:
            raise ArgumentError("query", f"{type(self).__name__} {self.id} is not bound to a client")
        return self._query

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))


class User(Resource):
    """
    A member of the community with an account.

    Broadcasting users own a channel and a stream; viewers follow or
    subscribe to channels.
    """

    name: str
    display_name: Optional[str] = None
    type: Optional[str] = None
    bio: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, alias="logo")
    created_at: datetime
    updated_at: Optional[datetime] = None

    def channel(self) -> Optional[Channel]:
        """Get the channel owned by this user. Incurs a request."""
        return self._client().channels.get(self.id)

    def stream(self) -> Optional[Stream]:
        """Get this user's live stream, or None if offline. Incurs a request."""
        return self._client().streams.get(self.id)

    def is_streaming(self) -> bool:
        return self.stream() is not None


class Channel(Resource):
    """
    The home location for a user's content.

    Channels have a stream, store videos, and carry status and display
    information set by their owner.
    """

    name: str
    display_name: Optional[str] = None
    status: Optional[str] = None
    game_name: Optional[str] = Field(default=None, alias="game")
    mature: bool = False
    url: Optional[str] = None
    logo_url: Optional[str] = Field(default=None, alias="logo")
    background_url: Optional[str] = Field(default=None, alias="background")
    banner_url: Optional[str] = Field(default=None, alias="banner")
    video_banner_url: Optional[str] = Field(default=None, alias="video_banner")
    followers_count: Optional[int] = Field(default=None, alias="followers")
    views: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    teams: List[Any] = Field(default_factory=list)

    @field_validator("mature", mode="before")
    @classmethod
    def default_mature(cls, value: Any) -> Any:
        return False if value is None else value

    def stream(self) -> Optional[Stream]:
        """Get the live stream of this channel, or None if offline. Incurs a request."""
        return self._client().streams.get(self.id)

    def is_streaming(self) -> bool:
        """
        Does this channel currently have a live stream?

        Fetches the stream; call :meth:`stream` instead to use the stream itself.
        """
        return self.stream() is not None

    def user(self) -> Optional[User]:
        """Get the owner of this channel. Incurs a request."""
        return self._client().users.get(self.id)

    def followers(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        on_item: Optional[Callable[[User], None]] = None
    ) -> Optional[List[User]]:
        """
        Get the users following this channel.

        The follower list can be very large; pass ``limit`` or ``on_item``.

        Args:
            limit: Maximum number of users returned
            offset: Offset into the follower list
            on_item: Optional callback receiving each user

        Returns:
            List of users if no callback was given, None otherwise
        """
        query = self._client()
        return query.connection.accumulate(
            AccumulationOptions(
                path=f"channels/{escape(self.id)}/follows",
                json="follows",
                sub_json="user",
                create=lambda data: User.from_json(data, query),
                limit=limit,
                offset=offset,
            ),
            on_item,
        )

    def videos(
        self,
        broadcast_type: Optional[Union[str, List[str]]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        on_item: Optional[Callable[[Video], None]] = None
    ) -> Optional[List[Video]]:
        """Get the videos of this channel, most recent first. See :meth:`Videos.for_channel`."""
        return self._client().videos.for_channel(
            self.id, broadcast_type=broadcast_type, limit=limit, offset=offset, on_item=on_item
        )

    def subscriptions(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        on_item: Optional[Callable[[Subscription], None]] = None
    ) -> Optional[List[Subscription]]:
        """Get the subscriptions to this channel. Requires an authorized token."""
        return self._client().channels.subscriptions(self.id, limit=limit, offset=offset, on_item=on_item)


SUB_LEVELS = {
    1000: "$4.99",
    2000: "$9.99",
    3000: "$24.99",
}


class Subscription(Resource):
    """A user's subscription to a channel."""

    created_at: datetime
    user: User
    sub_plan: int = 1000

    @field_validator("sub_plan", mode="before")
    @classmethod
    def plan_number(cls, value: Any) -> Any:
        # Prime subscriptions are billed at the first tier
        if value is None or value == "" or value == "Prime":
            return 1000
        return value

    @property
    def sub_level(self) -> str:
        """Price label of the subscription tier."""
        return SUB_LEVELS.get(self.sub_plan, f"n/a: {self.sub_plan}")


class Stream(Resource):
    """A live broadcast on a channel."""

    game_name: Optional[str] = Field(default=None, alias="game")
    viewer_count: int = Field(default=0, alias="viewers")
    video_height: Optional[int] = None
    average_fps: Optional[float] = None
    delay: Optional[int] = None
    is_playlist: bool = False
    stream_type: Optional[str] = None
    preview_urls: Dict[str, str] = Field(default_factory=dict, alias="preview")
    created_at: datetime
    channel: Channel


class ChannelRef(Resource):
    """Short channel description embedded in other resources."""

    name: str
    display_name: Optional[str] = None


class Video(Resource):
    """A recorded broadcast, highlight or upload."""

    title: Optional[str] = None
    description: Optional[str] = None
    broadcast_id: Optional[int] = None
    broadcast_type: Optional[str] = None
    status: Optional[str] = None
    url: Optional[str] = None
    view_count: int = Field(default=0, alias="views")
    length: Optional[int] = None
    game_name: Optional[str] = Field(default=None, alias="game")
    preview_urls: Dict[str, str] = Field(default_factory=dict, alias="preview")
    created_at: datetime
    published_at: Optional[datetime] = None
    owner: Optional[ChannelRef] = Field(default=None, alias="channel")

    @field_validator("preview_urls", mode="before")
    @classmethod
    def preview_template(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, str):
            return {"template": value}
        return value

    @property
    def channel_id(self) -> Optional[str]:
        return self.owner.id if self.owner is not None else None

    @property
    def channel_name(self) -> Optional[str]:
        return self.owner.name if self.owner is not None else None

    @property
    def channel_display_name(self) -> Optional[str]:
        return self.owner.display_name if self.owner is not None else None

    def channel(self) -> Optional[Channel]:
        """Get the channel that owns this video. Incurs a request."""
        if self.owner is None:
            return None
        return self._client().channels.get(self.owner.id)
