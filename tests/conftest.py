"""
Test bootstrap:
- Stub the HTTP transport with a Mock session serving queued responses
- Provide a default configuration and connection
- Provide sample v5 resource JSON
"""
import json
from unittest.mock import Mock

import pytest
import requests

from kappa_client import ClientConfig, V5Connection


def make_response(url, status=200, body="", params=None):
    """Build a real requests.Response as the transport would return it."""
    response = requests.Response()
    response.status_code = status
    response._content = body.encode("utf-8") if isinstance(body, str) else body
    response.encoding = "utf-8"
    response.url = requests.Request("GET", url, params=params).prepare().url
    return response


class ResponseQueue:
    """Serves queued (status, body) pairs to a mocked session's ``get``."""

    def __init__(self):
        self.pending = []
        self.requests = []

    def add(self, body, status=200):
        if not isinstance(body, (str, bytes)):
            body = json.dumps(body)
        self.pending.append((status, body))
        return self

    def __call__(self, url, headers=None, params=None, timeout=None):
        self.requests.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        assert self.pending, f"Unexpected request to {url}"
        status, body = self.pending.pop(0)
        return make_response(url, status, body, params)

    @property
    def urls(self):
        return [r["url"] for r in self.requests]


@pytest.fixture
def responses():
    """Queue of responses served by the mocked session."""
    return ResponseQueue()


@pytest.fixture
def session(responses):
    """Mock requests.Session whose ``get`` serves the response queue."""
    session = Mock(spec=requests.Session)
    session.get.side_effect = responses
    return session


@pytest.fixture
def config():
    """Minimal client configuration."""
    return ClientConfig(client_id="test-client-id")


@pytest.fixture
def connection(config, session):
    """V5 connection on the mocked session."""
    return V5Connection(config, session=session)


@pytest.fixture
def user_json():
    return {
        "_id": 44322889,
        "bio": "Just a gamer playing games and chatting.",
        "created_at": "2013-06-03T19:12:02Z",
        "display_name": "dallas",
        "logo": "https://static-cdn.jtvnw.net/jtv_user_pictures/dallas-profile_image-1a2c906ee2c35f12-300x300.png",
        "name": "dallas",
        "type": "staff",
        "updated_at": "2016-12-13T16:31:55.958584Z",
    }


@pytest.fixture
def channel_json():
    return {
        "_id": "44322889",
        "background": None,
        "banner": None,
        "broadcaster_language": "en",
        "created_at": "2013-06-03T19:12:02Z",
        "display_name": "dallas",
        "followers": 40,
        "game": "Final Fantasy XV",
        "language": "en",
        "logo": "https://static-cdn.jtvnw.net/jtv_user_pictures/dallas-profile_image-1a2c906ee2c35f12-300x300.png",
        "mature": None,
        "name": "dallas",
        "partner": False,
        "status": "The Finalest of Fantasies",
        "updated_at": "2016-12-06T22:02:05Z",
        "url": "https://www.twitch.tv/dallas",
        "video_banner": None,
        "views": 232,
    }


@pytest.fixture
def subscription_json(user_json):
    return {
        "_id": "ac2f1248993eaf97e71721458bd88aae66c92330",
        "created_at": "2016-04-06T04:44:31Z",
        "sub_plan": "1000",
        "sub_plan_name": "Channel Subscription (mr_woodchuck)",
        "user": user_json,
    }


@pytest.fixture
def stream_json(channel_json):
    return {
        "_id": 23932774784,
        "game": "BATMAN - The Telltale Series",
        "viewers": 7254,
        "video_height": 720,
        "average_fps": 60,
        "delay": 0,
        "created_at": "2016-12-14T22:49:56Z",
        "is_playlist": False,
        "stream_type": "live",
        "preview": {
            "small": "https://static-cdn.jtvnw.net/previews-ttv/live_user_dansgaming-80x45.jpg",
            "template": "https://static-cdn.jtvnw.net/previews-ttv/live_user_dansgaming-{width}x{height}.jpg",
        },
        "channel": channel_json,
    }


@pytest.fixture
def video_json():
    return {
        "_id": "v106400740",
        "broadcast_id": 23932774784,
        "broadcast_type": "highlight",
        "channel": {"_id": "44322889", "display_name": "dallas", "name": "dallas"},
        "created_at": "2016-12-15T20:33:02Z",
        "description": "Protect your chat with AutoMod!",
        "game": "Gaming Talk Shows",
        "length": 134,
        "preview": {"template": "https://static-cdn.jtvnw.net/s3_vods/twitch/106400740/preview-{width}x{height}.jpg"},
        "published_at": "2016-12-15T20:33:02Z",
        "status": "recorded",
        "title": "AutoMod Overview",
        "url": "https://www.twitch.tv/twitch/v/106400740",
        "views": 204,
    }
