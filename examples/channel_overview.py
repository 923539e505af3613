#!/usr/bin/env python3
"""
Example: Print an overview of a channel.

This example demonstrates how to:
1. Configure the client from KAPPA_* environment variables
2. Look up a channel and its live stream
3. Collect a limited list of followers
4. Stream every highlight through a callback without materializing the list

Requirements:
- KAPPA_CLIENT_ID set to a registered client id
- KAPPA_AUTH_TOKEN set for endpoints that need authorization (subscriptions)
"""

import logging
import sys

from kappa_client import Kappa, KappaError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main(channel_id: str) -> int:
    with Kappa.from_env() as kappa:
        try:
            channel = kappa.channels.get(channel_id)
            if channel is None:
                logger.error(f"Channel {channel_id} does not exist")
                return 1

            logger.info(f"{channel.display_name}: {channel.status} ({channel.game_name})")

            stream = channel.stream()
            if stream is not None:
                logger.info(f"Live with {stream.viewer_count} viewers")
            else:
                logger.info("Offline")

            followers = channel.followers(limit=10)
            logger.info(f"Latest followers: {', '.join(user.name for user in followers)}")

            channel.videos(
                broadcast_type="highlight",
                on_item=lambda video: logger.info(f"Highlight: {video.title} ({video.view_count} views)"),
            )
        except KappaError as e:
            logger.error(f"Request failed: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else "44322889"))
