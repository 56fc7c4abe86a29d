"""Configuration management for the story feed service."""

import os
from dataclasses import dataclass
from datetime import UTC, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_FEED_URL = "https://www.cbc.ca/webfeed/rss/rss-topstories"


@dataclass
class FeedConfig:
    """Configuration for retrieving the upstream feed."""

    url: str = DEFAULT_FEED_URL
    timeout: int = 30
    user_agent: str = "StoryFeed/1.0 (RSS story reader)"


class Config:
    """Main configuration manager."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.feed_url = os.getenv("FEED_URL", DEFAULT_FEED_URL).strip()
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.display_timezone = os.getenv("DISPLAY_TIMEZONE", "UTC").strip()

        timeout = os.getenv("FEED_TIMEOUT", "30")
        try:
            self.feed_timeout = int(timeout)
        except ValueError as e:
            raise ValueError(f"FEED_TIMEOUT must be an integer, got {timeout!r}") from e

    def get_feed_config(self) -> FeedConfig:
        """Get feed retrieval configuration."""
        return FeedConfig(url=self.feed_url, timeout=self.feed_timeout)

    def get_display_tz(self) -> tzinfo:
        """Resolve the timezone used to render dates."""
        if self.display_timezone.upper() == "UTC":
            return UTC
        try:
            return ZoneInfo(self.display_timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(
                f"Unknown DISPLAY_TIMEZONE: {self.display_timezone}"
            ) from e
