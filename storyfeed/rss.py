"""RSS feed retrieval and normalization for the story feed service."""

from urllib.parse import urlparse

import feedparser
import requests
from bs4 import BeautifulSoup

from .config import FeedConfig
from .errors import HTTPError, NetworkError, ParseError, RateLimitError, ServerError, ValidationError
from .logging_config import create_execution_logger
from .models import Feed, FeedItem
from .values import to_story_link


class FeedProcessor:
    """Downloads a feed and normalizes its entries into FeedItems."""

    def __init__(self, config: FeedConfig | None = None, execution_id: str | None = None):
        """Initialize FeedProcessor with configuration.

        Args:
            config: Feed retrieval settings, defaults to FeedConfig()
            execution_id: Execution ID for logging context
        """
        self.config = config or FeedConfig()
        self.logger = create_execution_logger("feed_processor", execution_id)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": self.config.user_agent})

        self.logger.info("FeedProcessor initialized", timeout=self.config.timeout)

    def fetch_feed(self, feed_url: str | None = None) -> Feed:
        """Fetch and parse a single RSS/Atom feed.

        Args:
            feed_url: URL of the feed, defaults to the configured URL

        Returns:
            Feed with its items in document order

        Raises:
            ValidationError: If the feed URL is not HTTPS
            NetworkError: If the host cannot be reached or times out
            RateLimitError: If the host answers 429
            ServerError: If the host answers 5xx
            HTTPError: If the host answers any other error status
            ParseError: If the document is malformed and yields no entries
        """
        feed_url = feed_url or self.config.url
        self.logger.info("Starting to fetch feed", feed_url=feed_url)

        parsed_url = urlparse(feed_url)
        if parsed_url.scheme != "https":
            error_msg = f"Feed URL must use HTTPS protocol: {feed_url}"
            self.logger.error(error_msg, feed_url=feed_url)
            raise ValidationError(error_msg, field="url")

        content = self._download(feed_url)

        # Keep raw markup; the safety check decides what gets dropped
        document = feedparser.parse(
            content, sanitize_html=False, resolve_relative_uris=False
        )
        if document.bozo and not document.entries:
            details = str(getattr(document, "bozo_exception", "unknown error"))
            self.logger.error(
                f"Feed could not be parsed: {details}", feed_url=feed_url
            )
            raise ParseError("Feed could not be parsed", details=details)
        if document.bozo:
            self.logger.warning(
                f"Feed parsing warning for {feed_url}: "
                f"{getattr(document, 'bozo_exception', '')}",
                feed_url=feed_url,
            )

        items = []
        for entry in document.entries:
            try:
                items.append(self.normalize_item(entry))
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                self.logger.warning(
                    f"Failed to normalize entry from {feed_url}: {e}",
                    feed_url=feed_url,
                )
                continue

        feed_meta = document.get("feed", {})
        feed = Feed(
            title=feed_meta.get("title", ""),
            description=feed_meta.get("subtitle", "") or feed_meta.get("description", ""),
            items=items,
        )
        self.logger.log_feed_fetch(feed_url, len(items))
        return feed

    def _download(self, feed_url: str) -> bytes:
        try:
            response = self.session.get(feed_url, timeout=self.config.timeout)
        except requests.Timeout as e:
            self.logger.error(f"Timed out fetching {feed_url}", feed_url=feed_url)
            raise NetworkError(f"Request timed out after {self.config.timeout} seconds") from e
        except requests.RequestException as e:
            self.logger.error(f"Failed to download feed {feed_url}: {e}", feed_url=feed_url)
            raise NetworkError(f"Unable to reach feed host: {e}") from e

        status = response.status_code
        if status == 429:
            raise RateLimitError(
                "Too many requests to the feed host",
                retry_after=_retry_after(response.headers.get("Retry-After")),
            )
        if status >= 500:
            self.logger.error("Feed host error", feed_url=feed_url, status_code=status)
            raise ServerError(status, f"Feed host returned {status}")
        if status >= 400:
            self.logger.error("Feed request rejected", feed_url=feed_url, status_code=status)
            raise HTTPError(status, f"Feed request failed with status {status}")

        self.logger.info(
            "Feed downloaded successfully",
            feed_url=feed_url,
            status_code=status,
            content_length=len(response.content),
        )
        return response.content

    def normalize_item(self, entry) -> FeedItem:
        """Normalize a feedparser entry into a FeedItem.

        The markup is kept as-is in ``content`` so the safety check sees it;
        ``content_snippet`` holds its plain-text rendering.
        """
        content = None
        if entry.get("content"):
            content = entry["content"][0].get("value") or None
        if content is None:
            content = entry.get("summary") or entry.get("description") or None

        snippet = self.clean_html_content(content) if content else None

        raw_link = entry.get("link", "")
        link = to_story_link(raw_link) or ""
        if raw_link and not link:
            self.logger.warning(f"Dropping invalid story link: {raw_link}")

        return FeedItem(
            title=entry.get("title", ""),
            link=link,
            pub_date=entry.get("published", "") or entry.get("updated", ""),
            content_snippet=snippet,
            content=content,
        )

    def clean_html_content(self, content: str) -> str:
        """Remove HTML tags from content and normalize whitespace.

        Args:
            content: Raw content that may contain HTML

        Returns:
            Clean text content without HTML tags
        """
        if not content:
            return ""

        if "<" not in content and ">" not in content:
            return " ".join(content.split())

        soup = BeautifulSoup(content, "html.parser")

        for tag in soup(["script", "style"]):
            tag.decompose()

        text = soup.get_text(separator=" ")
        return " ".join(text.split())


def _retry_after(value: str | None) -> int | None:
    if value and value.strip().isdigit():
        return int(value.strip())
    return None
