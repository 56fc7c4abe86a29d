"""Unit tests for feed retrieval and normalization."""

from unittest.mock import Mock, patch

import feedparser
import pytest
import requests

from storyfeed.config import FeedConfig
from storyfeed.errors import HTTPError, NetworkError, ParseError, RateLimitError, ServerError, ValidationError
from storyfeed.models import Feed
from storyfeed.rss import FeedProcessor

FEED_URL = "https://www.cbc.ca/webfeed/rss/rss-topstories"

RSS_DOCUMENT = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>CBC | Top Stories News</title>
    <link>https://www.cbc.ca/news</link>
    <description>FOR PERSONAL USE ONLY</description>
    <item>
      <title>Test Story</title>
      <link>https://www.cbc.ca/news/test-story</link>
      <pubDate>Mon, 15 Jan 2024 10:30:00 EST</pubDate>
      <description><![CDATA[<p>Safe <b>content</b> here.</p>]]></description>
    </item>
    <item>
      <title>Rich Story</title>
      <link>https://www.cbc.ca/news/rich-story</link>
      <pubDate>Mon, 15 Jan 2024 09:00:00 EST</pubDate>
      <description>Short description</description>
      <content:encoded><![CDATA[<p onclick="track()">Full body</p>]]></content:encoded>
    </item>
  </channel>
</rss>
"""


def make_response(status_code=200, content=RSS_DOCUMENT, headers=None):
    response = Mock()
    response.status_code = status_code
    response.content = content
    response.headers = headers or {}
    return response


@pytest.fixture
def processor():
    return FeedProcessor(FeedConfig(url=FEED_URL, timeout=5))


class TestFeedProcessorUnit:
    """Unit tests for FeedProcessor."""

    def test_fetch_feed_parses_rss_2_0(self, processor):
        with patch.object(processor.session, "get", return_value=make_response()) as get:
            feed = processor.fetch_feed()

        get.assert_called_once_with(FEED_URL, timeout=5)
        assert isinstance(feed, Feed)
        assert feed.title == "CBC | Top Stories News"
        assert feed.description == "FOR PERSONAL USE ONLY"
        assert [item.title for item in feed.items] == ["Test Story", "Rich Story"]

        first = feed.items[0]
        assert first.link == "https://www.cbc.ca/news/test-story"
        assert first.pub_date == "Mon, 15 Jan 2024 10:30:00 EST"
        assert first.content == "<p>Safe <b>content</b> here.</p>"
        assert first.content_snippet == "Safe content here."

    def test_encoded_content_is_kept_unsanitized(self, processor):
        with patch.object(processor.session, "get", return_value=make_response()):
            feed = processor.fetch_feed()

        rich = feed.items[1]
        assert 'onclick="track()"' in rich.content
        assert rich.content_snippet == "Full body"

    def test_user_agent_header_is_set(self, processor):
        assert processor.session.headers["User-Agent"] == FeedConfig().user_agent

    def test_non_https_url_is_rejected(self, processor):
        with pytest.raises(ValidationError) as exc_info:
            processor.fetch_feed("http://www.cbc.ca/webfeed/rss/rss-topstories")

        assert exc_info.value.field == "url"

    def test_timeout_maps_to_network_error(self, processor):
        with patch.object(processor.session, "get", side_effect=requests.Timeout("slow")):
            with pytest.raises(NetworkError) as exc_info:
                processor.fetch_feed()

        assert "timed out" in exc_info.value.message
        assert exc_info.value.status_code is None

    def test_connection_failure_maps_to_network_error(self, processor):
        with patch.object(
            processor.session, "get", side_effect=requests.ConnectionError("refused")
        ):
            with pytest.raises(NetworkError):
                processor.fetch_feed()

    def test_429_maps_to_rate_limit_error(self, processor):
        response = make_response(429, b"", {"Retry-After": "120"})
        with patch.object(processor.session, "get", return_value=response):
            with pytest.raises(RateLimitError) as exc_info:
                processor.fetch_feed()

        assert exc_info.value.status_code == 429
        assert exc_info.value.retry_after == 120

    def test_429_with_http_date_retry_after(self, processor):
        response = make_response(429, b"", {"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"})
        with patch.object(processor.session, "get", return_value=response):
            with pytest.raises(RateLimitError) as exc_info:
                processor.fetch_feed()

        assert exc_info.value.retry_after is None

    def test_5xx_maps_to_server_error(self, processor):
        with patch.object(processor.session, "get", return_value=make_response(503, b"")):
            with pytest.raises(ServerError) as exc_info:
                processor.fetch_feed()

        assert exc_info.value.status_code == 503

    def test_4xx_maps_to_http_error(self, processor):
        with patch.object(processor.session, "get", return_value=make_response(404, b"")):
            with pytest.raises(HTTPError) as exc_info:
                processor.fetch_feed()

        assert exc_info.value.status_code == 404

    def test_malformed_document_maps_to_parse_error(self, processor):
        broken = feedparser.FeedParserDict(
            bozo=1,
            bozo_exception=Exception("syntax error"),
            entries=[],
            feed=feedparser.FeedParserDict(),
        )
        with (
            patch.object(processor.session, "get", return_value=make_response()),
            patch("storyfeed.rss.feedparser.parse", return_value=broken),
        ):
            with pytest.raises(ParseError) as exc_info:
                processor.fetch_feed()

        assert exc_info.value.details == "syntax error"


class TestNormalizeItemUnit:
    """Unit tests for entry normalization."""

    def test_atom_entry_uses_content_value(self):
        processor = FeedProcessor()
        entry = feedparser.FeedParserDict(
            title="Atom Story",
            link="https://example.com/atom",
            updated="2024-01-01T10:00:00Z",
            summary="Summary",
            content=[{"value": "<div>Body <script>x()</script></div>"}],
        )

        item = processor.normalize_item(entry)

        assert item.content == "<div>Body <script>x()</script></div>"
        assert item.content_snippet == "Body"
        assert item.pub_date == "2024-01-01T10:00:00Z"

    def test_entry_without_fields(self):
        processor = FeedProcessor()

        item = processor.normalize_item(feedparser.FeedParserDict())

        assert item.title == ""
        assert item.link == ""
        assert item.pub_date == ""
        assert item.content is None
        assert item.content_snippet is None

    def test_clean_html_content_plain_text(self):
        processor = FeedProcessor()

        assert processor.clean_html_content("  multiple\n\tspaces  ") == "multiple spaces"
        assert processor.clean_html_content("") == ""

    def test_invalid_link_becomes_empty_string(self):
        processor = FeedProcessor()
        entry = feedparser.FeedParserDict(
            title="Story", link="/news/relative-only", summary="<p>Body</p>"
        )

        with patch.object(processor.logger, "warning") as warning:
            item = processor.normalize_item(entry)

        assert item.link == ""
        assert item.content == "<p>Body</p>"
        warning.assert_called_once()
