"""Data models for the story feed service."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class FeedItem:
    """Represents a single RSS/Atom feed item."""

    title: str
    link: str
    pub_date: str
    content_snippet: str | None = None
    content: str | None = None

    @property
    def effective_content(self) -> str:
        """Markup that would be rendered for this item."""
        return self.content or self.content_snippet or ""

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "FeedItem":
        """Build an item from a loose mapping, using wire or snake_case keys.

        Missing title, link and publication date become empty strings.
        """

        def pick(*keys: str) -> Any:
            for key in keys:
                value = raw.get(key)
                if value is not None:
                    return value
            return None

        return cls(
            title=pick("title") or "",
            link=pick("link") or "",
            pub_date=pick("pubDate", "pub_date") or "",
            content_snippet=pick("contentSnippet", "content_snippet"),
            content=pick("content"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the wire field names."""
        return {
            "title": self.title,
            "link": self.link,
            "pubDate": self.pub_date,
            "contentSnippet": self.content_snippet,
            "content": self.content,
        }


class Verdict(Enum):
    """Outcome of the content safety check."""

    SAFE = "safe"
    REJECTED = "rejected"


@dataclass(frozen=True)
class RelativeTime:
    """Short relative label plus the long form used as a tooltip."""

    relative: str
    absolute: str


@dataclass
class Feed:
    """A fetched feed with its items in provider order."""

    title: str
    description: str
    items: list[FeedItem] = field(default_factory=list)
