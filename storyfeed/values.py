"""Validated string types for story identifiers, links and dates."""

from urllib.parse import urlparse

from dateutil import parser as date_parser

from .timefmt import ZONE_ABBREVIATIONS


class StoryID(str):
    """Non-empty story identifier."""

    @classmethod
    def create(cls, value: str) -> "StoryID":
        if not value or not isinstance(value, str):
            raise ValueError("Invalid story ID")
        return cls(value)


class StoryLink(str):
    """Absolute URL pointing at a story."""

    @classmethod
    def create(cls, value: str) -> "StoryLink":
        if not value or not isinstance(value, str):
            raise ValueError("Invalid story link")
        try:
            parsed = urlparse(value)
        except ValueError as e:
            raise ValueError(f"Invalid URL format: {value}") from e
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Invalid URL format: {value}")
        return cls(value)


class DateString(str):
    """Date text known to parse as a calendar instant."""

    @classmethod
    def create(cls, value: str) -> "DateString":
        if not value or not isinstance(value, str):
            raise ValueError("Invalid date string")
        try:
            date_parser.parse(value, tzinfos=ZONE_ABBREVIATIONS)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid date format: {value}") from e
        return cls(value)


def to_story_link(value: str) -> StoryLink | None:
    """Return a StoryLink, or None if the value is not a valid URL."""
    try:
        return StoryLink.create(value)
    except ValueError:
        return None


def to_date_string(value: str) -> DateString | None:
    """Return a DateString, or None if the value does not parse."""
    try:
        return DateString.create(value)
    except ValueError:
        return None
