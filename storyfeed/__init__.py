"""Story feed: fetches an RSS feed and serves the items that are safe to render."""

__version__ = "1.0.0"
