"""HTTP handlers for the story feed API."""

import json
import os
from datetime import UTC, datetime, tzinfo
from typing import Any

from .assembler import assemble
from .config import Config
from .errors import AppError, get_error_message
from .logging_config import create_execution_logger, setup_structured_logging
from .models import FeedItem
from .rss import FeedProcessor
from .timefmt import format_relative_time

setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"))

JSON_HEADERS = {"Content-Type": "application/json"}


def _response(status_code: int, body: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": JSON_HEADERS if body is not None else {},
        "body": json.dumps(body) if body is not None else "",
    }


def serialize_item(item: FeedItem, now: datetime, tz: tzinfo) -> dict[str, Any]:
    """Wire form of an item, with its display dates."""
    times = format_relative_time(item.pub_date, now=now, tz=tz)
    return {
        **item.to_dict(),
        "relativeTime": times.relative,
        "absoluteTime": times.absolute,
    }


def rss_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Serve the filtered story list.

    Args:
        event: API Gateway proxy event
        context: Lambda context object

    Returns:
        Proxy response with the feed title, description and safe items
    """
    execution_id = f"rss_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"
    logger = create_execution_logger("rss_handler", execution_id)
    logger.log_execution_start(
        request_id=getattr(context, "aws_request_id", "unknown"),
    )

    try:
        config = Config()
        feed_config = config.get_feed_config()
        tz = config.get_display_tz()
        logger.info("Configuration initialized", feed_url=feed_config.url)

        processor = FeedProcessor(feed_config, execution_id=execution_id)
        feed = processor.fetch_feed()

        items = assemble(
            feed.items,
            logger=create_execution_logger("assembler", execution_id),
        )

        now = datetime.now(UTC)
        body = {
            "success": True,
            "title": feed.title,
            "description": feed.description,
            "items": [serialize_item(item, now, tz) for item in items],
        }
        logger.log_execution_end(
            success=True,
            metrics={"items_found": len(feed.items), "items_served": len(items)},
        )
        return _response(200, body)

    except AppError as e:
        status_code = e.status_code or 500
        logger.error(
            f"Error fetching RSS feed: {e.message}",
            error_type=e.error_type,
            status_code=status_code,
        )
        logger.log_execution_end(success=False)
        return _response(
            status_code,
            {
                "success": False,
                "error": "Failed to fetch RSS feed",
                "detail": get_error_message(e),
            },
        )
    except Exception as e:
        logger.error(f"Unexpected error fetching RSS feed: {e}", exc_info=True)
        logger.log_execution_end(success=False)
        return _response(
            500,
            {
                "success": False,
                "error": "Failed to fetch RSS feed",
                "detail": get_error_message(e),
            },
        )


def csp_report_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Accept a Content-Security-Policy violation report.

    Valid reports are logged and answered with 204. A body that is JSON but
    lacks the ``csp-report`` object gets a 400; a body that is not JSON at
    all is logged and still answered with 204.
    """
    logger = create_execution_logger("csp_report")

    try:
        body = json.loads(event.get("body") or "")
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"Error processing CSP report: {e}")
        return _response(204)

    report = body.get("csp-report") if isinstance(body, dict) else None
    if not isinstance(report, dict):
        return _response(400, {"error": "Invalid CSP report format"})

    logger.warning(
        "CSP Violation Report",
        document_uri=report.get("document-uri"),
        violated_directive=report.get("violated-directive"),
        blocked_uri=report.get("blocked-uri"),
        source_file=report.get("source-file"),
        line_number=report.get("line-number"),
        column_number=report.get("column-number"),
    )
    return _response(204)
