"""Filters fetched feed items down to the ones safe to render."""

from collections.abc import Iterable, Mapping
from typing import Any

from .logging_config import ExecutionLogger, create_execution_logger
from .models import FeedItem, Verdict
from .safety import classify


def assemble(
    raw_items: Iterable[FeedItem | Mapping[str, Any]],
    logger: ExecutionLogger | None = None,
) -> list[FeedItem]:
    """Keep the items whose content passes the safety check.

    Args:
        raw_items: Items in provider order, as FeedItems or loose mappings
        logger: Optional logger for rejections, one is created if omitted

    Returns:
        Safe items in their original relative order
    """
    logger = logger or create_execution_logger("assembler")
    kept: list[FeedItem] = []
    rejected = 0

    for position, raw in enumerate(raw_items):
        try:
            item = raw if isinstance(raw, FeedItem) else FeedItem.from_mapping(raw)
            verdict = classify(item.effective_content)
        except Exception as e:
            logger.error(
                f"Skipping malformed item at position {position}: {e}",
                error_type=type(e).__name__,
            )
            rejected += 1
            continue

        logger.log_item_verdict(str(item.title or "Untitled"), verdict.value)
        if verdict is Verdict.REJECTED:
            rejected += 1
            continue
        kept.append(item)

    logger.log_metrics({"items_kept": len(kept), "items_rejected": rejected})
    return kept
