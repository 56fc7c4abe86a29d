"""Structured logging configuration for the story feed service."""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

LOGGER_NAMESPACE = "storyfeed"

# LogRecord attributes copied into the JSON entry when present
CONTEXT_FIELDS = (
    "execution_id",
    "component",
    "feed_url",
    "item_title",
    "verdict",
    "status_code",
    "error_type",
    "metrics",
    "document_uri",
    "violated_directive",
    "blocked_uri",
    "source_file",
    "line_number",
    "column_number",
)


class StructuredFormatter(logging.Formatter):
    """Render log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ExecutionLogger:
    """Logger bound to an execution ID and a component name."""

    def __init__(self, execution_id: str, component: str = "main"):
        """Initialize execution logger.

        Args:
            execution_id: Unique identifier for this request or run
            component: Component name (e.g., 'feed_processor', 'assembler')
        """
        self.execution_id = execution_id
        self.component = component
        self.logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{component}")
        self.start_time: datetime | None = None

    def _log_with_context(
        self, level: int, message: str, exc_info: bool = False, **kwargs
    ) -> None:
        extra = {
            "execution_id": self.execution_id,
            "component": self.component,
            **kwargs,
        }
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def info(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        self._log_with_context(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def log_execution_start(self, **kwargs) -> None:
        """Log execution start and remember the start time."""
        self.start_time = datetime.now(UTC)
        self.info(
            f"Starting {self.component} execution",
            execution_start=self.start_time.isoformat(),
            **kwargs,
        )

    def log_execution_end(self, success: bool = True, **kwargs) -> None:
        """Log execution end with its duration."""
        end_time = datetime.now(UTC)

        duration_seconds = None
        if self.start_time:
            duration_seconds = (end_time - self.start_time).total_seconds()

        self.info(
            f"Completed {self.component} execution",
            execution_end=end_time.isoformat(),
            execution_duration_seconds=duration_seconds,
            execution_success=success,
            **kwargs,
        )

    def log_feed_fetch(self, feed_url: str, items_count: int) -> None:
        self.info(
            f"Fetched feed: {items_count} items found",
            feed_url=feed_url,
            items_count=items_count,
        )

    def log_item_verdict(self, item_title: str, verdict: str) -> None:
        """Log a classifier verdict; rejections are warnings."""
        level = logging.WARNING if verdict == "rejected" else logging.DEBUG
        self._log_with_context(
            level,
            f"Item {verdict}: {item_title}",
            item_title=item_title,
            verdict=verdict,
        )

    def log_metrics(self, metrics: dict[str, Any]) -> None:
        self.info("Execution metrics", metrics=metrics)


def setup_structured_logging(log_level: str = "INFO") -> None:
    """Setup structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(console_handler)

    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(level)
    namespace_logger.propagate = True


def create_execution_logger(
    component: str, execution_id: str | None = None
) -> ExecutionLogger:
    """Create an execution logger for a component.

    Args:
        component: Component name
        execution_id: Optional execution ID (will generate one if not provided)

    Returns:
        ExecutionLogger instance
    """
    if not execution_id:
        execution_id = f"exec_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"

    return ExecutionLogger(execution_id, component)
