"""Structured JSON logging for bulk operations.

Outputs logs in JSON format for easy parsing by log aggregation tools.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from .secret_redactor import SecretRedactor


# Attributes every LogRecord carries; anything else came in through `extra`.
_RECORD_ATTRIBUTES = frozenset([
    'name', 'msg', 'args', 'created', 'filename', 'funcName',
    'levelname', 'levelno', 'lineno', 'module', 'msecs',
    'pathname', 'process', 'processName', 'relativeCreated',
    'stack_info', 'exc_info', 'exc_text', 'thread', 'threadName',
    'message', 'asctime', 'taskName',
])


class JSONFormatter(logging.Formatter):
    """Format log records as JSON with structured fields."""

    STANDARD_FIELDS = [
        "job_id", "content_item_id", "hub_id", "queue",
        "status", "attempts", "duration_ms", "error_code",
    ]

    def __init__(self, redact_secrets: bool = True):
        super().__init__()
        self.redact_secrets = redact_secrets

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": self._redact(record.getMessage()),
        }

        for field in self.STANDARD_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_obj[field] = value

        if record.exc_info:
            log_obj["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": self._redact(str(record.exc_info[1])) if record.exc_info[1] else None,
                "traceback": self._redact(self.formatException(record.exc_info)),
            }

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES or key.startswith('_') or key in self.STANDARD_FIELDS:
                continue
            log_obj[key] = self._redact(value) if isinstance(value, str) else value

        return json.dumps(log_obj, default=str, ensure_ascii=False)

    def _redact(self, text: Any) -> Any:
        """Redact credentials from text if enabled."""
        if not self.redact_secrets or not isinstance(text, str):
            return text
        return SecretRedactor.redact(text)


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds structured context to all log messages."""

    def __init__(self, logger: logging.Logger, extra: Optional[dict] = None):
        super().__init__(logger, extra or {})

    def process(self, msg, kwargs):
        """Add extra context to log record."""
        extra = kwargs.get('extra', {})
        extra.update(self.extra)
        kwargs['extra'] = extra
        return msg, kwargs

    def with_context(self, **context) -> 'StructuredLoggerAdapter':
        """Create a new adapter with additional context."""
        new_extra = {**self.extra, **context}
        return StructuredLoggerAdapter(self.logger, new_extra)


def setup_logging(level: str = "INFO", log_format: str = "text", redact_secrets: bool = True):
    """
    Configure the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" for one JSON object per line, anything else for plain text
        redact_secrets: Whether to redact credentials from JSON logs
    """
    if log_format == "json":
        formatter: logging.Formatter = JSONFormatter(redact_secrets=redact_secrets)
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Human-readable output goes to stdout; keep diagnostics on stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Set level for common noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_structured_logger(name: str, **context) -> StructuredLoggerAdapter:
    """
    Get a structured logger with optional context.

    Args:
        name: Logger name
        **context: Default context fields (job_id, hub_id, etc.)

    Returns:
        StructuredLoggerAdapter with context
    """
    logger = logging.getLogger(name)
    return StructuredLoggerAdapter(logger, context)


def job_logger(
    job_id: str,
    job_type: str,
    content_item_id: Optional[str] = None
) -> StructuredLoggerAdapter:
    """Create a logger pre-configured for a specific server-side job."""
    return get_structured_logger(
        f"content_cli.jobs.{job_type}",
        job_id=job_id,
        job_type=job_type,
        content_item_id=content_item_id,
    )
