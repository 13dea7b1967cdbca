"""Library utilities for the content CLI."""

from .secret_redactor import SecretRedactor
from .file_log import FileLog, LogErrorLevel, default_log_path
from .json_logger import (
    JSONFormatter,
    StructuredLoggerAdapter,
    setup_logging,
    get_structured_logger,
    job_logger,
)

__all__ = [
    # Redaction
    "SecretRedactor",
    # Audit log
    "FileLog",
    "LogErrorLevel",
    "default_log_path",
    # Logging
    "JSONFormatter",
    "StructuredLoggerAdapter",
    "setup_logging",
    "get_structured_logger",
    "job_logger",
]
