"""
Structured Logging Utilities

Root logger setup plus request-scoped context, so every log line written
while serving a request carries that request's id.
"""

import logging
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_NAME = "blog.log"

# Context variable for request-scoped logging context
_logging_context: ContextVar[Dict[str, Any]] = ContextVar('logging_context', default={})

_configured = False


def configure_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """
    Configure the root logger once.

    Args:
        level: Root log level name
        log_dir: If given, also write to a rotating log file in this directory
    """
    global _configured
    if _configured:
        return

    log_formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    console_handler.addFilter(ContextFilter())
    root_logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        # File handler with rotation (10MB per file, keep 5 backups)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(log_formatter)
        file_handler.addFilter(ContextFilter())
        root_logger.addHandler(file_handler)

    _configured = True
    logging.getLogger(__name__).info(
        f"Logging initialized{f': {log_dir / LOG_FILE_NAME}' if log_dir else ''}"
    )


class ContextFilter(logging.Filter):
    """Copy the current logging context onto every record as attributes."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _logging_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class StructuredLogger:
    """
    Wrapper around standard logger that adds structured context.

    Usage:
        logger = StructuredLogger(__name__)
        logger.info("Post created", extra={"post_id": post.id})
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _add_context(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        context = _logging_context.get().copy()
        if extra:
            context.update(extra)
        return context

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.logger.debug(message, extra=self._add_context(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.logger.info(message, extra=self._add_context(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.logger.warning(message, extra=self._add_context(extra))

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        self.logger.error(message, extra=self._add_context(extra), exc_info=exc_info)


def set_logging_context(**kwargs):
    """
    Set logging context for the current request/operation.

    This context will be automatically included in all log records
    within the current context (typically a request).

    Example:
        set_logging_context(request_id="abc-123", path="/posts")
    """
    context = _logging_context.get().copy()
    context.update(kwargs)
    _logging_context.set(context)


def get_logging_context() -> Dict[str, Any]:
    """Return a copy of the current logging context."""
    return _logging_context.get().copy()


def clear_logging_context():
    """Clear the logging context."""
    _logging_context.set({})
