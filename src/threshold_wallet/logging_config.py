"""Structured logging configuration with wallet call context.

This module provides structured JSON logging with:
- Correlation IDs for tracing one host call across components
- Contextual fields (caller, transaction)
- Consistent log formatting
"""
from __future__ import annotations

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

from .config import WalletSettings, load_settings

# Context variables for call tracking
correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
caller_var: ContextVar[Optional[str]] = ContextVar("caller", default=None)
transaction_id_var: ContextVar[Optional[int]] = ContextVar("transaction_id", default=None)

_CONTEXT_FIELDS = ("correlation_id", "caller", "transaction_id")

_RESERVED_ATTRS = frozenset((
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "taskName",
    "exc_info",
    "exc_text",
    "stack_info",
) + _CONTEXT_FIELDS)


class WalletContextFilter(logging.Filter):
    """Logging filter that adds the current call context to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        record.caller = caller_var.get()
        record.transaction_id = transaction_id_var.get()
        return True


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for name in _CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Extra fields passed through `extra=`
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON structured logging (True) or simple format (False)
        log_file: Optional file path for logging output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - "
            "[%(correlation_id)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(WalletContextFilter())
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(WalletContextFilter())
        root_logger.addHandler(file_handler)


def setup_logging_from_settings(
    settings: Optional[WalletSettings] = None,
    log_file: Optional[str] = None,
) -> None:
    """Configure logging from THRESHOLD_WALLET_LOG_* settings."""
    settings = settings or load_settings()
    setup_logging(
        level=settings.log_level,
        json_format=settings.json_logs,
        log_file=log_file,
    )


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return f"cor_{uuid.uuid4().hex[:16]}"


class LogContext:
    """Context manager for temporary logging context."""

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        caller: Optional[str] = None,
        transaction_id: Optional[int] = None,
    ):
        self.correlation_id = correlation_id
        self.caller = caller
        self.transaction_id = transaction_id
        self._tokens: list = []

    def __enter__(self) -> "LogContext":
        # Keep an outer correlation id when the host already set one
        correlation_id = self.correlation_id or correlation_id_var.get() or generate_correlation_id()
        self._tokens = [
            (correlation_id_var, correlation_id_var.set(correlation_id)),
            (caller_var, caller_var.set(self.caller)),
            (transaction_id_var, transaction_id_var.set(self.transaction_id)),
        ]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        for var, token in reversed(self._tokens):
            var.reset(token)
        self._tokens = []


def bind_transaction(transaction_id: int) -> None:
    """Attach a transaction id to the current logging context."""
    transaction_id_var.set(transaction_id)
