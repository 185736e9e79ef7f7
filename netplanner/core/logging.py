"""
Network Design Planner - Structured Logging Setup
Copyright (C) 2024
SPDX-License-Identifier: GPL-3.0-or-later

Configure structured logging for planner operations.
Includes correlation ID support for request tracing.
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

# Correlation ID context variable (thread-safe and async-safe)
_correlation_id: ContextVar[str | None] = ContextVar('correlation_id', default=None)

# Extra record attributes rendered by both formatters
CONTEXT_FIELDS = ("user", "design_id", "template_id", "config_id", "version", "operation", "duration_ms")


def get_correlation_id() -> str | None:
    """Get the current correlation ID."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Set the correlation ID for the current context."""
    _correlation_id.set(correlation_id)


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


class CorrelationIdFilter(logging.Filter):
    """Logging filter that adds correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _correlation_id.get() or ""
        return True


class StructuredFormatter(logging.Formatter):
    """JSON-structured log formatter for production use."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if getattr(record, "correlation_id", ""):
            log_entry["correlation_id"] = record.correlation_id

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")

        cid_prefix = ""
        correlation_id = getattr(record, "correlation_id", "")
        if correlation_id:
            # Short form of the UUID for readability
            cid_prefix = f"[{correlation_id[:8]}] "

        context_parts = [
            f"{field}={getattr(record, field)}"
            for field in CONTEXT_FIELDS
            if hasattr(record, field)
        ]
        context = f" [{', '.join(context_parts)}]" if context_parts else ""

        base = f"{timestamp} {record.levelname:8} {cid_prefix}{record.name}: {record.getMessage()}{context}"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


def setup_logging(
    level: str = "INFO",
    structured: bool = False,
    log_file: str | None = None
) -> logging.Logger:
    """
    Configure application logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: Use JSON structured logging (for production)
        log_file: Optional file path for log output

    Returns:
        Root logger configured for the application
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    root_logger.handlers.clear()

    correlation_filter = CorrelationIdFilter()
    root_logger.addFilter(correlation_filter)

    formatter = StructuredFormatter() if structured else HumanReadableFormatter()

    # stderr keeps stdout free for process managers
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(correlation_filter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(correlation_filter)
        root_logger.addHandler(file_handler)

    # Suppress noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("transitions").setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name."""
    return logging.getLogger(name)


# =============================================================================
# Operator-Focused Logging
# =============================================================================


class OperatorLogEntry:
    """
    Structured log entry for operator-actionable events.

    Usage:
        operator_log.error(
            what="Database connection failed",
            impact="Designs and templates cannot be saved.",
            action="Check DATABASE_URL and that the database is reachable"
        )
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def _format_operator_message(
        self,
        what: str,
        impact: str = "",
        still_works: str = "",
        action: str = "",
    ) -> str:
        parts = [f"WHAT: {what}"]
        if impact:
            parts.append(f"IMPACT: {impact}")
        if still_works:
            parts.append(f"STILL WORKS: {still_works}")
        if action:
            parts.append(f"ACTION: {action}")
        return " | ".join(parts)

    def warning(
        self,
        what: str,
        impact: str,
        still_works: str = "",
        action: str = "",
        **extra
    ) -> None:
        """Log warning with impact and recommended action."""
        msg = self._format_operator_message(what, impact, still_works, action)
        self._logger.warning(msg, extra=extra)

    def error(
        self,
        what: str,
        impact: str,
        still_works: str = "",
        action: str = "",
        **extra
    ) -> None:
        """Log error with impact and required action."""
        msg = self._format_operator_message(what, impact, still_works, action)
        self._logger.error(msg, extra=extra)


operator_log = OperatorLogEntry(logging.getLogger("operator"))


def log_database_failure(error: Exception) -> None:
    """Log database connection failure with operator guidance."""
    operator_log.error(
        what=f"Database request failed: {type(error).__name__}",
        impact="Designs, templates and generated configurations cannot be read or saved.",
        still_works="Health endpoint and API documentation.",
        action="Check DATABASE_URL and that the database server is reachable",
    )


def log_startup_degraded(components: list) -> None:
    """Log degraded startup with operator guidance."""
    operator_log.warning(
        what="API started in degraded mode",
        impact=f"Some features may not work correctly. Degraded: {', '.join(components)}",
        action="Review startup logs for specific issues",
    )
