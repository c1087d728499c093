"""Structured logging for the pk11uri CLI and embedding applications.

Provides:
- JSON-formatted logs for log aggregation systems
- Human-readable console logs for interactive use
- URI context propagation, so every line names the URI being processed

Usage:
    from pk11uri.observability.logging import LogContext, configure_logging

    configure_logging(json_format=False, level="WARNING")

    with LogContext(uri=uri):
        parse(uri)  # advisories logged with uri attached
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

# Context variable for the URI currently being processed
uri_var: contextvars.ContextVar[str] = contextvars.ContextVar("uri", default="")


class JsonFormatter(logging.Formatter):
    """JSON log formatter with URI context support.

    Output format:
    {
        "timestamp": "2026-01-10T12:34:56.789Z",
        "level": "WARNING",
        "logger": "pk11uri.core.advisories",
        "message": "pkcs11 warning: ...",
        "module": "advisories",
        "function": "emit",
        "line": 42,
        "uri": "pkcs11:x-muppet=cookie<^^>monster!"
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        uri = uri_var.get()
        if uri:
            log_data["uri"] = uri

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        # Add extra fields from record
        # Skip standard LogRecord attributes
        standard_attrs = {
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
            "pathname",
            "process",
            "processName",
            "relativeCreated",
            "stack_info",
            "exc_info",
            "exc_text",
            "thread",
            "threadName",
            "taskName",
            "message",
        }
        for key, value in record.__dict__.items():
            if key not in standard_attrs and not key.startswith("_"):
                try:
                    json.dumps(value)  # Verify it's JSON serializable
                    log_data[key] = value
                except (TypeError, ValueError):
                    log_data[key] = str(value)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for development.

    Output format:
    2026-01-10 12:34:56 | WARNING | pk11uri.core.advisories | pkcs11 warning: ... | uri=pkcs11:...
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname

        if self.use_colors:
            color = self.COLORS.get(level, "")
            level = f"{color}{level}{self.RESET}"

        message = record.getMessage()

        uri = uri_var.get()
        context = f" | uri={uri}" if uri else ""

        result = f"{timestamp} | {level:8} | {record.name} | {message}{context}"

        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)

        return result


def configure_logging(
    json_format: bool = False,
    level: str = "WARNING",
    use_colors: bool = True,
) -> None:
    """Configure application-wide logging.

    Args:
        json_format: Use JSON format (for log aggregation)
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_colors: Use ANSI colors in console format
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)

    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(ConsoleFormatter(use_colors=use_colors))

    root_logger.addHandler(handler)


class LogContext:
    """Context manager attaching a URI to every log line emitted inside it.

    Usage:
        with LogContext(uri="pkcs11:token=my-token"):
            logger.warning("...")  # Includes uri
    """

    def __init__(self, uri: str) -> None:
        self.uri = uri
        self._token: contextvars.Token[str] | None = None

    def __enter__(self) -> LogContext:
        self._token = uri_var.set(self.uri)
        return self

    def __exit__(self, *args: Any) -> None:
        if self._token is not None:
            uri_var.reset(self._token)
            self._token = None
