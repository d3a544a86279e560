"""
Structured logging for the REST API and the notification hub.

Call sites pass fields as keyword arguments:

    logger.info("Order created", order_id=12, table_id=4, total="46.00")

Records carry those fields plus the request correlation ID, and are
rendered as one JSON object per line (LOG_FORMAT=json, the production
default) or as a colored single line for the terminal (LOG_FORMAT=text).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings

# Loggers whose own output is not about orders or connections
_QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "httpx": logging.WARNING,
    "websockets": logging.INFO,
}


def _request_id(record: logging.LogRecord) -> str | None:
    request_id = getattr(record, "request_id", None)
    if not request_id or request_id == "-":
        return None
    return request_id


def _fields(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "fields", None) or {}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, for log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        request_id = _request_id(record)
        if request_id:
            entry["request_id"] = request_id
        # Fields sit at top level; the keys above win on a name clash
        for key, value in _fields(record).items():
            entry.setdefault(key, value)
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        if settings.debug:
            entry["at"] = f"{record.pathname}:{record.lineno}"
        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Colored single-line output for local runs."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"
    DIM = "\033[2m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        parts = [f"{color}{clock} {record.levelname:<8}{self.RESET}"]

        request_id = _request_id(record)
        if request_id:
            parts.append(f"{self.DIM}{request_id[:8]}{self.RESET}")
        parts.append(f"{record.name}: {record.getMessage()}")

        fields = _fields(record)
        if fields:
            parts.append(" ".join(f"{k}={v}" for k, v in fields.items()))

        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """
    Logger that accepts arbitrary keyword fields on every level method.

    debug/info/warning/error/critical all funnel into _log, so only that
    one hook is overridden.
    """

    def _log(  # type: ignore[override]
        self,
        level: int,
        msg: object,
        args: Any,
        exc_info: Any = None,
        extra: dict | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        **fields: Any,
    ) -> None:
        extra = dict(extra or {})
        extra["fields"] = fields
        super()._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )


logging.setLoggerClass(StructuredLogger)


def _resolve_level() -> int:
    if settings.log_level:
        return logging.getLevelName(settings.log_level.upper())
    return logging.DEBUG if settings.debug else logging.INFO


def _resolve_formatter() -> logging.Formatter:
    log_format = settings.log_format or ("json" if settings.environment == "production" else "text")
    return JsonFormatter() if log_format == "json" else ConsoleFormatter()


def setup_logging() -> None:
    """
    Install the stdout handler on the root logger.
    Called once by the application lifespan.
    """
    from shared.infrastructure.correlation import CorrelationIdFilter

    level = _resolve_level()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(_resolve_formatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger.

        logger = get_logger(__name__)
        logger.error("Commit failed", table_id=4, exc_info=True)
    """
    return logging.getLogger(name)  # type: ignore


# Named loggers shared across modules
rest_api_logger = get_logger("rest_api")
orders_logger = get_logger("rest_api.orders")
ws_gateway_logger = get_logger("ws_gateway")
