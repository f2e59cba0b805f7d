"""Logging configuration for NIK-PARSE.

Structured JSON (or plain text) logging with request_id correlation.

A NIK is personal data, so every record leaving a handler set up here passes
through NIKRedactionFilter first: any standalone run of exactly 16 digits is
cut down to its 6-digit region prefix. The same filter sits on uvicorn's
access logger, whose records carry the raw query string.
"""

import logging
import os
import re
import sys
from collections.abc import Mapping
from contextvars import ContextVar
from typing import Any, Optional

from pythonjsonlogger import jsonlogger


SERVICE_NAME = "nik-parse"

# Loggers owned by the ASGI server; they log outside the request middleware
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

_NIK_RUN = re.compile(r"(?<!\d)(\d{6})\d{10}(?!\d)")
REDACTED_TAIL = "*" * 10

# LogRecord attributes that are never user data
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime"}

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def redact_nik(text: str) -> str:
    """Mask every standalone 16-digit run, keeping its region prefix.

    Example:
        >>> redact_nik("GET /api/nik/parse?nik=3201011509900001")
        'GET /api/nik/parse?nik=320101**********'
    """
    return _NIK_RUN.sub(r"\1" + REDACTED_TAIL, text)


def _redact_value(value: Any) -> Any:
    if isinstance(value, str):
        return redact_nik(value)
    return value


class NIKRedactionFilter(logging.Filter):
    """Rewrites the message, its arguments and string extras of a record.

    Arguments keep their positions and types, so formatters that unpack
    ``record.args`` (uvicorn's access formatter does) still work.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = _redact_value(record.msg)

        if isinstance(record.args, Mapping):
            record.args = {k: _redact_value(v) for k, v in record.args.items()}
        elif isinstance(record.args, tuple):
            record.args = tuple(_redact_value(arg) for arg in record.args)

        for key, value in list(vars(record).items()):
            if key not in _RESERVED_ATTRS and isinstance(value, str):
                setattr(record, key, redact_nik(value))

        return True


class RequestContextFilter(logging.Filter):
    """Stamps the current request_id onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        return True


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter with ``level``/``timestamp`` keys and a service tag."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if "levelname" in log_record:
            log_record["level"] = log_record.pop("levelname")
        if "asctime" in log_record:
            log_record["timestamp"] = log_record.pop("asctime")

        log_record["service"] = SERVICE_NAME

        if hasattr(record, "request_id"):
            log_record["request_id"] = record.request_id


def _ensure_redaction(target: Any) -> None:
    """Attach a NIKRedactionFilter to a logger or handler once."""
    if not any(isinstance(f, NIKRedactionFilter) for f in target.filters):
        target.addFilter(NIKRedactionFilter())


def protect_server_loggers() -> None:
    """Put NIK redaction on the ASGI server's loggers.

    Logger-level filters survive a later ``dictConfig`` from the server, which
    only swaps handlers. Records these loggers propagate to the root handler
    are also covered there.
    """
    for name in SERVER_LOGGERS:
        _ensure_redaction(logging.getLogger(name))


def setup_logging(
    level: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure application logging.

    Args:
        level: Log level name. Defaults to NIK_PARSE_LOG_LEVEL or INFO.
        json_format: Emit JSON lines. Defaults to NIK_PARSE_LOG_FORMAT == "json",
            which is also the default format.
    """
    level = (level or os.getenv("NIK_PARSE_LOG_LEVEL", "INFO")).upper()
    if json_format is None:
        json_format = os.getenv("NIK_PARSE_LOG_FORMAT", "json").lower() == "json"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestContextFilter())
    handler.addFilter(NIKRedactionFilter())

    if json_format:
        handler.setFormatter(
            CustomJsonFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root_logger.addHandler(handler)

    protect_server_loggers()
    # The request middleware logs every request without its query string
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the named logger (typically ``__name__``)."""
    return logging.getLogger(name)


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_request_id() -> str:
    """Current request id, or an empty string outside a request."""
    return request_id_var.get()
