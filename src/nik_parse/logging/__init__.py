"""Logging configuration module for NIK-PARSE."""

from nik_parse.logging.setup import (
    NIKRedactionFilter,
    get_logger,
    protect_server_loggers,
    redact_nik,
    setup_logging,
)

__all__ = [
    "NIKRedactionFilter",
    "get_logger",
    "protect_server_loggers",
    "redact_nik",
    "setup_logging",
]
