"""Structured logging: JSON formatter, request-id filter and setup."""

from beatdrops.logging.formatter import JSONLogFormatter, RequestIDFilter, request_id_var
from beatdrops.logging.setup import configure_logging

__all__ = ["JSONLogFormatter", "RequestIDFilter", "configure_logging", "request_id_var"]
