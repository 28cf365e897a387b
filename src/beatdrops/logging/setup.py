"""Root logger configuration."""

import logging
import sys

from beatdrops.constants import ServiceName
from beatdrops.logging.formatter import JSONLogFormatter, RequestIDFilter


def configure_logging(service: ServiceName = ServiceName.API, level: int = logging.INFO) -> None:
    """Replace the root logger's handlers with one JSON handler on stdout."""
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONLogFormatter(service=service))
    handler.addFilter(RequestIDFilter())
    root.addHandler(handler)
