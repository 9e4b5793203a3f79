"""
Logging infrastructure.

Provides logging utilities for the service and the worker.
"""
import logging
from typing import Union

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Union[str, int] = "INFO") -> None:
    """
    Install a single stream handler on the root logger.

    Safe to call more than once; later calls only change the level.

    Args:
        level: Log level name or number
    """
    root = logging.getLogger()
    if not any(getattr(h, "_orders_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._orders_handler = True
        root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
