"""Logging setup for applications and scripts using the Tropipay client.

The library itself only creates named loggers under ``tropipay_client``; call
``configure_logging`` from an application entry point to get output.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging.

    Args:
        level: Log level name. Defaults to the ``LOG_LEVEL`` environment
            variable, then ``INFO``.

    """
    resolved = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    if resolved != "DEBUG":
        # httpx logs every request at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)


__all__ = ["LOG_FORMAT", "configure_logging"]
