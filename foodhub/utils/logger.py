"""Application-wide logging configuration.

Request logs go to Axiom through the middleware; this module configures the
standard library loggers used by services (``logging.getLogger(__name__)``).
"""

import logging
import sys

from foodhub.config import settings

_configured: bool = False


def setup_logging(level: int | None = None) -> logging.Logger:
    """Configure the root logger once.

    Args:
        level: Explicit log level; defaults to LOG_LEVEL, or DEBUG when DEBUG is on

    Returns:
        logging.Logger: Configured root logger
    """
    global _configured

    if level is None:
        level = logging.DEBUG if settings.DEBUG else logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root: logging.Logger = logging.getLogger()
    if _configured:
        root.setLevel(level)
        return root

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("aiosmtplib").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.DEBUG else logging.WARNING)

    _configured = True
    return root
