"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this module only
configures the root logger once, from ``settings.LOG_LEVEL``.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for the application."""
    desired_level = (level or settings.LOG_LEVEL).upper()
    logging.root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=desired_level, handlers=[handler])

    # SQL echo is driven by DEBUG; keep the engine logger quiet otherwise.
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
