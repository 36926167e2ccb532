"""Process-wide logging setup shared by the API and the delivery worker."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """Send every log record to stdout using the shared format."""

    if level is None:
        from cofound.config import get_settings

        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stdout, force=True)


__all__ = ["LOG_FORMAT", "configure_logging"]
