"""Logging configuration."""

import logging
import os
import sys
from datetime import datetime

from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> None:
    """Configure application logging.

    - Console output: every record goes to stdout
    - Level: taken from settings.log_level
    - File output: a daily file under settings.log_dir, when it is set
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        log_file = os.path.join(
            settings.log_dir, f"relay_{datetime.now().strftime('%Y%m%d')}.log"
        )
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )

    # httpx logs every request at INFO; keep it for debug mode only
    if not settings.debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)
