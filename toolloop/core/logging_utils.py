"""
Logging setup for toolloop.
Always logs to stderr; also logs to <data_dir>/logs/toolloop.log when that
directory can be created.
"""
from __future__ import annotations

import logging

from .config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(settings: Settings):
    handlers = [logging.StreamHandler()]
    log_file = settings.data_dir / "logs" / "toolloop.log"
    file_error = None
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    except OSError as exc:
        file_error = exc

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.ERROR),
        format=LOG_FORMAT,
        handlers=handlers,
    )
    logger = logging.getLogger(__name__)
    if file_error is not None:
        logger.warning("File logging disabled, cannot use %s: %s", log_file, file_error)
    else:
        logger.info("Logging initialized at %s", log_file)
