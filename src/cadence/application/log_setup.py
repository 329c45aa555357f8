"""
Logging wiring driven by AppConfig.

`verbose` picks the root level and every record is mirrored to
`<log_dir>/cadence.log`.
"""

import logging
import os
from pathlib import Path

from cadence.application.config import AppConfig

LOG_FILE_NAME = "cadence.log"
LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"

logger = logging.getLogger(__name__)

_file_handler: logging.FileHandler | None = None


def level_for(verbose: int) -> int:
    """0 -> WARNING, 1 -> INFO, 2 or more -> DEBUG."""
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(config: AppConfig) -> Path | None:
    """
    Apply config.verbose to the root logger and attach the file handler.

    Calling again with the same log_dir is a no-op for the handler; a new
    log_dir replaces it.

    Returns:
        The log file path, or None when log_dir cannot be written.
    """
    global _file_handler

    root = logging.getLogger()
    root.setLevel(level_for(config.verbose))

    log_file = config.log_dir / LOG_FILE_NAME
    if _file_handler is not None and _file_handler.baseFilename == os.path.abspath(log_file):
        return log_file

    try:
        config.log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        logger.warning("File logging disabled, cannot open %s: %s", log_file, e)
        return None

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if _file_handler is not None:
        root.removeHandler(_file_handler)
        _file_handler.close()
    root.addHandler(handler)
    _file_handler = handler

    logger.debug("Logging to %s at level %s", log_file, logging.getLevelName(root.level))
    return log_file
