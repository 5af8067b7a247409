"""
Logging setup for the court_scribe logger tree.
"""
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional, Tuple

from config import LOG_DIR, LOG_LEVEL


def setup_logging(
    log_dir: Optional[str] = None,
    level: Optional[str] = None,
    console: bool = True,
) -> Tuple[logging.Logger, str]:
    """
    Configure the court_scribe logger with a rotating file handler.

    Args:
        log_dir: Directory for the log file. Defaults to LOG_DIR.
        level: Level name such as "INFO". Defaults to LOG_LEVEL.
        console: Also echo warnings and errors to stderr

    Returns:
        Tuple of (logger, path to the log file)
    """
    log_dir = log_dir or LOG_DIR
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "court_scribe.log")

    logger = logging.getLogger("court_scribe")
    logger.setLevel((level or LOG_LEVEL).upper())

    if not logger.handlers:
        fmt = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
        handler.setFormatter(fmt)
        logger.addHandler(handler)

        if console:
            stream = logging.StreamHandler()
            stream.setLevel(logging.WARNING)
            stream.setFormatter(logging.Formatter("  %(levelname)s: %(message)s"))
            logger.addHandler(stream)

    return logger, log_path
