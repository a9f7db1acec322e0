import logging
import os
from snaplink.config import LOG_PATH


def get_logger(name="snaplink"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)
        os.makedirs(os.path.dirname(LOG_PATH) or ".", exist_ok=True)
        handler = logging.FileHandler(LOG_PATH, encoding="utf-8", delay=True)
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            "%Y-%m-%d %H:%M:%S"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    return logger


def resolve_logger(logger, default):
    """Return the injected logger if one was given, else the module default."""
    return logger if logger is not None else default
