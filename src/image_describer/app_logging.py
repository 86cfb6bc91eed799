"""Logging configuration helpers."""

import logging

LOGGER_NAME = "image_describer"
LOG_FORMAT = "%(asctime)s %(levelname)s: %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a single stream handler to the package logger and set its level.

    Calling this again only updates the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
