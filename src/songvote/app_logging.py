"""Logging configuration helpers."""

import logging

LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def level_for_environment(environment: str) -> int:
    """Return verbose logging locally so rejected votes and re-adds show up."""
    return logging.DEBUG if environment == "local" else logging.INFO


def configure_logging(level: int = logging.INFO) -> None:
    """Attach one stream handler to the songvote logger and set its level."""
    logger = logging.getLogger("songvote")
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
