import logging
import sys

APP_LOGGER = "reconned"


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a stdout handler to the package logger. Safe to call twice."""
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
