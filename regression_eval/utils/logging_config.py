import logging
import sys

PACKAGE_LOGGER = "regression_eval"
LOG_FORMAT = "%(asctime)s | %(levelname).1s | %(name)-30.30s | %(message)s"


def set_package_level(level: int | str) -> logging.Logger:
    """Set the level of the `regression_eval` logger without touching handlers."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    return logger


def setup_logging(level: int | str = logging.INFO, stream=None) -> logging.Logger:
    """Install one stream handler on the root logger for scripts and notebooks.

    Library callers that already configure logging should only use
    set_package_level.
    """
    root = logging.getLogger()
    root.setLevel(level)

    while root.handlers:
        root.removeHandler(root.handlers[0])

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    set_package_level(level)
    return root
