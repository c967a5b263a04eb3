"""JSON logging configuration and per-domain log files for enrollment runs."""

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from pythonjsonlogger import jsonlogger

DOMAIN_LOG_FORMAT = "%(asctime)s %(message)s"
DOMAIN_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
DOMAIN_LOG_MODE = 0o644


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with focused field set.

    Includes only 6 fields: timestamp, level, message, exc_info, funcName, lineno.
    """

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        if "levelname" in log_record:
            log_record["level"] = log_record.pop("levelname")

        allowed_fields = {
            "timestamp",
            "level",
            "message",
            "exc_info",
            "funcName",
            "lineno",
        }

        keys_to_remove = [key for key in log_record if key not in allowed_fields]
        for key in keys_to_remove:
            log_record.pop(key)


def _setup_logger() -> logging.Logger:
    """Initialize and configure singleton logger.

    Returns:
        Configured logger with CustomJsonFormatter
    """
    logger = logging.getLogger("ca_enrollment")

    # Prevent duplicate handlers if module reloaded
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    formatter = CustomJsonFormatter(
        fmt="%(timestamp)s %(levelname)s %(funcName)s %(lineno)d %(message)s",
        timestamp=True,
    )
    handler.setFormatter(formatter)

    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    logger.propagate = False

    return logger


@contextmanager
def domain_log_handler(log_path: Path, logger: logging.Logger | None = None) -> Iterator[logging.Handler]:
    """Append plain timestamped lines to a domain log file while the block runs.

    Args:
        log_path: Path of the {domain}.log file
        logger: Logger to attach to (default: LOGGER)

    Yields:
        The attached file handler
    """
    target = logger or LOGGER
    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_path.touch(mode=DOMAIN_LOG_MODE, exist_ok=True)
    os.chmod(log_path, DOMAIN_LOG_MODE)

    handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(DOMAIN_LOG_FORMAT, datefmt=DOMAIN_LOG_DATEFMT))
    target.addHandler(handler)
    try:
        yield handler
    finally:
        target.removeHandler(handler)
        handler.close()


# Singleton logger instance - import this in other modules
LOGGER = _setup_logger()
