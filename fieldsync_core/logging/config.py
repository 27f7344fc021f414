# =============================================================================
# fieldsync_core/logging/config.py
# Logging Configuration for FieldSync
# =============================================================================

import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple, Type


LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "fieldsync_core"

# Marks handlers installed here so a second setup replaces them
_HANDLER_FLAG = "_fieldsync_handler"


def setup_logging(level: int = logging.INFO, log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure the fieldsync_core logger.

    Only the package logger is touched; the host app (Streamlit, pytest)
    keeps its own root configuration. Calling this again replaces the
    handlers from the previous call.

    Args:
        level: Logging level (default: INFO)
        log_dir: Directory for a daily fieldsync_YYYY-MM-DD.log file;
            console only when None

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_FLAG, False)]:
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"fieldsync_{datetime.now().strftime('%Y-%m-%d')}.log"
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_FLAG, True)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False

    # Request lines from urllib3 duplicate RemoteClient's own DEBUG lines
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger.info("Logging initialized")
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Usage:
        from fieldsync_core.logging import get_logger
        logger = get_logger(__name__)
        logger.info("Loading page 2")
    """
    return logging.getLogger(name)


class LogContext:
    """
    Context manager for logging operation timing and status.

    Exceptions listed in expected are logged as warnings without a
    traceback; anything else is logged as an error with one. The exception
    always propagates.

    Usage:
        with LogContext(logger, "Loading post-delivery page 3", expected=(ClientError,)):
            loader.load(3)
        # Logs: "Loading post-delivery page 3... completed (0.41s)"
    """

    def __init__(
        self,
        logger: logging.Logger,
        operation: str,
        expected: Tuple[Type[BaseException], ...] = (),
    ):
        self.logger = logger
        self.operation = operation
        self.expected = expected
        self.start_time = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        self.logger.debug(f"{self.operation}... started")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.perf_counter() - self.start_time

        if exc_type is None:
            self.logger.info(f"{self.operation}... completed ({elapsed:.2f}s)")
        elif self.expected and issubclass(exc_type, self.expected):
            self.logger.warning(f"{self.operation}... failed ({elapsed:.2f}s): {exc_val}")
        else:
            self.logger.error(
                f"{self.operation}... failed ({elapsed:.2f}s): {exc_val}",
                exc_info=True
            )

        return False
