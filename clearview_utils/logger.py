"""
Centralized logging configuration for ClearView AI.
Every module logs through the 'clearview' logger or one of its children
(clearview.gemini, clearview.canvas, ...), so one setup call covers them all.
"""

import logging
import sys
from functools import wraps
import time


logger = logging.getLogger('clearview')

def setup_logging(level=logging.INFO, log_file=None):
    """
    Configure logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL) or its name
        log_file: Optional file to write logs to (in addition to console)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    # Streamlit re-executes the script on every interaction; drop old handlers
    logger.handlers = []
    logger.setLevel(level)
    logger.propagate = False

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def log_exceptions(func):
    """
    Log an unexpected exception with its traceback, then re-raise it.

    Used on session-facing entry points (upload handling, task submission)
    whose failures would otherwise only show up as a Streamlit error box.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception("Unhandled error in %s", func.__qualname__)
            raise
    return wrapper


def log_performance(func):
    """Log how long each call takes; failures are logged with the elapsed time and re-raised."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error("%s failed after %.3fs: %s", func.__qualname__, time.perf_counter() - start, e)
            raise
        logger.info("%s completed in %.3fs", func.__qualname__, time.perf_counter() - start)
        return result
    return wrapper


# Console logging at INFO until app.main applies the configured level
setup_logging(level=logging.INFO)
