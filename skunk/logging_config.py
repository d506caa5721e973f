"""Opt-in logging output for applications embedding the Skunk core.

The package only creates `skunk.<module>` loggers and attaches a
NullHandler to `skunk` on import; nothing is printed or written until the
embedding application (a feed adapter, a test harness) asks for it here.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

PACKAGE_LOGGER = 'skunk'

# handlers added here carry this name so they can be replaced or removed
# without touching handlers the application attached itself
_HANDLER_NAME = 'skunk.logging_config'

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'
SIMPLE_FORMAT = '%(levelname)s: %(name)s: %(message)s'


def _owned_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if h.get_name() == _HANDLER_NAME]


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[Path | str] = None,
    stream: Optional[TextIO] = None,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Route the package's log records to the console and/or a log file.

    Calling it again replaces the handlers from the previous call, so it
    is safe to re-run with a different level.

    Args:
        level: Logging level for the 'skunk' logger (default: INFO)
        log_dir: Directory for a timestamped skunk_*.log file; no file is
            written unless this is given
        stream: Console stream (default: sys.stderr)
        log_to_console: Whether to add the console handler (default: True)

    Returns:
        The 'skunk' logger

    Example:
        from skunk.logging_config import setup_logging
        setup_logging(logging.DEBUG)  # show codec defaulting and resolver fallbacks
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    teardown_logging()

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f'skunk_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        file_handler.set_name(_HANDLER_NAME)
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(stream or sys.stderr)
        console_handler.setFormatter(logging.Formatter(SIMPLE_FORMAT))
        console_handler.set_name(_HANDLER_NAME)
        logger.addHandler(console_handler)

    return logger


def teardown_logging() -> None:
    """Close and detach every handler added by setup_logging()."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in _owned_handlers(logger):
        logger.removeHandler(handler)
        handler.close()
