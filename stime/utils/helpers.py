"""
Utility Helper Functions for stime

Logging setup, error stream silencing and usage text layout.
Python 3.9+ compatible.
"""

import contextlib
import locale
import logging
import os
import sys
import textwrap
from typing import Iterator, List

LOG_FORMAT = "%(levelname)s:  %(message)s"


class _BelowLevelFilter(logging.Filter):
    """Pass only records below ``level``."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


def setup_logging(debug: bool = False) -> logging.Logger:
    """
    Setup logging configuration for stime.

    Warnings and errors go to stderr. With ``debug`` set, debug and info
    messages go to stdout alongside the converted values.

    Handlers bind to sys.stdout/sys.stderr as they are when this is called,
    so call it after any stream redirection.

    Args:
        debug: Emit debug output

    Returns:
        Configured logger
    """
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    error_handler = logging.StreamHandler(sys.stderr)
    error_handler.setLevel(logging.WARNING)
    error_handler.setFormatter(formatter)
    root_logger.addHandler(error_handler)

    if debug:
        debug_handler = logging.StreamHandler(sys.stdout)
        debug_handler.setLevel(logging.DEBUG)
        debug_handler.addFilter(_BelowLevelFilter(logging.WARNING))
        debug_handler.setFormatter(formatter)
        root_logger.addHandler(debug_handler)

    return root_logger


@contextlib.contextmanager
def quiet_stderr(enabled: bool = True) -> Iterator[None]:
    """
    Send everything written to sys.stderr to the null device.

    Args:
        enabled: When False, leave stderr alone
    """
    if not enabled:
        yield
        return

    with open(os.devnull, "w", errors="backslashreplace") as devnull, contextlib.redirect_stderr(devnull):
        yield


def adopt_user_locale() -> bool:
    """
    Switch the process to the locale named by the environment.

    Returns:
        True if the locale was applied
    """
    try:
        locale.setlocale(locale.LC_ALL, "")
        return True
    except locale.Error as e:
        logging.getLogger(__name__).warning(f"Cannot use locale from environment, using C locale: {e}")
        return False


def wrap_help_text(text: str, width: int = 54) -> List[str]:
    """
    Split help text into lines of roughly ``width`` characters.

    Words longer than ``width`` are kept whole.
    """
    return textwrap.wrap(text, width=width, break_long_words=False, break_on_hyphens=False) or [""]
