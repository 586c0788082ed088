"""Logging setup for depwise.

depwise is a library, so configure_logging() attaches its rich handler to
the ``depwise`` logger only and leaves the root logger to the application.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "depwise"

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")

_handler: Optional[RichHandler] = None


def configure_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    console: Optional[Console] = None,
    force: bool = False,
) -> RichHandler:
    """Attach a rich handler to the depwise logger.

    Repeated calls return the existing handler unless ``force`` is set, in
    which case the old handler is replaced.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_string: Optional custom format string.
        console: Console to render to (defaults to stderr).
        force: Replace a previously installed handler.

    Returns:
        The installed handler.
    """
    global _handler

    package_logger = logging.getLogger(PACKAGE_LOGGER)

    if _handler is not None:
        if not force:
            return _handler
        package_logger.removeHandler(_handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter(format_string or "%(message)s"))

    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _handler = handler
    return handler


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given module name.

    Args:
        name: Module name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def redact(secret: Optional[str], visible: int = 4) -> str:
    """Render a credential for logs, keeping only its last characters."""
    if not secret:
        return "not set"
    if len(secret) <= visible * 2:
        return "****"
    return f"****{secret[-visible:]}"


class LogContext:
    """Context manager for temporary log level changes."""

    def __init__(self, logger: logging.Logger | str, level: str) -> None:
        """Initialize the log context.

        Args:
            logger: Logger instance or logger name to modify.
            level: Temporary log level.
        """
        if isinstance(logger, str):
            logger = logging.getLogger(logger)
        self.logger = logger
        self.new_level = getattr(logging, level.upper())
        self.original_level = logger.level

    def __enter__(self) -> "LogContext":
        self.logger.setLevel(self.new_level)
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.logger.setLevel(self.original_level)


def enable_debug_logging() -> None:
    """Log retry attempts, skipped analyzers and prompt round-trips."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)
