"""
Logging configuration for plugcli.

All plugcli modules log through children of the ``plugcli`` logger, which
stays silent until configure_logging() is called.
"""

import logging

_logger = logging.getLogger("plugcli")
_logger.addHandler(logging.NullHandler())  # Default: no output

DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "WARNING", format: str | None = None) -> None:
    """Send plugcli log records to stderr.

    Args:
        level: Logging level - "DEBUG", "INFO", "WARNING", "ERROR"
        format: Optional custom format string

    Example:
        # See how features register their commands
        configure_logging("DEBUG")
    """
    _logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, level.upper()))
    handler.setFormatter(logging.Formatter(format or DEFAULT_FORMAT))
    _logger.addHandler(handler)


def disable_logging() -> None:
    """Remove the stderr handler and restore the default level."""
    _logger.setLevel(logging.WARNING)
    for handler in _logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            _logger.removeHandler(handler)
