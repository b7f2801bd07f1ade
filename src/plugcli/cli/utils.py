"""Error presentation for the command-line boundary."""

from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING

from plugcli.exceptions import ExitCodeError, PlugCliError, UnknownRejectionError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["format_error", "print_message", "report_error", "to_error", "get_error_console"]

# Module-level console for error output, created lazily
_error_console: Console | None = None


def get_error_console() -> Console:
    """Get or create the Rich console for error output.

    The console writes to stderr and is cached for reuse.
    """
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True, force_terminal=None, highlight=False)
    return _error_console


def to_error(value: BaseException | object) -> Exception:
    """Coerce whatever escaped command execution into an Exception.

    Single-member exception groups are unwrapped so the user sees the
    underlying failure. Values that are not ``Exception`` instances are
    wrapped in UnknownRejectionError.
    """
    if isinstance(value, BaseExceptionGroup) and len(value.exceptions) == 1:
        return to_error(value.exceptions[0])
    if isinstance(value, Exception):
        return value
    return UnknownRejectionError(value)


def format_error(e: Exception, verbose: bool = False) -> str:
    """
    Format an exception for display (plain text).

    Args:
        e: The exception to format
        verbose: If True, include full stack trace

    Returns:
        Formatted error message string
    """
    if verbose:
        return "".join(traceback.format_exception(e))

    if isinstance(e, PlugCliError):
        return f"Error: {e}"

    # For other exceptions, show type and message
    return f"Error: {type(e).__name__}: {e}"


def print_message(message: str, use_rich: bool | None = None) -> None:
    """Print a one-line failure message to stderr.

    Uses Rich styling on TTY terminals and falls back to plain text for
    non-TTY output (pipes, captured streams).

    Args:
        message: Text to print
        use_rich: Override automatic TTY detection (None = auto-detect)
    """
    console = get_error_console()
    if use_rich is None:
        use_rich = console.is_terminal

    if use_rich:
        console.print()
        console.print(message, style="red", markup=False)
        console.print()
    else:
        print(message, file=sys.stderr)


def report_error(error: Exception, verbose: bool = False) -> int:
    """Print an error to stderr and return the exit status to use.

    ExitCodeError carries its own status; every other error maps to 1.
    """
    if verbose:
        # Always use plain text for stack traces
        print(format_error(error, verbose=True), file=sys.stderr)
    else:
        print_message(format_error(error))

    if isinstance(error, ExitCodeError):
        return error.code
    return 1
