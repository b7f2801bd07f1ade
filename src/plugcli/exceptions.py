"""
Exception hierarchy for plugcli.

Provides consistent error handling with context and suggestions.
All exceptions include:
- Context information (command path, plugin id, etc.)
- Suggestions for how to fix the issue
- Clear, formatted error messages

Example::

    from plugcli.exceptions import ConflictError

    raise ConflictError(
        'Command already exists at path: "db migrate"',
        context={"path": "db migrate", "plugin": "db-tools"},
        suggestions=["Rename one of the commands or mount it under a different group"],
    )
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Dict, List, Optional


class PlugCliError(Exception):
    """
    Base exception for all plugcli errors.

    Provides consistent formatting with context and suggestions.

    Attributes:
        context: Dictionary of contextual information (path, plugin, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class ConflictError(PlugCliError):
    """
    Two registrations collide in the command graph.

    Raised when a command is registered at a path that is already taken,
    when a command would be nested under an existing command, or when a
    group and a command compete for the same name.

    Attributes:
        path: The path segments up to and including the conflicting node
    """

    def __init__(
        self,
        message: str,
        path: Sequence[str] = (),
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.path = tuple(path)
        ctx = dict(context or {})
        if self.path and "path" not in ctx:
            ctx["path"] = " ".join(self.path)
        super().__init__(message, ctx, suggestions)


class InvalidPathError(PlugCliError):
    """
    A command path is malformed.

    Paths must be non-empty and every segment must be a non-empty name
    that does not start with a dash.
    """

    pass


class UnsupportedFeatureError(PlugCliError):
    """
    A feature object does not carry a recognized feature tag.

    Attributes:
        feature_type: The offending tag, or the object's type name when the
            object carries no tag at all
    """

    def __init__(
        self,
        feature_type: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.feature_type = feature_type
        super().__init__(
            f"Unsupported feature type: {feature_type}",
            context,
            suggestions or ["Create CLI features with plugcli.create_cli_plugin()"],
        )


class InvalidCommandError(PlugCliError):
    """
    The argument vector does not route to any registered command.

    Raised by the routing parser and turned into the invalid-command
    outcome (help output plus a non-zero exit) by the initializer.
    """

    pass


class ExecutionError(PlugCliError):
    """
    A command failed while executing.

    Commands raise this (or a subclass) for expected failures; the message
    is shown to the user without a stack trace.
    """

    pass


class ExitCodeError(ExecutionError):
    """
    A command failed and requests a specific process exit status.

    Example::

        raise ExitCodeError(3, command="db migrate")

    Attributes:
        code: Exit status to terminate with
    """

    def __init__(self, code: int, command: Optional[str] = None):
        self.code = code
        if command:
            message = f"Command '{command}' exited with code {code}"
        else:
            message = f"Child exited with code {code}"
        super().__init__(message)


class UnknownRejectionError(PlugCliError):
    """
    Something other than an ``Exception`` escaped command execution.

    Attributes:
        rejection: The original value
    """

    def __init__(self, rejection: object):
        self.rejection = rejection
        super().__init__(f"Unknown rejection: '{rejection!r}'")


__all__ = [
    "PlugCliError",
    "ConflictError",
    "InvalidPathError",
    "UnsupportedFeatureError",
    "InvalidCommandError",
    "ExecutionError",
    "ExitCodeError",
    "UnknownRejectionError",
]
