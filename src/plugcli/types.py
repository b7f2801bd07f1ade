"""Command contract and execution context types."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CommandInfo:
    """Help metadata for the command being executed."""

    usage: str
    description: str


@dataclass(frozen=True)
class ExecutionContext:
    """Value passed to a command's ``execute`` callable.

    Attributes:
        args: Everything after the resolved command path, with the routing
            tokens removed. Operands come first, then unknown tokens.
        info: Usage line and description of the command.
    """

    args: tuple[str, ...]
    info: CommandInfo


# A command may be a plain function or a coroutine function.
Executor = Callable[[ExecutionContext], "Awaitable[None] | None"]


@dataclass(frozen=True)
class CliCommand:
    """A command contributed by a feature.

    Attributes:
        path: Names from the root of the command tree to this command.
        description: Shown in help listings.
        execute: Called with an ExecutionContext when the command is invoked.
        deprecated: Hidden from help listings but still invocable.
    """

    path: tuple[str, ...]
    description: str
    execute: Executor = field(compare=False)
    deprecated: bool = False

    def __post_init__(self) -> None:
        # Accept lists for convenience; paths are stored as tuples.
        object.__setattr__(self, "path", tuple(self.path))
