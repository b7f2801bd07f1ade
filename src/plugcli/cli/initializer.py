"""
CLI initializer: feature resolution, registration and dispatch.

Usage:
    from plugcli import CliInitializer

    cli = CliInitializer(program_name="mytool")
    cli.add(db_feature)                  # an already-resolved feature
    cli.add(load_deploy_feature())       # an awaitable resolving to one
    sys.exit(cli.run())

A run moves through Resolving -> Registering -> ParserBuilt -> Dispatching
and ends with an exit status. Every failure is fatal; nothing is retried.
"""

from __future__ import annotations

import inspect
import logging
import sys
from collections.abc import Sequence
from typing import Any, Optional

import anyio

from plugcli import __version__
from plugcli.cli.parser import (
    COMMAND_DEST,
    GROUP_DEST,
    RoutingArgumentParser,
    build_parser,
    resolve_command_args,
    split_argv,
)
from plugcli.cli.utils import print_message, report_error, to_error
from plugcli.exceptions import InvalidCommandError
from plugcli.features import FeatureHandle, resolve_feature
from plugcli.graph import CommandGraph, CommandNode
from plugcli.registry import CommandRegistry
from plugcli.types import CommandInfo, ExecutionContext

logger = logging.getLogger(__name__)


class CliInitializer:
    """Assemble features into a command tree and dispatch one command.

    Args:
        program_name: Name shown in usage lines and help.
        version: Version string printed by ``--version``.
        description: Optional description for the top-level help.
        verbose: Print stack traces for failures.
    """

    def __init__(
        self,
        program_name: str = "plugcli",
        version: str = __version__,
        description: Optional[str] = None,
        verbose: bool = False,
    ):
        self.program_name = program_name
        self.version = version
        self.description = description
        self.verbose = verbose
        self.graph = CommandGraph()
        self.registry = CommandRegistry(self.graph)
        self._handles: list[FeatureHandle] = []
        self._initialized = False
        self._failure: Optional[Exception] = None

    def add(self, feature: FeatureHandle) -> None:
        """Queue a feature, or an awaitable that resolves to one."""
        if self._initialized or self._failure is not None:
            raise RuntimeError("Features cannot be added after initialization")
        self._handles.append(feature)

    async def _resolve_all(self) -> list[Any]:
        """Resolve every handle concurrently, keeping add order.

        Raises the first failure in add order once all resolutions settle.
        """
        results: list[Any] = [None] * len(self._handles)
        failures: list[Optional[Exception]] = [None] * len(self._handles)

        async def resolve_idx(idx: int, handle: FeatureHandle) -> None:
            try:
                results[idx] = await resolve_feature(handle)
            except Exception as e:
                failures[idx] = e

        async with anyio.create_task_group() as tg:
            for idx, handle in enumerate(self._handles):
                tg.start_soon(resolve_idx, idx, handle)

        for failure in failures:
            if failure is not None:
                raise failure
        return results

    async def initialize(self) -> None:
        """Resolve all features and register them in add order.

        A failed initialization is final: later calls raise the same error
        instead of registering into the partly filled graph again.
        """
        if self._failure is not None:
            raise self._failure
        if self._initialized:
            return
        try:
            features = await self._resolve_all()
            logger.debug("Resolved %d feature(s)", len(features))
            for feature in features:
                await self.registry.init(feature)
        except Exception as e:
            self._failure = e
            raise
        self._initialized = True

    def build_parser(self) -> RoutingArgumentParser:
        """Build the routing parser from the registered command graph."""
        return build_parser(
            self.graph, self.program_name, self.version, description=self.description
        )

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Initialize, parse ``argv`` and run the matching command.

        Args:
            argv: Arguments without the program name (default: sys.argv[1:])

        Returns:
            Exit status for the process.

        Raises:
            SystemExit: When the root parser handles ``--help`` or ``--version``.
        """
        argv = list(sys.argv[1:] if argv is None else argv)

        try:
            anyio.run(self.initialize)
        except Exception as e:
            logger.debug("Initialization failed: %s", type(e).__name__)
            return report_error(to_error(e), verbose=self.verbose)

        program = self.build_parser()
        try:
            namespace, _ = program.parse_known_args(argv)
        except InvalidCommandError:
            return self._invalid_command(program, argv)

        node = getattr(namespace, COMMAND_DEST, None)
        if node is None:
            group = getattr(namespace, GROUP_DEST, program)
            if group is program and argv:
                return self._invalid_command(program, argv)
            # A bare group path such as "db" routes fine but names no command.
            group.print_help()
            return 1

        try:
            return anyio.run(self.dispatch, node, argv)
        except BaseExceptionGroup as rejection:
            return report_error(to_error(rejection), verbose=self.verbose)

    def _invalid_command(self, program: RoutingArgumentParser, argv: Sequence[str]) -> int:
        print_message(f"Invalid command: {' '.join(argv)}")
        program.print_help()
        return 1

    def command_context(self, node: CommandNode, argv: Sequence[str]) -> ExecutionContext:
        """Build the ExecutionContext for ``node`` from the full argv."""
        parsed = split_argv(argv)
        args = resolve_command_args(node.command.path, parsed.operands, parsed.unknown)
        return ExecutionContext(
            args=args,
            info=CommandInfo(
                usage=" ".join([self.program_name, *node.command.path]),
                description=node.command.description,
            ),
        )

    async def dispatch(self, node: CommandNode, argv: Sequence[str]) -> int:
        """Execute a command and map the outcome to an exit status."""
        context = self.command_context(node, argv)
        logger.debug("Dispatching '%s' with args %r", context.info.usage, context.args)
        try:
            result = node.command.execute(context)
            if inspect.isawaitable(result):
                await result
        except SystemExit as e:
            return _exit_status(e.code)
        except (KeyboardInterrupt, anyio.get_cancelled_exc_class()):
            raise
        except BaseException as e:
            return report_error(to_error(e), verbose=self.verbose)
        return 0


def _exit_status(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    # sys.exit("message") prints the message and exits with 1
    print(code, file=sys.stderr)
    return 1
