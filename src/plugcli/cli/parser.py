"""
Argument parser construction and argument recovery for plugcli.

The parser tree mirrors the command graph: every grouping node becomes a
sub-parser with its own sub-commands, and every command becomes a terminal
sub-parser that declares no arguments of its own. argparse is used only to
route argv to a command; the command's arguments are recovered from the
full argv afterwards with split_argv() and resolve_command_args().
"""

from __future__ import annotations

import argparse
import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from typing import NoReturn

from plugcli.exceptions import InvalidCommandError
from plugcli.graph import CommandGraph, TreeNode

__all__ = [
    "ROOT_FLAGS",
    "RoutingArgumentParser",
    "ParsedArgv",
    "build_parser",
    "split_argv",
    "resolve_command_args",
]

logger = logging.getLogger(__name__)

# Options owned by the root parser. Every other option belongs to a command.
ROOT_FLAGS = frozenset({"-h", "--help", "-V", "--version"})

COMMAND_DEST = "_command_node"
GROUP_DEST = "_group_parser"


class RoutingArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports routing failures as exceptions.

    argparse normally prints usage and exits with status 2 when it cannot
    match a sub-command; the initializer turns InvalidCommandError into the
    invalid-command outcome instead.
    """

    def error(self, message: str) -> NoReturn:
        raise InvalidCommandError(message, context={"parser": self.prog})


def build_parser(
    graph: CommandGraph,
    program_name: str,
    version: str,
    description: str | None = None,
) -> RoutingArgumentParser:
    """Build the routing parser for a finished command graph.

    Walks the graph breadth-first with an explicit work queue of
    (node, parent sub-parsers) pairs.
    """
    program = RoutingArgumentParser(
        prog=program_name,
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    program.add_argument(
        "-V", "--version", action="version", version=f"{program_name} {version}"
    )
    program.set_defaults(**{GROUP_DEST: program})
    root_commands = program.add_subparsers(title="commands", metavar="<command>")

    queue = deque((node, root_commands) for node in graph.at_depth(0))
    while queue:
        node, parent_commands = queue.popleft()
        if isinstance(node, TreeNode):
            tree_parser = parent_commands.add_parser(
                node.name, help=_escape(node.name), description=node.name
            )
            tree_parser.set_defaults(**{GROUP_DEST: tree_parser})
            tree_commands = tree_parser.add_subparsers(title="commands", metavar="<command>")
            queue.extend((child, tree_commands) for child in node.children)
        else:
            # Deprecated commands get no help entry, which keeps them out of
            # the listing while leaving them routable.
            help_kwargs = {} if node.deprecated else {"help": _escape(node.description)}
            command_parser = parent_commands.add_parser(
                node.name,
                description=node.description,
                add_help=False,
                **help_kwargs,
            )
            command_parser.set_defaults(**{COMMAND_DEST: node})
            logger.debug("Added command parser for '%s'", " ".join(node.path))

    return program


def _escape(text: str) -> str:
    # argparse expands help strings with %-formatting
    return text.replace("%", "%%")


@dataclass(frozen=True)
class ParsedArgv:
    """Argv split into operands and tokens the root does not recognize."""

    operands: tuple[str, ...]
    unknown: tuple[str, ...]


def _maybe_option(arg: str) -> bool:
    return len(arg) > 1 and arg[0] == "-"


def split_argv(argv: Sequence[str], known_options: frozenset[str] = ROOT_FLAGS) -> ParsedArgv:
    """Split argv into operands and unknown tokens.

    Known options are dropped, but only before the first operand: argparse
    hands everything after the first sub-command name to that sub-command.
    The first unrecognized option switches the split so that it and every
    later token are unknown. A ``--`` before that point makes all remaining
    tokens operands; after it, ``--`` is kept as an unknown token.

    Examples:
        ["db", "migrate", "up"]            -> operands [db, migrate, up]
        ["db", "migrate", "--force", "up"] -> operands [db, migrate],
                                              unknown [--force, up]
    """
    operands: list[str] = []
    unknown: list[str] = []
    dest = operands
    args = list(argv)

    while args:
        arg = args.pop(0)
        if arg == "--":
            if dest is unknown:
                dest.append(arg)
            dest.extend(args)
            break
        if _maybe_option(arg):
            if not operands and dest is operands and arg.split("=", 1)[0] in known_options:
                continue
            dest = unknown
        dest.append(arg)

    return ParsedArgv(operands=tuple(operands), unknown=tuple(unknown))


def resolve_command_args(
    path: Sequence[str], operands: Sequence[str], unknown: Sequence[str]
) -> tuple[str, ...]:
    """Recover a command's own arguments from the full operand list.

    Leading operands that match the command path position by position are
    routing tokens and are skipped. Skipping stops at the first mismatch;
    every operand after that point belongs to the command, even one that
    happens to equal a later path segment. Unknown tokens follow the
    remaining operands.
    """
    positional: list[str] = []
    index = 0
    for arg_index, operand in enumerate(operands):
        if arg_index == index and index < len(path) and path[index] == operand:
            index += 1
            continue
        positional.append(operand)
    return tuple(positional) + tuple(unknown)
