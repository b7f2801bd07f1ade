"""
Command graph for plugcli.

The graph is a forest: depth 0 holds the top-level nodes and there is no
sentinel root. Nodes are either grouping nodes (TreeNode), which only exist
to namespace other nodes, or leaves (CommandNode), which wrap an executable
CliCommand. A node's path is derived from its parent chain.

The graph is append-only. Nothing is ever removed once inserted.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional, Union

from plugcli.exceptions import ConflictError, InvalidPathError
from plugcli.types import CliCommand

logger = logging.getLogger(__name__)


class TreeNode:
    """Grouping node for a path segment shared by several commands."""

    def __init__(self, name: str, children: Sequence[GraphNode] = ()):
        self.name = name
        self.parent: Optional[TreeNode] = None
        self.children: list[GraphNode] = []
        for child in children:
            child.parent = self
            self.children.append(child)

    @property
    def path(self) -> tuple[str, ...]:
        if self.parent is None:
            return (self.name,)
        return self.parent.path + (self.name,)

    def child(self, name: str) -> Optional[GraphNode]:
        """Return the direct child with the given name, if any."""
        return _find_named(self.children, name)

    def __repr__(self) -> str:
        return f"TreeNode({' '.join(self.path)!r}, children={len(self.children)})"


class CommandNode:
    """Leaf node wrapping an executable command."""

    def __init__(self, command: CliCommand):
        if not command.path:
            raise InvalidPathError("Command path must not be empty")
        self.command = command
        self.name = command.path[-1]
        self.parent: Optional[TreeNode] = None

    @property
    def path(self) -> tuple[str, ...]:
        if self.parent is None:
            return (self.name,)
        return self.parent.path + (self.name,)

    @property
    def description(self) -> str:
        return self.command.description

    @property
    def deprecated(self) -> bool:
        return self.command.deprecated

    def __repr__(self) -> str:
        return f"CommandNode({' '.join(self.path)!r})"


GraphNode = Union[TreeNode, CommandNode]


def _find_named(nodes: Sequence[GraphNode], name: str) -> Optional[GraphNode]:
    for node in nodes:
        if node.name == name:
            return node
    return None


def validate_path(path: Sequence[str]) -> tuple[str, ...]:
    """Check that a path is usable for routing and return it as a tuple.

    Raises:
        InvalidPathError: If the path is empty or a segment is blank,
            contains whitespace or starts with a dash.
    """
    segments = tuple(path)
    if not segments:
        raise InvalidPathError("Command path must not be empty")
    for segment in segments:
        if not isinstance(segment, str) or not segment.strip():
            raise InvalidPathError(
                "Command path segments must be non-empty strings",
                context={"path": segments},
            )
        if segment.startswith("-") or segment != segment.strip() or " " in segment:
            raise InvalidPathError(
                f"Invalid command path segment: {segment!r}",
                context={"path": " ".join(segments)},
                suggestions=["Segments cannot start with '-' or contain spaces"],
            )
    return segments


class CommandGraph:
    """Hierarchical command namespace.

    Example::

        graph = CommandGraph()
        graph.add(CliCommand(("db", "migrate"), "Run migrations", execute=migrate))
        graph.at_depth(0)   # [TreeNode('db')]
        graph.at_depth(1)   # [CommandNode('db migrate')]
    """

    def __init__(self) -> None:
        self._roots: list[GraphNode] = []

    def add(self, command: CliCommand) -> CommandNode:
        """Insert a command at its own path."""
        node = CommandNode(command)
        self.insert(command.path, node)
        return node

    def insert(self, path: Sequence[str], node: GraphNode) -> None:
        """Insert a node at ``path``, creating grouping nodes as needed.

        A TreeNode is never stored as given: its children are inserted one
        by one into the group at ``path``, which is created if missing, so
        they get the same checks as any other insertion.

        Args:
            path: Names from the root to the node; the last segment must be
                the node's own name.
            node: The node to insert.

        Raises:
            InvalidPathError: If the path is malformed or does not end with
                the node's name.
            ConflictError: If a segment along the path is a command, or the
                final segment is already taken by a command or by a node of
                a different kind.
        """
        segments = validate_path(path)
        if node.name != segments[-1]:
            raise InvalidPathError(
                f"Node name {node.name!r} does not match path {' '.join(segments)!r}"
            )
        if isinstance(node, CommandNode) and node.command.path != segments:
            raise InvalidPathError(
                "Command path does not match its insertion path",
                context={
                    "command": " ".join(node.command.path),
                    "path": " ".join(segments),
                },
            )

        parent: Optional[TreeNode] = None
        siblings = self._roots
        for depth, name in enumerate(segments[:-1]):
            existing = _find_named(siblings, name)
            if existing is None:
                existing = TreeNode(name)
                existing.parent = parent
                siblings.append(existing)
            elif isinstance(existing, CommandNode):
                raise ConflictError(
                    f'Command already exists at path: "{" ".join(segments[: depth + 1])}"',
                    path=segments[: depth + 1],
                    suggestions=["Commands cannot have sub-commands; use a group instead"],
                )
            parent = existing
            siblings = existing.children

        self._attach(segments, parent, siblings, node)

    def _attach(
        self,
        segments: tuple[str, ...],
        parent: Optional[TreeNode],
        siblings: list[GraphNode],
        node: GraphNode,
    ) -> None:
        existing = _find_named(siblings, node.name)
        if existing is None:
            if isinstance(node, CommandNode):
                node.parent = parent
                siblings.append(node)
                logger.debug("Inserted %r", node)
                return
            # New groups start empty; children go through insert() below.
            existing = TreeNode(node.name)
            existing.parent = parent
            siblings.append(existing)
            logger.debug("Inserted %r", existing)
        elif isinstance(existing, CommandNode):
            raise ConflictError(
                f'Command already exists at path: "{" ".join(segments)}"',
                path=segments,
            )
        elif isinstance(node, CommandNode):
            raise ConflictError(
                f'Command group already exists at path: "{" ".join(segments)}"',
                path=segments,
                suggestions=["Pick a name that is not already used as a group"],
            )

        # Group onto group: insert the incoming children one by one.
        for child in list(node.children):
            self.insert(segments + (child.name,), child)

    def at_depth(self, depth: int) -> list[GraphNode]:
        """Return the nodes at ``depth``, in first-registered order.

        Depth 0 is the list of top-level nodes.
        """
        if depth < 0:
            raise ValueError(f"depth must be non-negative, got {depth}")
        current: list[GraphNode] = list(self._roots)
        for _ in range(depth):
            current = [
                child
                for node in current
                if isinstance(node, TreeNode)
                for child in node.children
            ]
        return current

    def find(self, path: Sequence[str]) -> Optional[GraphNode]:
        """Look up a node by its path."""
        siblings: Sequence[GraphNode] = self._roots
        node: Optional[GraphNode] = None
        for name in path:
            node = _find_named(siblings, name)
            if node is None:
                return None
            siblings = node.children if isinstance(node, TreeNode) else ()
        return node

    def commands(self) -> list[CommandNode]:
        """Return every command node in breadth-first order."""
        result: list[CommandNode] = []
        depth = 0
        level = self.at_depth(depth)
        while level:
            result.extend(node for node in level if isinstance(node, CommandNode))
            depth += 1
            level = self.at_depth(depth)
        return result

    def __len__(self) -> int:
        return len(self.commands())
