"""Registration API handed to CLI features.

Usage:
    from plugcli.registry import CommandRegistry

    graph = CommandGraph()
    registry = CommandRegistry(graph)
    await registry.init(feature)    # feature calls registry.add_command(...)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Any, Optional

from plugcli.exceptions import ConflictError, UnsupportedFeatureError
from plugcli.features import CLI_PLUGIN_TYPE, feature_type_of
from plugcli.graph import CommandGraph, CommandNode, validate_path
from plugcli.types import CliCommand

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Write-side view of a CommandGraph for features.

    Tracks which plugin registered each command so that conflicts name both
    sides. Registering the same path twice is always an error.
    """

    def __init__(self, graph: CommandGraph):
        self.graph = graph
        self._owners: dict[tuple[str, ...], str] = {}
        self._current_plugin: Optional[str] = None

    async def init(self, feature: Any) -> None:
        """Run a feature's registration against this registry.

        Raises:
            UnsupportedFeatureError: If the feature is not tagged as a CLI
                plugin.
        """
        feature_type = feature_type_of(feature)
        if feature_type != CLI_PLUGIN_TYPE:
            raise UnsupportedFeatureError(
                feature_type if feature_type is not None else type(feature).__name__
            )

        plugin_id = getattr(feature, "plugin_id", None) or "<anonymous>"
        logger.debug("Initializing CLI plugin %s", plugin_id)
        self._current_plugin = plugin_id
        try:
            await feature.init(self)
        finally:
            self._current_plugin = None

    def add_command(self, command: CliCommand) -> CommandNode:
        """Register a command at its path.

        Raises:
            ConflictError: If the path is already taken or crosses an
                existing command.
            InvalidPathError: If the path is malformed.
        """
        owner = self._current_plugin or "<direct>"
        try:
            node = self.graph.add(command)
        except ConflictError as e:
            context = dict(e.context)
            context["plugin"] = owner
            existing = self._owners.get(e.path)
            if existing is not None:
                context["registered_by"] = existing
            raise ConflictError(
                e.message, path=e.path, context=context, suggestions=e.suggestions
            ) from e

        self._owners[command.path] = owner
        logger.debug("Registered command '%s' from %s", " ".join(command.path), owner)
        return node

    def add_subtree(
        self, prefix: Sequence[str], commands: Iterable[CliCommand]
    ) -> list[CommandNode]:
        """Mount a group of commands under a common path prefix.

        Each command's own path is appended to ``prefix``.
        """
        segments = validate_path(prefix)
        return [
            self.add_command(replace(command, path=segments + tuple(command.path)))
            for command in commands
        ]

    def owner_of(self, path: Sequence[str]) -> Optional[str]:
        """Return the plugin id that registered the command at ``path``."""
        return self._owners.get(tuple(path))
