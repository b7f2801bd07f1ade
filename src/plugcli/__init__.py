"""
plugcli: command-tree assembly and dispatch for pluggable command-line tools.

Features (plugins) contribute commands asynchronously. plugcli merges their
contributions into one hierarchical command namespace and routes a raw
argument vector to exactly one leaf command.

Modules:
    graph: Command graph of grouping and command nodes
    registry: Registration API handed to features
    features: Feature contract and handle normalization
    types: Command contract and execution context
    config: TOML configuration loading
    cli: Initializer, parser-tree construction and dispatch

Quick Start::

    from plugcli import CliCommand, CliInitializer, create_cli_plugin

    async def init(registry):
        registry.add_command(
            CliCommand(
                path=("db", "migrate"),
                description="Run database migrations",
                execute=migrate,
            )
        )

    cli = CliInitializer(program_name="mytool")
    cli.add(create_cli_plugin("db", init))
    raise SystemExit(cli.run())
"""

__version__ = "0.1.0"

from plugcli.exceptions import (
    ConflictError,
    ExecutionError,
    ExitCodeError,
    InvalidCommandError,
    InvalidPathError,
    PlugCliError,
    UnknownRejectionError,
    UnsupportedFeatureError,
)
from plugcli.features import CLI_PLUGIN_TYPE, CliPlugin, create_cli_plugin, unwrap_feature
from plugcli.graph import CommandGraph, CommandNode, TreeNode
from plugcli.registry import CommandRegistry
from plugcli.types import CliCommand, CommandInfo, ExecutionContext
from plugcli.cli.initializer import CliInitializer

__all__ = [
    # Version
    "__version__",
    # Errors
    "PlugCliError",
    "ConflictError",
    "InvalidPathError",
    "UnsupportedFeatureError",
    "InvalidCommandError",
    "ExecutionError",
    "ExitCodeError",
    "UnknownRejectionError",
    # Contracts
    "CliCommand",
    "CommandInfo",
    "ExecutionContext",
    "CLI_PLUGIN_TYPE",
    "CliPlugin",
    "create_cli_plugin",
    "unwrap_feature",
    # Graph and registry
    "CommandGraph",
    "CommandNode",
    "TreeNode",
    "CommandRegistry",
    # Entry
    "CliInitializer",
]
