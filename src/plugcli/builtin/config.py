"""
Built-in ``config`` commands.

Provides commands to view and initialize plugcli configuration.

Usage:
    plugcli config show              Show effective configuration with sources
    plugcli config paths             Show config file paths
    plugcli config init [--user]     Create template config file
    plugcli config get <key>         Get a specific config value
"""

from __future__ import annotations

import argparse
from dataclasses import fields
from functools import partial
from pathlib import Path

from plugcli.config import (
    CONFIG_FILENAMES,
    KNOWN_KEYS,
    USER_CONFIG_PATH,
    Config,
    generate_template,
    get_config_paths,
)
from plugcli.exceptions import ExecutionError
from plugcli.features import CliPlugin, create_cli_plugin
from plugcli.registry import CommandRegistry
from plugcli.types import CliCommand, ExecutionContext


def _parser(context: ExecutionContext) -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        prog=context.info.usage,
        description=context.info.description,
    )


def show_config(context: ExecutionContext, config: Config | None = None) -> None:
    """Show effective configuration with sources."""
    _parser(context).parse_args(context.args)
    if config is None:
        config = Config.load()

    print("# Effective plugcli configuration")
    for section_name in ("cli", "errors", "logging"):
        section = getattr(config, section_name)
        print()
        print(f"[{section_name}]")
        for section_field in fields(section):
            key = f"{section_name}.{section_field.name}"
            value = getattr(section, section_field.name)
            _print_value(section_field.name, value, config.get_source(key))


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    if value is None:
        return "# not set"
    return str(value)


def _print_value(key: str, value, source: str) -> None:
    """Print a config value with its source."""
    source_display = Path(source).name if source != "default" else source
    print(f"{key} = {_format_value(value)}  # from: {source_display}")


def show_paths(context: ExecutionContext) -> None:
    """Show config file paths."""
    _parser(context).parse_args(context.args)
    paths = get_config_paths()

    print("Config file paths:")
    print()

    print(f"User config: {USER_CONFIG_PATH}")
    print("  Status: exists" if paths["user"] else "  Status: not found")
    print()

    print(f"Project config search: {', '.join(CONFIG_FILENAMES)}")
    if paths["project"]:
        print(f"  Found: {paths['project']}")
    else:
        print("  Status: not found")


def init_config(context: ExecutionContext) -> None:
    """Create a template config file."""
    parser = _parser(context)
    parser.add_argument(
        "--user",
        action="store_true",
        help=f"Write the user config ({USER_CONFIG_PATH}) instead of the project config",
    )
    parser.add_argument("--force", action="store_true", help="Overwrite an existing file")
    args = parser.parse_args(context.args)

    if args.user:
        target = USER_CONFIG_PATH
        target.parent.mkdir(parents=True, exist_ok=True)
    else:
        target = Path.cwd() / CONFIG_FILENAMES[0]

    if target.exists() and not args.force:
        raise ExecutionError(
            f"Config file already exists: {target}",
            suggestions=["Remove it first, edit it manually, or pass --force"],
        )

    try:
        target.write_text(generate_template())
    except OSError as e:
        raise ExecutionError(
            f"Error writing config file: {e}", context={"file": str(target)}
        ) from e

    print(f"Created config template: {target}")


def get_config(context: ExecutionContext, config: Config | None = None) -> None:
    """Print a single config value."""
    parser = _parser(context)
    parser.add_argument("key", help="Config key (e.g., errors.verbose)")
    args = parser.parse_args(context.args)

    section_name, _, attr = args.key.partition(".")
    if not attr or "." in attr:
        raise ExecutionError(
            f"Invalid key format '{args.key}'. Use 'section.key' format.",
        )

    if config is None:
        config = Config.load()
    if section_name not in KNOWN_KEYS:
        raise ExecutionError(f"Unknown config section '{section_name}'")
    section = getattr(config, section_name)
    if attr not in {f.name for f in fields(section)}:
        raise ExecutionError(f"Unknown key '{attr}' in section '{section_name}'")

    value = getattr(section, attr)
    print(value if isinstance(value, str) else _format_value(value))


def create_config_plugin(config: Config | None = None) -> CliPlugin:
    """Create the ``config`` feature.

    Args:
        config: Configuration the running program loaded. ``show`` and
            ``get`` report it as-is; when None they load it on each call.
    """

    async def init(registry: CommandRegistry) -> None:
        show = partial(show_config, config=config)
        registry.add_subtree(
            ("config",),
            [
                CliCommand(("show",), "Show effective configuration with sources", execute=show),
                CliCommand(("paths",), "Show config file paths", execute=show_paths),
                CliCommand(("init",), "Create a template config file", execute=init_config),
                CliCommand(
                    ("get",),
                    "Print a single config value",
                    execute=partial(get_config, config=config),
                ),
                CliCommand(
                    ("print",),
                    "Show effective configuration (replaced by 'config show')",
                    execute=show,
                    deprecated=True,
                ),
            ],
        )

    return create_cli_plugin("config", init)


config_plugin = create_config_plugin()
