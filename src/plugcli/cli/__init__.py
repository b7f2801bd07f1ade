"""
Command-line entry point for plugcli.

The ``plugcli`` program assembles its command tree from the built-in
features and dispatches one command:

    plugcli config show            - Show effective configuration
    plugcli config paths           - Show config file locations
    plugcli config init [--user]   - Create a template config file
    plugcli config get <key>       - Print a single config value

Examples:
    plugcli config get errors.verbose
    plugcli --version
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Sequence
from typing import Optional

from plugcli import __version__
from plugcli.cli.initializer import CliInitializer
from plugcli.cli.utils import report_error
from plugcli.config import Config, ConfigError
from plugcli.features import FeatureHandle
from plugcli.logging import configure_logging

__all__ = ["main", "create_initializer", "CliInitializer"]


def create_initializer(
    config: Config, features: Optional[Iterable[FeatureHandle]] = None
) -> CliInitializer:
    """Create an initializer configured from ``config``.

    Args:
        config: Loaded configuration
        features: Feature handles to add (default: the built-in features)
    """
    if features is None:
        from plugcli.builtin import default_features

        features = default_features(config)

    cli = CliInitializer(
        program_name=config.cli.program_name,
        version=__version__,
        description="Pluggable command-line tool",
        verbose=config.errors.verbose,
    )
    for feature in features:
        cli.add(feature)
    return cli


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the plugcli CLI."""
    try:
        config = Config.load()
    except ConfigError as e:
        return report_error(e)

    configure_logging(config.logging.level, config.logging.format)
    return create_initializer(config).run(argv)


def entrypoint() -> None:
    """Console script wrapper that exits with the run's status."""
    sys.exit(main())
