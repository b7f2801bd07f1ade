"""Features shipped with the plugcli program."""

from __future__ import annotations

from typing import TYPE_CHECKING

from plugcli.builtin.config import config_plugin, create_config_plugin

if TYPE_CHECKING:
    from plugcli.config import Config


def default_features(config: Config | None = None) -> list:
    """Return the features registered by the ``plugcli`` program.

    Args:
        config: Configuration loaded by the running program, if any
    """
    if config is None:
        return [config_plugin]
    return [create_config_plugin(config)]


__all__ = ["config_plugin", "create_config_plugin", "default_features"]
