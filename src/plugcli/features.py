"""
Feature contract and feature handle normalization.

A feature is any object tagged with ``feature_type`` and exposing an async
``init(registry)``. The only recognized tag is ``CLI_PLUGIN_TYPE``; the
registry rejects everything else.

Handles passed to the initializer are either features or awaitables. An
awaitable may yield the feature itself or a wrapper holding it under
``default`` (a mapping key or an attribute), and module interop can nest
that wrapper twice.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from plugcli.registry import CommandRegistry

logger = logging.getLogger(__name__)

CLI_PLUGIN_TYPE = "@plugcli/CliPlugin"

_MISSING = object()


@dataclass(frozen=True)
class CliPlugin:
    """A feature contributing commands through a registry.

    Attributes:
        plugin_id: Identifier used in logs and conflict reports.
        init: Coroutine function called with the CommandRegistry.
    """

    plugin_id: str
    init: Callable[["CommandRegistry"], Awaitable[None]] = field(compare=False)
    feature_type: str = field(default=CLI_PLUGIN_TYPE, init=False)


FeatureHandle = Union[Any, Awaitable[Any]]


def create_cli_plugin(
    plugin_id: str, init: Callable[["CommandRegistry"], Awaitable[None]]
) -> CliPlugin:
    """Create a CLI feature.

    Example::

        async def init(registry):
            registry.add_command(CliCommand(("hello",), "Say hello", execute=hello))

        feature = create_cli_plugin("hello", init)
    """
    if not plugin_id:
        raise ValueError("plugin_id must not be empty")
    if not callable(init):
        raise TypeError(f"init must be callable, got {type(init).__name__}")
    return CliPlugin(plugin_id=plugin_id, init=init)


def feature_type_of(obj: Any) -> str | None:
    """Return the feature tag carried by ``obj``, or None."""
    return getattr(obj, "feature_type", None)


def is_feature(obj: Any) -> bool:
    return feature_type_of(obj) is not None


def _default_of(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return obj.get("default", _MISSING)
    return getattr(obj, "default", _MISSING)


def unwrap_feature(obj: Any) -> Any:
    """Normalize a possibly wrapped feature.

    A tagged feature is returned as-is. A wrapper whose ``default`` holds a
    tagged feature is unwrapped one level. Anything else is returned
    unchanged, which makes the function idempotent.
    """
    if is_feature(obj):
        return obj
    inner = _default_of(obj)
    if inner is not _MISSING and is_feature(inner):
        return inner
    return obj


async def resolve_feature(handle: FeatureHandle) -> Any:
    """Await a feature handle and normalize the result.

    Already-resolved handles are returned unchanged.
    """
    if not inspect.isawaitable(handle):
        return handle

    feature = unwrap_feature(await handle)
    if not is_feature(feature):
        inner = _default_of(feature)
        if inner is not _MISSING:
            # Double {default: {default: feature}} nesting from module interop
            feature = unwrap_feature(inner)
    logger.debug("Resolved feature handle to %r", feature)
    return feature
