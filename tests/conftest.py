"""Pytest fixtures for plugcli tests."""

from collections.abc import Callable

import pytest

from plugcli.features import create_cli_plugin
from plugcli.types import CliCommand, ExecutionContext


class RecordingCommand:
    """Execute callable that remembers every context it was called with."""

    def __init__(self, error: BaseException | None = None):
        self.calls: list[ExecutionContext] = []
        self.error = error

    async def __call__(self, context: ExecutionContext) -> None:
        self.calls.append(context)
        if self.error is not None:
            raise self.error

    @property
    def last(self) -> ExecutionContext:
        return self.calls[-1]


@pytest.fixture
def recorder() -> Callable[..., RecordingCommand]:
    """Factory for RecordingCommand instances."""
    return RecordingCommand


@pytest.fixture
def make_command() -> Callable[..., CliCommand]:
    def _factory(*path: str, description: str = "", execute=None, deprecated: bool = False):
        return CliCommand(
            path=path,
            description=description or f"{' '.join(path)} command",
            execute=execute or RecordingCommand(),
            deprecated=deprecated,
        )

    return _factory


@pytest.fixture
def make_plugin():
    """Build a CLI plugin that registers the given commands."""

    def _factory(plugin_id: str, *commands: CliCommand):
        async def init(registry):
            for command in commands:
                registry.add_command(command)

        return create_cli_plugin(plugin_id, init)

    return _factory


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run from an empty project with no user config."""
    (tmp_path / ".git").mkdir()
    monkeypatch.chdir(tmp_path)
    user_config = tmp_path / "user" / "config.toml"
    monkeypatch.setattr("plugcli.config.USER_CONFIG_PATH", user_config)
    monkeypatch.setattr("plugcli.builtin.config.USER_CONFIG_PATH", user_config)
    return tmp_path
