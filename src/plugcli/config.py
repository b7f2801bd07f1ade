"""
Configuration file support for plugcli.

Provides hierarchical configuration loading from:
1. Project config: .plugcli.toml or plugcli.toml in project root
2. User config: ~/.config/plugcli/config.toml

Project config overrides user config, which overrides the built-in defaults.
"""

import tomllib
import warnings
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from plugcli.exceptions import PlugCliError

# Config file names to search for in project directories
CONFIG_FILENAMES = [".plugcli.toml", "plugcli.toml"]

# User-level config path
USER_CONFIG_PATH = Path.home() / ".config" / "plugcli" / "config.toml"

# All known config keys for validation
KNOWN_KEYS = {
    "cli": {"program_name"},
    "errors": {"verbose"},
    "logging": {"level", "format"},
}

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class CliConfig:
    """Options for the command-line program itself."""

    program_name: str = "plugcli"


@dataclass
class ErrorsConfig:
    """Error reporting options."""

    verbose: bool = False


@dataclass
class LoggingConfig:
    """Logging options."""

    level: str = "WARNING"
    format: str = "[%(levelname)s] %(name)s: %(message)s"


@dataclass
class Config:
    """Merged configuration from all sources."""

    cli: CliConfig = field(default_factory=CliConfig)
    errors: ErrorsConfig = field(default_factory=ErrorsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Track which file each setting came from (for `config show`)
    _sources: dict = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> "Config":
        """
        Load configuration with precedence: project > user > defaults.

        Args:
            start_dir: Directory to start searching from (default: current directory)

        Returns:
            Merged configuration object

        Raises:
            ConfigError: If a config file is unreadable or has invalid values
        """
        if start_dir is None:
            start_dir = Path.cwd()

        config = cls()
        sources: dict[str, str] = {}

        # Load user config first (lower precedence)
        if USER_CONFIG_PATH.exists():
            user_data = _load_toml_file(USER_CONFIG_PATH)
            _merge_config(config, user_data, str(USER_CONFIG_PATH), sources)

        # Load project config (higher precedence)
        project_config = _find_project_config(start_dir)
        if project_config:
            project_data = _load_toml_file(project_config)
            _merge_config(config, project_data, str(project_config), sources)

        config._sources = sources
        return config

    def get_source(self, key: str) -> str:
        """Get the source file for a config key."""
        return self._sources.get(key, "default")


class ConfigError(PlugCliError):
    """Configuration-related errors."""

    pass


def _find_project_config(start_dir: Path) -> Path | None:
    """
    Find project config by walking up the directory tree.

    Stops at .git directory or filesystem root.
    """
    current = start_dir.resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        # Stop at .git directory (project root)
        if (current / ".git").exists():
            break

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _load_toml_file(path: Path) -> dict[str, Any]:
    """
    Load a TOML file.

    Raises:
        ConfigError: If TOML is invalid or the file cannot be read
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e


def _merge_config(
    config: Config, data: dict[str, Any], source: str, sources: dict[str, str]
) -> None:
    """
    Merge loaded config data into Config object.

    Args:
        config: Config object to update
        data: Raw config data from TOML
        source: Source file path (for tracking)
        sources: Dict to update with source info
    """
    for key in data:
        if key not in KNOWN_KEYS:
            warnings.warn(f"Unknown config key '{key}' in {source}", stacklevel=3)

    for section_name, known in KNOWN_KEYS.items():
        section_data = data.get(section_name)
        if section_data is None:
            continue
        if not isinstance(section_data, dict):
            raise ConfigError(
                f"Config section [{section_name}] must be a table",
                context={"file": source},
            )
        _warn_unknown_keys(section_data, known, section_name, source)

        section = getattr(config, section_name)
        for section_field in fields(section):
            if section_field.name not in section_data:
                continue
            value = section_data[section_field.name]
            expected = type(getattr(section, section_field.name))
            _check_type(section_name, section_field.name, value, expected, source)
            setattr(section, section_field.name, value)
            sources[f"{section_name}.{section_field.name}"] = source

    level = config.logging.level.upper()
    if level not in LOG_LEVELS:
        raise ConfigError(
            f"Invalid logging level '{config.logging.level}'",
            context={"file": source},
            suggestions=[f"Use one of: {', '.join(sorted(LOG_LEVELS))}"],
        )
    config.logging.level = level


def _check_type(section: str, key: str, value: Any, expected: type, source: str) -> None:
    if isinstance(value, expected):
        return
    raise ConfigError(
        f"Config key '{section}.{key}' must be of type {expected.__name__}",
        context={"file": source, "value": repr(value)},
    )


def _warn_unknown_keys(data: dict[str, Any], known: set[str], section: str, source: str) -> None:
    """Warn about unknown keys in a config section."""
    for key in data:
        if key not in known:
            warnings.warn(f"Unknown config key '{section}.{key}' in {source}", stacklevel=4)


def generate_template() -> str:
    """
    Generate a template config file with all options documented.

    Returns:
        Template TOML string
    """
    return """# plugcli configuration file
# Place as .plugcli.toml in project root or ~/.config/plugcli/config.toml for user defaults

[cli]
# Program name shown in usage lines and help output
# program_name = "plugcli"

[errors]
# Show full stack traces when a command fails
# verbose = false

[logging]
# Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL
# level = "WARNING"

# Log record format (logging.Formatter syntax)
# format = "[%(levelname)s] %(name)s: %(message)s"
"""


def get_config_paths() -> dict[str, Path | None]:
    """
    Get paths to config files that would be loaded.

    Returns:
        Dict with 'user' and 'project' keys
    """
    project_config = _find_project_config(Path.cwd())

    return {
        "user": USER_CONFIG_PATH if USER_CONFIG_PATH.exists() else None,
        "project": project_config,
    }
