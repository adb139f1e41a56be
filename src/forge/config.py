"""
Configuration for a forge invocation.

Settings come from config files (machine, user, project; later files win)
and are then overridden by command-line flags. The result is one ForgeConfig
value that the CLI builds once and passes into the runner and executors.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import platformdirs
import yaml

from forge.executor import DEFAULT_SHELL
from forge.forgefile import LoadError
from forge.logging import LogLevel
from forge.parser import DEFAULT_FORGEFILE

__all__ = [
    "ForgeConfig",
    "ConfigError",
    "get_user_config_path",
    "get_machine_config_path",
    "find_project_config",
    "parse_config_file",
    "load_config",
]

PROJECT_CONFIG_FILE = ".forge-config.yml"

CONFIG_FIELDS = ("forgefile", "shell")


class ConfigError(LoadError):
    """
    Raised when a configuration file is invalid.
    """

    pass


@dataclass(frozen=True)
class ForgeConfig:
    """Settings of one forge invocation."""

    forgefile: str = DEFAULT_FORGEFILE
    shell: str = DEFAULT_SHELL
    dry_run: bool = False
    log_level: LogLevel = LogLevel.INFO

    def with_overrides(self, **overrides: Any) -> "ForgeConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def get_machine_config_path() -> Path:
    """
    Get the path to the machine-level (system-wide) configuration file.

    Returns:
        Path to the machine config file (may not exist)
    """
    config_dir = Path(platformdirs.site_config_dir("forge"))
    return config_dir / "config.yml"


def get_user_config_path() -> Path:
    """
    Get the path to the user-level configuration file.

    Returns:
        Path to the user config file (may not exist)
    """
    config_dir: Path = Path(platformdirs.user_config_dir("forge"))
    return config_dir / "config.yml"


def find_project_config(start_dir: Path) -> Optional[Path]:
    """
    Walk up the directory tree from start_dir to find .forge-config.yml.

    Returns:
        Path to .forge-config.yml if found, None otherwise
    """
    try:
        current = start_dir.resolve()
    except (OSError, RuntimeError):
        return None

    while True:
        config_path = current / PROJECT_CONFIG_FILE
        try:
            if config_path.is_file():
                return config_path
        except OSError:
            # Unreadable directory, keep walking up
            pass

        parent = current.parent
        if parent == current:
            return None
        current = parent


def parse_config_file(path: Path) -> dict[str, str]:
    """
    Parse a forge configuration file.

    Missing and empty files are valid and yield no settings.

    Example:
        ```yaml
        forgefile: build/forgefile.yml
        shell: /bin/bash
        ```

    Returns:
        The settings defined in the file

    Raises:
        ConfigError: If the file cannot be read, is malformed YAML, or
            contains unknown or mistyped fields
    """
    if not path.exists():
        return {}

    try:
        with open(path, "r") as f:
            content = f.read()
    except (IOError, OSError) as e:
        raise ConfigError(f"Error reading config file '{path}': {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML in config file '{path}': {e}") from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Error in config file '{path}': expected a dictionary")

    unknown = [str(key) for key in data if key not in CONFIG_FIELDS]
    if unknown:
        raise ConfigError(
            f"Error in config file '{path}': unknown field(s): {', '.join(unknown)}"
        )

    for key, value in data.items():
        if not isinstance(value, str) or not value:
            raise ConfigError(
                f"Error in config file '{path}': Field '{key}' must be a non-empty string"
            )

    return data


def load_config(start_dir: Optional[Path] = None) -> ForgeConfig:
    """
    Build a ForgeConfig from the machine, user and project config files.

    Raises:
        ConfigError: If any of the config files is invalid
    """
    if start_dir is None:
        start_dir = Path.cwd()

    paths = [get_machine_config_path(), get_user_config_path()]
    project_config = find_project_config(start_dir)
    if project_config is not None:
        paths.append(project_config)

    config = ForgeConfig()
    for path in paths:
        config = config.with_overrides(**parse_config_file(path))
    return config
