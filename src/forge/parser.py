"""Parse rendered forgefile YAML into a ForgeFile."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from forge.forgefile import ForgeFile, LoadError, TargetDefinition
from forge.logging import Logger, NoopLogger
from forge.render import render_forgefile

DEFAULT_FORGEFILE = "./forgefile"

TARGET_FIELDS = ("type", "dependsOn", "commands", "environment")


class ForgeFileError(LoadError):
    """Raised when a forgefile has malformed structure."""

    pass


def _string_list(target_name: str, field_name: str, value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ForgeFileError(
            f"Target '{target_name}': field '{field_name}' must be a list"
        )
    for item in value:
        if not isinstance(item, str):
            raise ForgeFileError(
                f"Target '{target_name}': every entry of '{field_name}' must be a string, "
                f"got {item!r}"
            )
    return value


def _environment(target_name: str, value: Any) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ForgeFileError(
            f"Target '{target_name}': field 'environment' must be a dictionary"
        )

    environment = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise ForgeFileError(
                f"Target '{target_name}': environment names must be strings, got {key!r}"
            )
        if not key or "=" in key or "\0" in key:
            raise ForgeFileError(
                f"Target '{target_name}': illegal environment variable name {key!r}"
            )
        if isinstance(item, (dict, list)):
            raise ForgeFileError(
                f"Target '{target_name}': environment variable '{key}' must be a scalar"
            )
        # YAML turns `DEBUG: 1` into an int; the process environment wants text
        environment[key] = "" if item is None else str(item)
        if "\0" in environment[key]:
            raise ForgeFileError(
                f"Target '{target_name}': environment variable '{key}' contains a NUL byte"
            )
    return environment


def parse_target(name: str, data: Any) -> TargetDefinition:
    """Build a TargetDefinition from the YAML value of one target.

    Raises:
        ForgeFileError: If the value is not a valid target record
    """
    if data is None:
        return TargetDefinition()

    if not isinstance(data, dict):
        raise ForgeFileError(f"Target '{name}' must be a dictionary")

    unknown = [key for key in data if key not in TARGET_FIELDS]
    if unknown:
        raise ForgeFileError(
            f"Target '{name}' has unknown field(s): {', '.join(map(str, unknown))}"
        )

    target_type = data.get("type")
    if target_type is None:
        target_type = "virtual"
    elif not isinstance(target_type, str):
        raise ForgeFileError(f"Target '{name}': field 'type' must be a string")

    return TargetDefinition(
        type=target_type,
        depends_on=_string_list(name, "dependsOn", data.get("dependsOn")),
        commands=_string_list(name, "commands", data.get("commands")),
        environment=_environment(name, data.get("environment")),
    )


def parse_forgefile(content: str, source: str = "<forgefile>") -> ForgeFile:
    """Parse rendered forgefile text.

    Args:
        content: Rendered YAML document
        source: Name used in error messages

    Returns:
        ForgeFile mapping every target name to its definition

    Raises:
        ForgeFileError: If the YAML is invalid or has the wrong structure
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ForgeFileError(f"Error parsing YAML in forgefile '{source}': {e}") from e

    if data is None:
        return ForgeFile()

    if not isinstance(data, dict):
        raise ForgeFileError(
            f"Forgefile '{source}' must be a mapping of target names to targets"
        )

    targets = {}
    for name, target_data in data.items():
        if not isinstance(name, str):
            raise ForgeFileError(
                f"Forgefile '{source}': target names must be strings, got {name!r}"
            )
        targets[name] = parse_target(name, target_data)

    return ForgeFile(targets)


def load_forgefile(path: str | Path, logger: Logger | None = None) -> ForgeFile:
    """Render and parse the forgefile at path.

    Raises:
        RenderError: If the file cannot be read or rendered
        ForgeFileError: If the rendered document is malformed
    """
    logger = logger or NoopLogger()
    content = render_forgefile(path, logger)
    forgefile = parse_forgefile(content, str(path))
    logger.debug(f"Loaded {len(forgefile)} target(s) from {path}")
    return forgefile
