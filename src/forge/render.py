"""Placeholder substitution over the raw forgefile text.

A forgefile may reference {{ forge.file }}, {{ forge.dir }} and {{ env.NAME }}.
Rendering happens on the text before it is parsed, so placeholders can appear
anywhere in the document.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path

from forge.forgefile import LoadError
from forge.logging import Logger, NoopLogger

# Pattern matches: {{ prefix.name }} with optional whitespace
# Groups: (1) prefix (forge|env), (2) name (identifier)
PLACEHOLDER_PATTERN = re.compile(
    r'\{\{\s*(forge|env)\s*\.\s*([a-zA-Z_][a-zA-Z0-9_]*)\s*\}\}'
)


class RenderError(LoadError):
    """Raised when a forgefile cannot be read or rendered."""

    pass


def forge_variables(path: str) -> dict[str, str]:
    """Build the values available as {{ forge.* }} for a forgefile path."""
    return {
        "file": path,
        "dir": os.path.dirname(path) or ".",
    }


def substitute_placeholders(
    text: str,
    variables: Mapping[str, str],
    environ: Mapping[str, str] | None = None,
) -> str:
    """Substitute {{ forge.name }} and {{ env.NAME }} placeholders.

    Args:
        text: Text containing placeholders
        variables: Values for {{ forge.name }} placeholders
        environ: Values for {{ env.NAME }} placeholders (defaults to os.environ)

    Returns:
        Text with all placeholders replaced

    Raises:
        RenderError: If a forge variable is unknown or an environment
            variable is not set
    """
    if environ is None:
        environ = os.environ

    def replace_match(match: re.Match) -> str:
        prefix = match.group(1)
        name = match.group(2)

        if prefix == "forge":
            if name not in variables:
                raise RenderError(
                    f"Unknown forge variable '{name}' "
                    f"(available: {', '.join(sorted(variables))})"
                )
            return variables[name]

        value = environ.get(name)
        if value is None:
            raise RenderError(f"Environment variable '{name}' is not set")
        return value

    return PLACEHOLDER_PATTERN.sub(replace_match, text)


def render_forgefile(path: str | Path, logger: Logger | None = None) -> str:
    """Read the forgefile at path and render its placeholders.

    Raises:
        RenderError: If the file cannot be read or a placeholder is invalid
    """
    logger = logger or NoopLogger()
    path = str(path)

    try:
        with open(path, "r") as f:
            content = f.read()
    except (IOError, OSError) as e:
        raise RenderError(f"Error reading forgefile '{path}': {e}") from e

    logger.debug(f"Rendering forgefile {path}")
    try:
        return substitute_placeholders(content, forge_variables(path))
    except RenderError as e:
        raise RenderError(f"Error rendering forgefile '{path}': {e}") from e
