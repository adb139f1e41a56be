"""CLI command implementations and shared utilities."""

from __future__ import annotations

import os
import sys

import typer
from rich.markup import escape

from forge.config import ForgeConfig
from forge.forgefile import ForgeFile, LoadError
from forge.logging import Logger
from forge.parser import load_forgefile


def _supports_unicode() -> bool:
    """
    Check if the terminal supports Unicode characters.

    Returns:
    True if terminal supports UTF-8, False otherwise
    """
    # Classic Windows console (conhost)
    if os.name == "nt" and "WT_SESSION" not in os.environ:
        return False

    encoding = sys.stderr.encoding
    if not encoding:
        return False

    try:
        "✓✗".encode(encoding)
        return True
    except UnicodeEncodeError:
        return False


def get_action_success_string() -> str:
    """Unicode tick (✓) if the terminal supports it, otherwise "[ OK ]"."""
    return "✓" if _supports_unicode() else "[ OK ]"


def get_action_failure_string() -> str:
    """Unicode cross (✗) if the terminal supports it, otherwise "[ FAIL ]"."""
    return "✗" if _supports_unicode() else "[ FAIL ]"


def load_forgefile_or_exit(logger: Logger, config: ForgeConfig) -> ForgeFile:
    """
    Load the forgefile named by config, exiting with status 1 on failure.
    """
    try:
        return load_forgefile(config.forgefile, logger)
    except LoadError as e:
        logger.error(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)
