from __future__ import annotations

import typer
from rich.markup import escape
from rich.tree import Tree

from forge.cli_commands import load_forgefile_or_exit
from forge.config import ForgeConfig
from forge.graph import TargetNotFoundError, build_dependency_tree
from forge.logging import Logger


def show_tree(logger: Logger, config: ForgeConfig, target_name: str):
    """
    Show the dependency tree of a target.
    """
    forgefile = load_forgefile_or_exit(logger, config)

    try:
        dep_tree = build_dependency_tree(forgefile, target_name)
    except TargetNotFoundError as e:
        logger.error(f"[red]Error building dependency tree: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    logger.info(_build_rich_tree(dep_tree))


def _build_rich_tree(dep_tree: dict) -> Tree:
    """
    Build a Rich Tree visualization from a dependency tree structure.

    Args:
        dep_tree: Nested dictionary representing target dependencies

    Returns:
        Rich Tree object for terminal display
    """
    label = escape(dep_tree["name"])
    if dep_tree.get("cycle"):
        label += " [red](cycle)[/red]"
    elif dep_tree.get("seen"):
        label += " [dim](see above)[/dim]"
    tree = Tree(label)

    for dep in dep_tree.get("deps", []):
        tree.add(_build_rich_tree(dep))

    return tree
