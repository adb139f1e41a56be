"""Command-line interface for Forge."""

from __future__ import annotations

from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from forge import __version__
from forge.cli_commands.list_targets import list_targets
from forge.cli_commands.run_targets import run_targets
from forge.cli_commands.show_tree import show_tree
from forge.config import ConfigError, ForgeConfig, load_config
from forge.console_logger import ConsoleLogger
from forge.forgefile import ForgeError
from forge.logging import Logger, LogLevel

app = typer.Typer(
    help="Forge - generic build tool powered by YAML forgefiles.",
    add_completion=False,
    no_args_is_help=False,
)


class UsageError(ForgeError):
    """Raised when forge is invoked with an invalid set of arguments."""

    def __init__(self, message: str = "no targets given"):
        super().__init__(message)


def _check_targets(
    targets: Optional[List[str]], list_opt: bool, tree: Optional[str]
) -> List[str]:
    if list_opt or tree is not None:
        if targets:
            option = "--list" if list_opt else "--tree"
            raise UsageError(f"{option} does not take targets, got: {' '.join(targets)}")
        return []
    if not targets:
        raise UsageError()
    return targets


def _build_config(
    logger: Logger,
    forgefile: Optional[str],
    dry_run: bool,
    debug: bool,
) -> ForgeConfig:
    try:
        config = load_config()
    except ConfigError as e:
        logger.error(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    return config.with_overrides(
        forgefile=forgefile,
        dry_run=True if dry_run else None,
        log_level=LogLevel.DEBUG if debug else None,
    )


@app.command()
def main(
    ctx: typer.Context,
    targets: Optional[List[str]] = typer.Argument(
        None, help="Targets to run, in order", show_default=False
    ),
    forgefile: Optional[str] = typer.Option(
        None, "--forgefile", "-f", help="Path to the forgefile to execute [default: ./forgefile]"
    ),
    dry_run: bool = typer.Option(
        False, "--dryrun", "-n", help="Print selected targets' commands but don't execute them"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    list_opt: bool = typer.Option(False, "--list", "-l", help="List all targets"),
    tree: Optional[str] = typer.Option(
        None, "--tree", help="Show the dependency tree of a target", metavar="TARGET"
    ),
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
):
    """
    Run TARGETS and their dependencies from the forgefile.
    """
    if version:
        typer.echo(f"forge version {__version__}")
        raise typer.Exit()

    logger = ConsoleLogger(Console(stderr=True), LogLevel.DEBUG if debug else LogLevel.INFO)
    config = _build_config(logger, forgefile, dry_run, debug)
    logger.debug(f"Using forgefile {config.forgefile} (dry run: {config.dry_run})")

    try:
        requested = _check_targets(targets, list_opt, tree)
    except UsageError as e:
        logger.error(ctx.get_usage(), markup=False, highlight=False)
        logger.error(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(2)

    if list_opt:
        list_targets(logger, config)
        return

    if tree is not None:
        show_tree(logger, config, tree)
        return

    run_targets(logger, config, requested)


def cli():
    """Console script entry point."""
    app()


if __name__ == "__main__":
    cli()
