"""Run targets command implementation."""

from __future__ import annotations

import typer
from rich.markup import escape

from forge.cli_commands import (
    get_action_failure_string,
    get_action_success_string,
    load_forgefile_or_exit,
)
from forge.config import ForgeConfig
from forge.executor import CommandExecutor, DryRunExecutor, ShellExecutor
from forge.forgefile import ForgeError
from forge.logging import Logger
from forge.process_runner import PassthroughProcessRunner
from forge.runner import Runner


def make_executor(logger: Logger, config: ForgeConfig) -> CommandExecutor:
    """
    Select the executor for this invocation.
    """
    if config.dry_run:
        return DryRunExecutor(logger)
    return ShellExecutor(
        shell=config.shell,
        process_runner=PassthroughProcessRunner(logger),
        logger=logger,
    )


def run_targets(logger: Logger, config: ForgeConfig, targets: list[str]) -> None:
    """
    Run the requested targets and their dependencies.

    Args:
    logger: Logger interface for output
    config: Settings of this invocation
    targets: Names of the targets to run, in order
    """
    forgefile = load_forgefile_or_exit(logger, config)
    runner = Runner(executor=make_executor(logger, config), logger=logger)

    quoted = ", ".join(f"'{t}'" for t in targets)
    try:
        runner.run(forgefile, targets)
    except ForgeError as e:
        logger.error(f"[red]{get_action_failure_string()} {escape(str(e))}[/red]")
        raise typer.Exit(1)

    logger.debug(
        f"[green]{get_action_success_string()} {escape(quoted)} completed successfully[/green]"
    )
