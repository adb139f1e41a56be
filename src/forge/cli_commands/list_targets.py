from __future__ import annotations

from rich.table import Table

from forge.cli_commands import load_forgefile_or_exit
from forge.config import ForgeConfig
from forge.logging import Logger


def list_targets(logger: Logger, config: ForgeConfig):
    """
    List all targets of the forgefile with their type and dependencies.
    """
    forgefile = load_forgefile_or_exit(logger, config)

    names = sorted(forgefile.target_names())
    max_name_len = max((len(name) for name in names), default=0)

    table = Table(show_edge=False, show_header=False, box=None, padding=(0, 2))
    table.add_column("Target", style="bold cyan", no_wrap=True, width=max_name_len)
    table.add_column("Type", style="white", no_wrap=True)
    table.add_column("Depends on", style="white", max_width=80)

    for name in names:
        definition = forgefile[name]
        table.add_row(name, definition.type, ", ".join(definition.depends_on))

    logger.info(table)
