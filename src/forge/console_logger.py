"""Rich console output for forge."""

from rich.console import Console

from forge.logging import LeveledLogger, LogLevel


class ConsoleLogger(LeveledLogger):
    """Writes forge diagnostics and dry-run output to a rich Console.

    The CLI hands in a stderr console, so target output on stdout stays
    separate from forge's own messages. Arguments go to Console.print as
    given: strings are rich markup unless markup=False is passed, and tables
    or trees are rendered as-is.
    """

    def __init__(self, console: Console, level: LogLevel = LogLevel.INFO) -> None:
        super().__init__(level)
        self._console = console

    def emit(self, *args, **kwargs) -> None:
        self._console.print(*args, **kwargs)
