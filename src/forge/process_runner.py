"""Process execution abstraction layer.

The shell executor runs every command through a ProcessRunner so tests can
substitute a fake and observe the exact invocations.
"""

import subprocess
from abc import ABC, abstractmethod
from typing import Any

from forge.logging import Logger, NoopLogger

__all__ = [
    "ProcessRunner",
    "PassthroughProcessRunner",
]


class ProcessRunner(ABC):
    """Abstract interface for running subprocess commands."""

    @abstractmethod
    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        """
        Run a subprocess command.

        This method signature matches subprocess.run() to allow for direct
        substitution in existing code.

        Returns:
            subprocess.CompletedProcess: The completed process result

        Raises:
            subprocess.CalledProcessError: If check=True and process exits non-zero
            OSError: If the process cannot be started
        """
        ...


class PassthroughProcessRunner(ProcessRunner):
    """
    Process runner that directly delegates to subprocess.run.

    Output is not captured, so the child writes straight to the standard
    streams of the forge process.
    """

    def __init__(self, logger: Logger | None = None) -> None:
        self._logger = logger or NoopLogger()

    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        self._logger.trace(f"subprocess.run {args[0] if args else kwargs.get('args')!r}", markup=False)
        return subprocess.run(*args, **kwargs)
