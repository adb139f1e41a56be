"""Command executors: run or log the commands of a resolved target."""

from __future__ import annotations

import os
import subprocess
from abc import ABC, abstractmethod

from forge.forgefile import ForgeError, ResolvedTarget
from forge.logging import Logger, NoopLogger
from forge.process_runner import PassthroughProcessRunner, ProcessRunner

# The default shell that is used by the ShellExecutor.
DEFAULT_SHELL = "/bin/sh"


class CommandExecutionError(ForgeError):
    """Raised when a command of a target fails."""

    def __init__(self, target_name: str, command_index: int, cause: Exception):
        super().__init__(
            f"failed to run command at index {command_index} of target "
            f"'{target_name}': {_describe(cause)}"
        )
        self.target_name = target_name
        self.command_index = command_index
        self.cause = cause


def _describe(error: Exception) -> str:
    if isinstance(error, subprocess.CalledProcessError):
        return f"exit code {error.returncode}"
    return str(error)


class CommandExecutor(ABC):
    """Runs the commands of one resolved target."""

    @abstractmethod
    def execute(self, target: ResolvedTarget) -> None:
        """Execute every command of target.

        Raises:
            CommandExecutionError: If a command fails and its error is not ignored
        """
        ...


class ShellExecutor(CommandExecutor):
    """Executes the commands of a target in the system shell.

    Each command runs in its own `<shell> -c <command>` invocation, so working
    directory changes and shell variables do not carry over to the next
    command. The process environment is a copy of os.environ extended with the
    target's environment.
    """

    def __init__(
        self,
        shell: str = DEFAULT_SHELL,
        process_runner: ProcessRunner | None = None,
        logger: Logger | None = None,
    ):
        self._logger = logger or NoopLogger()
        self._shell = shell
        self._process_runner = process_runner or PassthroughProcessRunner(self._logger)

    @property
    def shell(self) -> str:
        return self._shell

    def build_environment(self, target: ResolvedTarget) -> dict[str, str]:
        """Inherited environment extended with the target's entries."""
        env = dict(os.environ)
        for key in sorted(target.environment):
            env[key] = target.environment[key]
        return env

    def execute(self, target: ResolvedTarget) -> None:
        env = self.build_environment(target)

        for index, command in enumerate(target.commands):
            self._logger.debug(
                f"Running command {index} of target '{target.name}': {command.text}",
                markup=False,
            )
            try:
                result = self._process_runner.run(
                    [self._shell, "-c", command.text],
                    env=env,
                    check=False,
                )
            except (OSError, ValueError) as e:
                # The shell never ran (launch failure, NUL byte or bad environment
                # name), the ignore-error marker does not apply
                raise CommandExecutionError(target.name, index, e) from e

            if result.returncode == 0:
                continue

            error = subprocess.CalledProcessError(result.returncode, command.text)
            if command.ignore_error:
                self._logger.debug(
                    f"Ignoring exit code {result.returncode} of command {index} "
                    f"of target '{target.name}'"
                )
                continue

            raise CommandExecutionError(target.name, index, error) from error


class DryRunExecutor(CommandExecutor):
    """Logs every command of a target instead of executing it."""

    def __init__(self, logger: Logger | None = None):
        self._logger = logger or NoopLogger()

    def execute(self, target: ResolvedTarget) -> None:
        for command in target.commands:
            self._logger.info(command.text, markup=False, highlight=False)
