"""Run a target chain: eligibility checks and delegation to an executor."""

from __future__ import annotations

import stat
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from forge.executor import CommandExecutor, ShellExecutor
from forge.forgefile import ForgeError, ForgeFile, ResolvedTarget, TargetChain, TargetType
from forge.graph import resolve_target_chain
from forge.logging import Logger, NoopLogger


class UnknownTargetTypeError(ForgeError):
    """Raised when a target declares a type other than virtual, file or directory."""

    def __init__(self, name: str, target_type: str):
        super().__init__(f"unknown type '{target_type}' for target '{name}'")
        self.name = name
        self.target_type = target_type


class TargetExecutionError(ForgeError):
    """Raised when a target of the chain fails."""

    def __init__(self, name: str, cause: Exception):
        super().__init__(f"failed to run target '{name}': {cause}")
        self.name = name
        self.cause = cause


class PathStat(ABC):
    """Answers whether a target's path exists, and as what.

    Only used for type eligibility checks; file contents are never read.
    """

    @abstractmethod
    def is_file(self, path: str) -> bool:
        """True if path exists and is not a directory."""
        ...

    @abstractmethod
    def is_directory(self, path: str) -> bool:
        """True if path exists and is a directory."""
        ...


class OsPathStat(PathStat):
    """PathStat backed by the real filesystem.

    Relative paths are resolved against base_dir, or the process working
    directory when no base_dir is given. A missing path is reported as absent;
    any other OS error propagates.
    """

    def __init__(self, base_dir: Path | None = None):
        self._base_dir = base_dir

    def _stat_mode(self, path: str) -> int | None:
        full_path = Path(path) if self._base_dir is None else self._base_dir / path
        try:
            return full_path.stat().st_mode
        except (FileNotFoundError, NotADirectoryError):
            return None

    def is_file(self, path: str) -> bool:
        mode = self._stat_mode(path)
        return mode is not None and not stat.S_ISDIR(mode)

    def is_directory(self, path: str) -> bool:
        mode = self._stat_mode(path)
        return mode is not None and stat.S_ISDIR(mode)


class Runner:
    """Executes the targets of a forgefile in dependency order."""

    def __init__(
        self,
        executor: CommandExecutor | None = None,
        path_stat: PathStat | None = None,
        logger: Logger | None = None,
    ):
        """Initialize the runner.

        Args:
            executor: Executor for eligible targets (default: ShellExecutor)
            path_stat: Filesystem check for file/directory targets
            logger: Logger for debug tracing (default: no-op)
        """
        self._logger = logger or NoopLogger()
        self._executor = executor or ShellExecutor(logger=self._logger)
        self._path_stat = path_stat or OsPathStat()

    @property
    def executor(self) -> CommandExecutor:
        return self._executor

    def run(self, forgefile: ForgeFile, targets: Iterable[str]) -> TargetChain:
        """Resolve the requested targets and run the resulting chain.

        Returns:
            The chain that was run

        Raises:
            ResolutionError: If the chain cannot be built; nothing runs
            UnknownTargetTypeError: If a target in the chain has an invalid type
            TargetExecutionError: If a target fails
        """
        chain = resolve_target_chain(targets, forgefile)
        self.run_chain(chain)
        return chain

    def run_chain(self, chain: TargetChain) -> None:
        """Run every target of chain in order, stopping at the first failure.

        Targets that already ran are not rolled back.
        """
        self._logger.debug(f"Executing target chain {chain.names()}", markup=False)
        for target in chain:
            self._logger.debug(f"Executing target '{target.name}'")
            self.run_target(target)

    def run_target(self, target: ResolvedTarget) -> bool:
        """Run target if it is eligible.

        Returns:
            True if the executor was invoked, False if the target was skipped
        """
        try:
            eligible = self.is_eligible(target)
        except (OSError, ValueError) as e:
            raise TargetExecutionError(target.name, e) from e

        if not eligible:
            return False

        try:
            self._executor.execute(target)
        except ForgeError as e:
            raise TargetExecutionError(target.name, e) from e
        return True

    def is_eligible(self, target: ResolvedTarget) -> bool:
        """Decide from the target type whether target has to run.

        Raises:
            UnknownTargetTypeError: If the type is not virtual, file or directory
        """
        if target.type == TargetType.VIRTUAL.value:
            return True

        if target.type == TargetType.FILE.value:
            if self._path_stat.is_file(target.name):
                self._logger.debug(f"Target file {target.name} already exists. Skipping.")
                return False
            return True

        if target.type == TargetType.DIRECTORY.value:
            if self._path_stat.is_directory(target.name):
                self._logger.debug(
                    f"Target directory {target.name} already exists. Skipping."
                )
                return False
            return True

        raise UnknownTargetTypeError(target.name, target.type)
