"""In-memory model of a forgefile: targets, commands and target chains."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# Commands starting with this marker have non-zero exit codes ignored.
COMMAND_IGNORE_ERROR_PREFIX = "?"


class ForgeError(Exception):
    """Base class for every error raised by forge."""

    pass


class LoadError(ForgeError):
    """Raised when the forgefile or a config file cannot be turned into data."""

    pass


class TargetType(str, enum.Enum):
    """When a target runs.

    VIRTUAL targets always run. FILE and DIRECTORY targets are named after a
    path relative to the working directory and are skipped when that path
    already exists with the matching kind.
    """

    VIRTUAL = "virtual"
    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True)
class Command:
    """A single shell command of a target.

    Example:
        >>> Command('?echo "ignored" && exit 1').ignore_error
        True
    """

    raw: str

    @property
    def ignore_error(self) -> bool:
        return self.raw.startswith(COMMAND_IGNORE_ERROR_PREFIX)

    @property
    def text(self) -> str:
        """The command to execute, without the ignore-error marker."""
        if self.ignore_error:
            return self.raw[len(COMMAND_IGNORE_ERROR_PREFIX):]
        return self.raw

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class TargetDefinition:
    """A target as declared in the forgefile.

    The type is kept as the raw string so that an unknown value survives
    loading and is reported when the target is about to run.
    """

    type: str = TargetType.VIRTUAL.value
    depends_on: tuple[str, ...] = ()
    commands: tuple[Command, ...] = ()
    environment: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Freeze the collection fields."""
        object.__setattr__(self, "depends_on", tuple(self.depends_on))
        object.__setattr__(
            self,
            "commands",
            tuple(c if isinstance(c, Command) else Command(c) for c in self.commands),
        )
        object.__setattr__(
            self, "environment", MappingProxyType(dict(self.environment))
        )

    def environment_entries(self) -> list[str]:
        """Return the environment as NAME=VALUE strings, sorted by name."""
        return [f"{k}={self.environment[k]}" for k in sorted(self.environment)]


@dataclass(frozen=True)
class ResolvedTarget:
    """A target definition paired with its name inside a target chain."""

    name: str
    definition: TargetDefinition

    @property
    def type(self) -> str:
        return self.definition.type

    @property
    def commands(self) -> tuple[Command, ...]:
        return self.definition.commands

    @property
    def environment(self) -> Mapping[str, str]:
        return self.definition.environment

    def __str__(self) -> str:
        return self.name


class TargetChain:
    """Ordered, duplicate-free sequence of resolved targets.

    Every target appears after all of its transitive dependencies. Chains are
    produced by the resolver and never change afterwards.
    """

    def __init__(self, targets: Iterable[ResolvedTarget] = ()):
        self._targets = tuple(targets)

    def contains(self, name: str) -> bool:
        return any(t.name == name for t in self._targets)

    def names(self) -> list[str]:
        return [t.name for t in self._targets]

    def __iter__(self) -> Iterator[ResolvedTarget]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __getitem__(self, index: int) -> ResolvedTarget:
        return self._targets[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TargetChain):
            return NotImplemented
        return self._targets == other._targets

    def __repr__(self) -> str:
        return f"TargetChain({self.names()!r})"


class ForgeFile(Mapping[str, TargetDefinition]):
    """Read-only mapping from target name to target definition."""

    def __init__(self, targets: Mapping[str, TargetDefinition] | None = None):
        self._targets = dict(targets or {})

    def get_target(self, name: str) -> TargetDefinition | None:
        return self._targets.get(name)

    def target_names(self) -> list[str]:
        return list(self._targets.keys())

    def __getitem__(self, name: str) -> TargetDefinition:
        return self._targets[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __repr__(self) -> str:
        return f"ForgeFile({self.target_names()!r})"
