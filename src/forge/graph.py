"""Dependency resolution: turn requested target names into a target chain."""

from __future__ import annotations

from collections.abc import Iterable

from forge.forgefile import ForgeError, ForgeFile, ResolvedTarget, TargetChain


class ResolutionError(ForgeError):
    """Base class for errors raised while building a target chain."""

    pass


class TargetNotFoundError(ResolutionError):
    """Raised when a requested target or a dependency doesn't exist."""

    def __init__(self, name: str):
        super().__init__(f"target '{name}' not found")
        self.name = name


class SelfDependencyError(ResolutionError):
    """Raised when a target lists itself in dependsOn."""

    def __init__(self, name: str):
        super().__init__(f"target '{name}' cannot depend on itself")
        self.name = name


class CyclicDependencyError(ResolutionError):
    """Raised when dependencies form a cycle of two or more targets."""

    def __init__(self, cycle: list[str]):
        super().__init__(f"dependency cycle detected: {' -> '.join(cycle)}")
        self.cycle = cycle


class DependencyResolutionError(ResolutionError):
    """Raised when a dependency of a target fails to resolve."""

    def __init__(self, name: str, cause: ResolutionError):
        super().__init__(f"failed to resolve dependency '{name}': {cause}")
        self.name = name
        self.cause = cause

    @property
    def root_cause(self) -> ResolutionError:
        """The innermost error, past every level of dependency wrapping."""
        cause = self.cause
        while isinstance(cause, DependencyResolutionError):
            cause = cause.cause
        return cause


def resolve_target_chain(requested: Iterable[str], forgefile: ForgeFile) -> TargetChain:
    """Resolve requested targets and their dependencies into execution order.

    Targets are resolved depth-first in the order they are requested, each
    dependency before its dependent. A target already in the chain is never
    added twice.

    Args:
        requested: Names of the targets to run, in order
        forgefile: Parsed forgefile containing all targets

    Returns:
        TargetChain with every dependency before its dependents

    Raises:
        TargetNotFoundError: If a requested target doesn't exist
        SelfDependencyError: If a requested target depends on itself
        DependencyResolutionError: If any dependency fails to resolve
    """
    resolved: list[ResolvedTarget] = []
    resolved_names: set[str] = set()

    for name in requested:
        if name in resolved_names:
            continue
        _resolve_target(name, forgefile, resolved, resolved_names, [])

    return TargetChain(resolved)


def _resolve_target(
    name: str,
    forgefile: ForgeFile,
    resolved: list[ResolvedTarget],
    resolved_names: set[str],
    in_progress: list[str],
) -> None:
    definition = forgefile.get(name)
    if definition is None:
        raise TargetNotFoundError(name)

    if name in definition.depends_on:
        raise SelfDependencyError(name)

    in_progress.append(name)

    for dep in definition.depends_on:
        if dep in resolved_names:
            continue

        # A dependency that is still being resolved closes a cycle
        if dep in in_progress:
            raise CyclicDependencyError(in_progress[in_progress.index(dep):] + [dep])

        try:
            _resolve_target(dep, forgefile, resolved, resolved_names, in_progress)
        except ResolutionError as e:
            raise DependencyResolutionError(dep, e) from e

    in_progress.pop()

    resolved.append(ResolvedTarget(name=name, definition=definition))
    resolved_names.add(name)


def build_dependency_tree(forgefile: ForgeFile, target_name: str) -> dict:
    """Build a tree structure representing dependencies for visualization.

    Args:
        forgefile: Parsed forgefile containing all targets
        target_name: Name of the target to build the tree for

    Returns:
        Nested dictionary representing the dependency tree. A dependency that
        closes a cycle is marked with "cycle": True, and a target already
        expanded elsewhere in the tree with "seen": True; neither is expanded
        again.

    Raises:
        TargetNotFoundError: If the target or any dependency doesn't exist
    """
    if target_name not in forgefile:
        raise TargetNotFoundError(target_name)

    visiting = set()
    expanded = set()

    def build_tree(name: str) -> dict:
        definition = forgefile.get(name)
        if definition is None:
            raise TargetNotFoundError(name)

        if name in visiting:
            return {"name": name, "deps": [], "cycle": True}

        # Each target is expanded at its first occurrence only
        if name in expanded:
            return {"name": name, "deps": [], "seen": True}

        visiting.add(name)
        tree = {
            "name": name,
            "deps": [build_tree(dep) for dep in definition.depends_on],
        }
        visiting.remove(name)
        expanded.add(name)

        return tree

    return build_tree(target_name)
