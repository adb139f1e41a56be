"""Forge - generic build tool powered by YAML forgefiles."""

__version__ = "0.1.0"

from forge.executor import (
    CommandExecutionError,
    CommandExecutor,
    DryRunExecutor,
    ShellExecutor,
)
from forge.forgefile import (
    Command,
    ForgeError,
    ForgeFile,
    LoadError,
    ResolvedTarget,
    TargetChain,
    TargetDefinition,
    TargetType,
)
from forge.graph import (
    CyclicDependencyError,
    DependencyResolutionError,
    ResolutionError,
    SelfDependencyError,
    TargetNotFoundError,
    build_dependency_tree,
    resolve_target_chain,
)
from forge.parser import ForgeFileError, load_forgefile, parse_forgefile
from forge.render import RenderError, render_forgefile
from forge.runner import (
    OsPathStat,
    PathStat,
    Runner,
    TargetExecutionError,
    UnknownTargetTypeError,
)

__all__ = [
    "__version__",
    "Command",
    "CommandExecutionError",
    "CommandExecutor",
    "CyclicDependencyError",
    "DependencyResolutionError",
    "DryRunExecutor",
    "ForgeError",
    "ForgeFile",
    "ForgeFileError",
    "LoadError",
    "OsPathStat",
    "PathStat",
    "RenderError",
    "ResolutionError",
    "ResolvedTarget",
    "Runner",
    "SelfDependencyError",
    "ShellExecutor",
    "TargetChain",
    "TargetDefinition",
    "TargetExecutionError",
    "TargetNotFoundError",
    "TargetType",
    "UnknownTargetTypeError",
    "build_dependency_tree",
    "load_forgefile",
    "parse_forgefile",
    "render_forgefile",
    "resolve_target_chain",
]
