"""BuildBot error hierarchy.

All error classes are re-exported here. Import from
``buildbot_runner.errors``.
"""

from buildbot_runner.errors.base import BuildBotBaseException, BuildBotError
from buildbot_runner.errors.configuration import (
    InvalidArgumentsError,
    ProjectDirectoryDoesNotExistError,
)
from buildbot_runner.errors.discovery import (
    EmptyBuildScriptError,
    NoTasksFoundError,
    ScriptCompilationError,
)
from buildbot_runner.errors.execution import ScriptExecutionError
from buildbot_runner.errors.graph import (
    CyclicDependencyError,
    DuplicateTaskError,
    TaskGraphError,
    UnresolvedDependencyError,
)

__all__ = [
    "BuildBotBaseException",
    "BuildBotError",
    "CyclicDependencyError",
    "DuplicateTaskError",
    "EmptyBuildScriptError",
    "InvalidArgumentsError",
    "NoTasksFoundError",
    "ProjectDirectoryDoesNotExistError",
    "ScriptCompilationError",
    "ScriptExecutionError",
    "TaskGraphError",
    "UnresolvedDependencyError",
]
