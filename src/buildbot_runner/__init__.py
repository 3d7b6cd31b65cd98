"""
BuildBot - dependency-ordered build script runner.

This package discovers build tasks defined in ``.buildbot`` scripts across
a project tree, orders them by their declared dependencies and runs them
with:
- Kahn's algorithm scheduling with a stable discovery-order tie-break
- Cycle, duplicate id and dangling dependency detection before execution
- Fail-fast sequential build and clean runs
- Exit codes classifying every outcome
"""

__version__ = "0.1.0"

from buildbot_runner.dag import TaskGraph, build_task_graph, get_execution_layers, topological_sort
from buildbot_runner.errors import (
    BuildBotError,
    CyclicDependencyError,
    DuplicateTaskError,
    EmptyBuildScriptError,
    InvalidArgumentsError,
    NoTasksFoundError,
    ProjectDirectoryDoesNotExistError,
    ScriptCompilationError,
    ScriptExecutionError,
    UnresolvedDependencyError,
)
from buildbot_runner.execution import ExecutionEngine, ExecutionPlan, ExecutionResult, RunMode
from buildbot_runner.exit_codes import ExitCode, exit_code_for
from buildbot_runner.models import Architecture, BuildConfiguration, RunOptions
from buildbot_runner.orchestrator import Orchestrator, RunOutcome, Schedule
from buildbot_runner.providers import ScriptTaskProvider, StaticTaskProvider, TaskProvider
from buildbot_runner.tasks import BuildTask, CallableBuildTask, ShellBuildTask

__all__ = [
    # Tasks
    "BuildTask",
    "CallableBuildTask",
    "ShellBuildTask",
    # Models
    "Architecture",
    "BuildConfiguration",
    "RunOptions",
    # Graph and scheduling
    "TaskGraph",
    "build_task_graph",
    "get_execution_layers",
    "topological_sort",
    # Execution
    "ExecutionEngine",
    "ExecutionPlan",
    "ExecutionResult",
    "RunMode",
    "Orchestrator",
    "RunOutcome",
    "Schedule",
    # Providers
    "ScriptTaskProvider",
    "StaticTaskProvider",
    "TaskProvider",
    # Errors and exit codes
    "BuildBotError",
    "CyclicDependencyError",
    "DuplicateTaskError",
    "EmptyBuildScriptError",
    "InvalidArgumentsError",
    "NoTasksFoundError",
    "ProjectDirectoryDoesNotExistError",
    "ScriptCompilationError",
    "ScriptExecutionError",
    "UnresolvedDependencyError",
    "ExitCode",
    "exit_code_for",
]
