"""Task graph integrity errors.

All of these are detected while building or scheduling the dependency
graph, before execution begins.
"""

from __future__ import annotations

from buildbot_runner.errors.base import BuildBotError
from buildbot_runner.exit_codes import ExitCode


class TaskGraphError(BuildBotError):
    """Base class for invalid dependency structures."""


class DuplicateTaskError(TaskGraphError):
    """Two tasks in one run share an id."""

    exit_code = ExitCode.DUPLICATE_TASK

    def __init__(self, task_id: str, task_names: tuple[str, str] | None = None) -> None:
        message = f"Duplicate task id: {task_id}"
        if task_names:
            message = f"{message} (declared by {task_names[0]} and {task_names[1]})"
        super().__init__(message)
        self.task_id = task_id
        self.task_names = task_names


class UnresolvedDependencyError(TaskGraphError):
    """A task depends on an id that no task in the run carries."""

    exit_code = ExitCode.UNRESOLVED_DEPENDENCY

    def __init__(self, task_id: str, dependency_id: str, task_name: str | None = None) -> None:
        label = f"{task_name} ({task_id})" if task_name else task_id
        super().__init__(f"Task {label} depends on unknown task id: {dependency_id}")
        self.task_id = task_id
        self.dependency_id = dependency_id
        self.task_name = task_name


class CyclicDependencyError(TaskGraphError):
    """
    Raised when the dependency graph contains a cycle.

    Attributes:
        cycle: Task ids along the cycle in execution direction, first id
            repeated at the end; each id is a dependency of the next, e.g.
            ``["a", "b", "c", "a"]`` when b needs a, c needs b and a needs c
    """

    exit_code = ExitCode.CYCLIC_DEPENDENCY

    def __init__(self, cycle: list[str], names: dict[str, str] | None = None) -> None:
        self.cycle = list(cycle)
        names = names or {}
        path = " -> ".join(names.get(task_id, task_id) for task_id in self.cycle)
        super().__init__(f"Circular dependency between tasks: {path}")

    @property
    def pairs(self) -> list[tuple[str, str]]:
        """Offending ``(dependency, dependent)`` pairs along the cycle."""
        return [(self.cycle[i], self.cycle[i + 1]) for i in range(len(self.cycle) - 1)]
