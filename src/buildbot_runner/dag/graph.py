"""
Dependency graph for build tasks.

This module turns a flat collection of tasks into a directed graph keyed by
task id. An edge ``a -> b`` means a executes before b (b depends on a).
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from buildbot_runner.errors import (
    CyclicDependencyError,
    DuplicateTaskError,
    UnresolvedDependencyError,
)
from buildbot_runner.logging import get_logger

if TYPE_CHECKING:
    from buildbot_runner.tasks.interface import BuildTask

logger = get_logger(__name__)


@dataclass
class TaskNode:
    """
    A node of the task graph.

    Attributes:
        task: The task payload
        index: Position of the task in discovery order
        dependencies: Ids that must execute before this task
        dependents: Ids that must execute after this task, in discovery order
    """

    task: BuildTask
    index: int
    dependencies: frozenset[str]
    dependents: list[str] = field(default_factory=list)


class TaskGraph:
    """
    Directed graph of build tasks keyed by id.

    Built with build_task_graph(), which guarantees every dependency id
    resolves to a node, ids are unique and no task depends on itself.
    """

    def __init__(self, nodes: dict[str, TaskNode]) -> None:
        self._nodes = nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._nodes

    def __iter__(self) -> Iterator[BuildTask]:
        return iter(self.tasks)

    @property
    def ids(self) -> list[str]:
        """Task ids in discovery order."""
        return list(self._nodes)

    @property
    def tasks(self) -> list[BuildTask]:
        """Tasks in discovery order."""
        return [node.task for node in self._nodes.values()]

    def node(self, task_id: str) -> TaskNode:
        return self._nodes[task_id]

    def get(self, task_id: str) -> BuildTask:
        return self._nodes[task_id].task

    def dependencies_of(self, task_id: str) -> frozenset[str]:
        return self._nodes[task_id].dependencies

    def dependents_of(self, task_id: str) -> list[str]:
        return list(self._nodes[task_id].dependents)

    def edges(self) -> list[tuple[str, str]]:
        """All ``(before, after)`` edges, grouped by ``before`` in discovery order."""
        return [(task_id, dependent) for task_id, node in self._nodes.items() for dependent in node.dependents]

    def in_degrees(self) -> dict[str, int]:
        """Number of unresolved dependencies per task."""
        return {task_id: len(node.dependencies) for task_id, node in self._nodes.items()}

    def names(self) -> dict[str, str]:
        """Friendly name per task id, for diagnostics."""
        return {task_id: node.task.friendly_name for task_id, node in self._nodes.items()}


def build_task_graph(tasks: Iterable[BuildTask]) -> TaskGraph:
    """
    Build the dependency graph for a run.

    The input order is recorded as discovery order and used by the
    scheduler to break ties.

    Args:
        tasks: Tasks of the run

    Returns:
        The validated TaskGraph

    Raises:
        DuplicateTaskError: If two tasks share an id
        CyclicDependencyError: If a task depends on itself
        UnresolvedDependencyError: If a dependency id matches no task
    """
    snapshot = tuple(tasks)
    nodes: dict[str, TaskNode] = {}

    for index, task in enumerate(snapshot):
        existing = nodes.get(task.id)
        if existing is not None:
            raise DuplicateTaskError(task.id, (existing.task.friendly_name, task.friendly_name))
        dependencies = frozenset(task.dependencies)
        if task.id in dependencies:
            raise CyclicDependencyError([task.id, task.id], {task.id: task.friendly_name})
        nodes[task.id] = TaskNode(task=task, index=index, dependencies=dependencies)

    for task_id, node in nodes.items():
        # Sorted so error reporting does not depend on set iteration order
        for dependency_id in sorted(node.dependencies):
            dependency = nodes.get(dependency_id)
            if dependency is None:
                raise UnresolvedDependencyError(task_id, dependency_id, node.task.friendly_name)
            dependency.dependents.append(task_id)

    logger.debug(
        "task_graph_built",
        tasks=len(nodes),
        edges=sum(len(node.dependencies) for node in nodes.values()),
    )
    return TaskGraph(nodes)
