"""
Topological sort for task execution ordering.

This module implements Kahn's algorithm over a TaskGraph. Among tasks that
are ready at the same time, the one discovered first runs first, so the
order is reproducible for identical inputs.
"""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING

from buildbot_runner.errors import CyclicDependencyError

if TYPE_CHECKING:
    from buildbot_runner.dag.graph import TaskGraph
    from buildbot_runner.tasks.interface import BuildTask


def topological_sort(graph: TaskGraph) -> list[BuildTask]:
    """
    Sort tasks into execution order.

    The algorithm:

    1. Computes the in-degree (unresolved dependencies) of every task
    2. Pushes every task with in-degree zero onto a heap keyed by discovery index
    3. Pops the earliest-discovered ready task, appends it to the result and
       decrements the in-degree of its dependents, pushing those that reach zero
    4. Raises CyclicDependencyError if tasks remain once the heap is empty

    Args:
        graph: The validated task graph

    Returns:
        Tasks in execution order

    Raises:
        CyclicDependencyError: If the graph contains a cycle

    Example:
        # A -> [B, C] -> D, discovered as [A, B, C, D]
        topological_sort(build_task_graph([a, b, c, d]))
        # Result: [A, B, C, D]
    """
    in_degree = graph.in_degrees()
    ready: list[tuple[int, str]] = [
        (graph.node(task_id).index, task_id) for task_id, degree in in_degree.items() if degree == 0
    ]
    heapq.heapify(ready)

    ordered: list[BuildTask] = []
    while ready:
        _, task_id = heapq.heappop(ready)
        ordered.append(graph.get(task_id))
        for dependent in graph.dependents_of(task_id):
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                heapq.heappush(ready, (graph.node(dependent).index, dependent))

    if len(ordered) != len(graph):
        remaining = [task_id for task_id, degree in in_degree.items() if degree > 0]
        raise CyclicDependencyError(find_cycle(graph, remaining), graph.names())

    return ordered


def find_cycle(graph: TaskGraph, remaining: list[str]) -> list[str]:
    """
    Extract one concrete cycle from the tasks Kahn's algorithm could not emit.

    Every remaining task has at least one remaining dependency, so following
    dependencies from any of them must revisit a task.

    Args:
        graph: The task graph
        remaining: Ids left with a positive in-degree, in discovery order

    Returns:
        The cycle in execution direction with the first id repeated at the
        end, e.g. ``["a", "b", "a"]`` when a depends on b and b on a
    """
    pending = set(remaining)
    path: list[str] = []
    position: dict[str, int] = {}
    current = remaining[0]

    while current not in position:
        position[current] = len(path)
        path.append(current)
        current = min(
            (dependency for dependency in graph.dependencies_of(current) if dependency in pending),
            key=lambda task_id: graph.node(task_id).index,
        )

    # path follows dependencies backwards, reverse it into execution direction
    cycle = path[position[current] :] + [current]
    cycle.reverse()
    return cycle


def get_execution_layers(graph: TaskGraph) -> list[list[BuildTask]]:
    """
    Group tasks into dependency layers.

    Each layer depends only on tasks in previous layers. Tasks within a
    layer keep discovery order. Execution is still sequential; layers are
    for presentation.

    Args:
        graph: The validated task graph

    Returns:
        List of layers

    Raises:
        CyclicDependencyError: If the graph contains a cycle

    Example:
        # A -> [B, C] -> D
        # Layer 0: [A]
        # Layer 1: [B, C]
        # Layer 2: [D]
    """
    depth: dict[str, int] = {}
    for task in topological_sort(graph):
        dependencies = graph.dependencies_of(task.id)
        depth[task.id] = max((depth[d] + 1 for d in dependencies), default=0)

    layers: list[list[BuildTask]] = [[] for _ in range(max(depth.values(), default=-1) + 1)]
    for task_id in graph.ids:
        layers[depth[task_id]].append(graph.get(task_id))
    return layers
