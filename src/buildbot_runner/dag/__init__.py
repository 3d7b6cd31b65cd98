"""DAG operations for task ordering."""

from buildbot_runner.dag.graph import TaskGraph, TaskNode, build_task_graph
from buildbot_runner.dag.topological import (
    find_cycle,
    get_execution_layers,
    topological_sort,
)

__all__ = [
    "TaskGraph",
    "TaskNode",
    "build_task_graph",
    "find_cycle",
    "get_execution_layers",
    "topological_sort",
]
