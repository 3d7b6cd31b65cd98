"""Tests for dependency graph construction."""

import pytest

from buildbot_runner.dag.graph import build_task_graph
from buildbot_runner.errors import (
    CyclicDependencyError,
    DuplicateTaskError,
    UnresolvedDependencyError,
)


def test_edges_point_from_dependency_to_dependent(make_task) -> None:
    """A -> B means B depends on A."""
    graph = build_task_graph(
        [
            make_task("a"),
            make_task("b", ["a"]),
            make_task("c", ["a"]),
        ]
    )

    assert len(graph) == 3
    assert graph.dependents_of("a") == ["b", "c"]
    assert graph.dependencies_of("b") == frozenset({"a"})
    assert sorted(graph.edges()) == [("a", "b"), ("a", "c")]


def test_nodes_carry_task_payload_and_discovery_index(make_task) -> None:
    first = make_task("first")
    second = make_task("second")

    graph = build_task_graph([first, second])

    assert graph.get("first") is first
    assert graph.node("second").task is second
    assert graph.node("first").index == 0
    assert graph.node("second").index == 1
    assert graph.ids == ["first", "second"]
    assert "first" in graph
    assert "missing" not in graph


def test_in_degrees_count_dependencies(make_task) -> None:
    graph = build_task_graph(
        [
            make_task("a"),
            make_task("b"),
            make_task("c", ["a", "b"]),
        ]
    )

    assert graph.in_degrees() == {"a": 0, "b": 0, "c": 2}


def test_graph_snapshots_input(make_task) -> None:
    """Mutating the input list after building does not change the graph."""
    tasks = [make_task("a")]
    graph = build_task_graph(tasks)
    tasks.append(make_task("b"))

    assert len(graph) == 1


def test_duplicate_id_rejected(make_task) -> None:
    with pytest.raises(DuplicateTaskError) as exc_info:
        build_task_graph([make_task("a"), make_task("b"), make_task("a")])

    assert exc_info.value.task_id == "a"
    assert "Duplicate task id: a" in str(exc_info.value)


def test_unresolved_dependency_rejected(make_task) -> None:
    with pytest.raises(UnresolvedDependencyError) as exc_info:
        build_task_graph([make_task("a"), make_task("b", ["a", "ghost"])])

    error = exc_info.value
    assert error.task_id == "b"
    assert error.dependency_id == "ghost"
    assert error.task_name == "B"


def test_self_dependency_is_a_cycle(make_task) -> None:
    with pytest.raises(CyclicDependencyError) as exc_info:
        build_task_graph([make_task("a", ["a"])])

    assert exc_info.value.cycle == ["a", "a"]
    assert exc_info.value.pairs == [("a", "a")]


def test_empty_task_set_builds_empty_graph() -> None:
    graph = build_task_graph([])

    assert len(graph) == 0
    assert graph.edges() == []
