"""Tests for the orchestrator driving provider, graph, scheduler and engine."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import structlog

from buildbot_runner.dag.graph import build_task_graph
from buildbot_runner.dag.topological import get_execution_layers
from buildbot_runner.errors import (
    CyclicDependencyError,
    DuplicateTaskError,
    InvalidArgumentsError,
    NoTasksFoundError,
    ProjectDirectoryDoesNotExistError,
    ScriptCompilationError,
    ScriptExecutionError,
    UnresolvedDependencyError,
)
from buildbot_runner.exit_codes import ExitCode
from buildbot_runner.logging import bind_context, clear_context
from buildbot_runner.models.flags import Architecture, BuildConfiguration
from buildbot_runner.models.options import RunOptions
from buildbot_runner.orchestrator import Orchestrator
from buildbot_runner.providers import StaticTaskProvider, TaskProvider


@pytest.fixture
def options(tmp_path: Path) -> RunOptions:
    return RunOptions(
        configurations=BuildConfiguration.RELEASE,
        architectures=Architecture.X64,
        project_directory=tmp_path,
    )


class FailingProvider(TaskProvider):
    """A provider whose single build script does not compile."""

    def __init__(self) -> None:
        self.closed = False

    def load_tasks(self, project_directory: Path) -> list:
        raise ScriptCompilationError(project_directory / ".buildbot" / "bad.py", ["bad.py:1: SyntaxError"])

    def close(self) -> None:
        self.closed = True


def test_scenario_fan_out_build_succeeds(make_task, calls, options) -> None:
    """A: deps=[]; B: deps=[A]; C: deps=[A]"""
    provider = StaticTaskProvider([make_task("a"), make_task("b", ["a"]), make_task("c", ["a"])])

    outcome = Orchestrator(provider).run(options)

    assert outcome.succeeded
    assert outcome.exit_code is ExitCode.SUCCESS
    assert outcome.error is None
    assert outcome.order == ["a", "b", "c"]
    assert calls == [
        ("run", "a", BuildConfiguration.RELEASE, Architecture.X64),
        ("run", "b", BuildConfiguration.RELEASE, Architecture.X64),
        ("run", "c", BuildConfiguration.RELEASE, Architecture.X64),
    ]
    assert provider.closed


def test_clean_all_invokes_only_clean(make_task, calls, tmp_path) -> None:
    provider = StaticTaskProvider([make_task("b", ["a"]), make_task("a")])
    options = RunOptions(
        configurations=BuildConfiguration.DEBUG | BuildConfiguration.RELEASE,
        architectures=Architecture.X86 | Architecture.X64,
        project_directory=tmp_path,
        clean_all=True,
    )

    outcome = Orchestrator(provider).run(options)

    assert outcome.succeeded
    assert calls == [("clean", "a"), ("clean", "b")]


def test_empty_task_set_skips_graph_builder(options) -> None:
    graph_builder = MagicMock(side_effect=build_task_graph)

    outcome = Orchestrator(StaticTaskProvider([]), graph_builder=graph_builder).run(options)

    assert outcome.exit_code is ExitCode.NO_BUILD_SCRIPTS_FOUND
    assert isinstance(outcome.error, NoTasksFoundError)
    graph_builder.assert_not_called()


def test_task_failure_reports_failing_task(make_task, calls, options) -> None:
    provider = StaticTaskProvider(
        [make_task("t1"), make_task("t2", ["t1"], run_succeeds=False), make_task("t3", ["t2"])]
    )

    outcome = Orchestrator(provider).run(options)

    assert outcome.exit_code is ExitCode.SCRIPT_EXECUTION_ERROR
    assert isinstance(outcome.error, ScriptExecutionError)
    assert outcome.error.task_id == "t2"
    assert outcome.error.errors == ["t2 run failed"]
    assert outcome.execution is not None
    assert outcome.execution.completed == ["t1"]
    assert [call[1] for call in calls] == ["t1", "t2"]
    assert provider.closed


def test_task_calling_sys_exit_is_classified(make_task, calls, options) -> None:
    provider = StaticTaskProvider([make_task("a"), make_task("b", raises=SystemExit(3)), make_task("c")])

    outcome = Orchestrator(provider).run(options)

    assert outcome.exit_code is ExitCode.SCRIPT_EXECUTION_ERROR
    assert outcome.error.task_id == "b"
    assert [call[1] for call in calls] == ["a", "b"]
    assert provider.closed


def test_run_keeps_caller_log_context(make_task, options) -> None:
    bind_context(request_id="req-1")
    try:
        Orchestrator(StaticTaskProvider([make_task("a")])).run(options)

        context = structlog.contextvars.get_contextvars()
        assert context["request_id"] == "req-1"
        assert "project_directory" not in context
    finally:
        clear_context()


@pytest.mark.parametrize(
    ("dependencies", "error_type", "exit_code"),
    [
        ({"a": ["b"], "b": ["a"]}, CyclicDependencyError, ExitCode.CYCLIC_DEPENDENCY),
        ({"a": [], "b": ["missing"]}, UnresolvedDependencyError, ExitCode.UNRESOLVED_DEPENDENCY),
        ({"a": ["a"], "b": []}, CyclicDependencyError, ExitCode.CYCLIC_DEPENDENCY),
    ],
)
def test_graph_errors_abort_before_execution(make_task, calls, options, dependencies, error_type, exit_code) -> None:
    provider = StaticTaskProvider([make_task(task_id, deps) for task_id, deps in dependencies.items()])

    outcome = Orchestrator(provider).run(options)

    assert outcome.exit_code is exit_code
    assert isinstance(outcome.error, error_type)
    assert outcome.execution is None
    assert outcome.order == []
    assert calls == []
    assert provider.closed


def test_duplicate_ids_abort_before_execution(make_task, calls, options) -> None:
    outcome = Orchestrator(StaticTaskProvider([make_task("a"), make_task("a")])).run(options)

    assert outcome.exit_code is ExitCode.DUPLICATE_TASK
    assert isinstance(outcome.error, DuplicateTaskError)
    assert calls == []


def test_compilation_failure_closes_provider(options) -> None:
    provider = FailingProvider()

    outcome = Orchestrator(provider).run(options)

    assert outcome.exit_code is ExitCode.SCRIPT_COMPILATION_FAILURE
    assert isinstance(outcome.error, ScriptCompilationError)
    assert provider.closed


def test_missing_project_directory(make_task, calls, tmp_path) -> None:
    options = RunOptions(project_directory=tmp_path / "nope")
    provider = StaticTaskProvider([make_task("a")])

    outcome = Orchestrator(provider).run(options)

    assert outcome.exit_code is ExitCode.PROJECT_DIRECTORY_DOES_NOT_EXIST
    assert isinstance(outcome.error, ProjectDirectoryDoesNotExistError)
    assert calls == []


def test_invalid_options(make_task, tmp_path) -> None:
    options = RunOptions(configurations=BuildConfiguration(0), project_directory=tmp_path)

    outcome = Orchestrator(StaticTaskProvider([make_task("a")])).run(options)

    assert outcome.exit_code is ExitCode.INVALID_ARGUMENTS
    assert isinstance(outcome.error, InvalidArgumentsError)


def test_unexpected_errors_propagate(options) -> None:
    provider = MagicMock(spec=TaskProvider)
    provider.__enter__.return_value = provider
    provider.__exit__.return_value = None
    provider.load_tasks.side_effect = KeyError("bug")

    with pytest.raises(KeyError):
        Orchestrator(provider).run(options)

    provider.__exit__.assert_called_once()


def test_plan_returns_order_without_executing(make_task, calls, options) -> None:
    provider = StaticTaskProvider([make_task("c", ["b"]), make_task("b", ["a"]), make_task("a")])

    ordered = Orchestrator(provider).plan(options)

    assert [task.id for task in ordered] == ["a", "b", "c"]
    assert calls == []
    assert provider.closed


def test_schedule_keeps_discovery_order_graph(make_task, options) -> None:
    # y, z run before a although a was discovered earlier than z
    provider = StaticTaskProvider(
        [make_task("x", ["a"]), make_task("y"), make_task("z", ["y"]), make_task("a")]
    )

    schedule = Orchestrator(provider).schedule(options)

    assert [task.id for task in schedule.order] == ["y", "z", "a", "x"]
    assert schedule.graph.ids == ["x", "y", "z", "a"]
    layers = [[task.id for task in layer] for layer in get_execution_layers(schedule.graph)]
    assert layers == [["y", "a"], ["x", "z"]]
    assert provider.closed


def test_plan_raises_graph_errors(make_task, options) -> None:
    provider = StaticTaskProvider([make_task("a", ["b"]), make_task("b", ["a"])])

    with pytest.raises(CyclicDependencyError):
        Orchestrator(provider).plan(options)
