"""Tests for exit code classification and the error hierarchy."""

import pytest

from buildbot_runner.errors import (
    BuildBotBaseException,
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
from buildbot_runner.exit_codes import ExitCode, error_chain, exit_code_for


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ScriptExecutionError("boom"), ExitCode.SCRIPT_EXECUTION_ERROR),
        (InvalidArgumentsError("bad"), ExitCode.INVALID_ARGUMENTS),
        (ProjectDirectoryDoesNotExistError("/nope"), ExitCode.PROJECT_DIRECTORY_DOES_NOT_EXIST),
        (NoTasksFoundError(), ExitCode.NO_BUILD_SCRIPTS_FOUND),
        (ScriptCompilationError("x.py"), ExitCode.SCRIPT_COMPILATION_FAILURE),
        (EmptyBuildScriptError("x.py"), ExitCode.SCRIPT_COMPILATION_FAILURE),
        (CyclicDependencyError(["a", "b", "a"]), ExitCode.CYCLIC_DEPENDENCY),
        (UnresolvedDependencyError("a", "b"), ExitCode.UNRESOLVED_DEPENDENCY),
        (DuplicateTaskError("a"), ExitCode.DUPLICATE_TASK),
    ],
)
def test_each_error_maps_to_one_category(error, expected) -> None:
    assert error.exit_code is expected
    assert exit_code_for(error) is expected
    assert isinstance(error, BuildBotError)


def test_codes_are_distinct_and_success_is_zero() -> None:
    values = [int(code) for code in ExitCode]

    assert len(values) == len(set(values))
    assert ExitCode.SUCCESS == 0


def test_label() -> None:
    assert ExitCode.CYCLIC_DEPENDENCY.label == "Cyclic dependency"


def test_exit_code_for_unclassified_error() -> None:
    assert exit_code_for(ValueError("plain")) is None


def test_exit_code_for_walks_cause_chain() -> None:
    try:
        try:
            raise DuplicateTaskError("a")
        except DuplicateTaskError as e:
            raise RuntimeError("wrapped") from e
    except RuntimeError as wrapped:
        assert exit_code_for(wrapped) is ExitCode.DUPLICATE_TASK
        chain = error_chain(wrapped)

    assert [type(e) for e in chain] == [DuplicateTaskError, RuntimeError]


def test_exit_code_override() -> None:
    error = BuildBotError("custom", exit_code=ExitCode.INVALID_ARGUMENTS)

    assert error.exit_code is ExitCode.INVALID_ARGUMENTS
    assert BuildBotError.exit_code is ExitCode.SCRIPT_EXECUTION_ERROR


def test_message_includes_cause() -> None:
    cause = OSError("disk full")
    error = ScriptExecutionError("Task failed", cause=cause)

    assert error.message == "Task failed"
    assert str(error) == "Task failed caused by: disk full"
    assert isinstance(error, BuildBotBaseException)


def test_cycle_error_pairs_follow_execution_direction() -> None:
    error = CyclicDependencyError(["a", "b", "c", "a"], names={"a": "Alpha", "b": "Beta", "c": "Gamma"})

    assert error.pairs == [("a", "b"), ("b", "c"), ("c", "a")]
    assert error.message == "Circular dependency between tasks: Alpha -> Beta -> Gamma -> Alpha"
