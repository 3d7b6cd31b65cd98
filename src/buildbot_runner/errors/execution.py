"""Execution-stage errors."""

from __future__ import annotations

from buildbot_runner.errors.base import BuildBotError
from buildbot_runner.exit_codes import ExitCode


class ScriptExecutionError(BuildBotError):
    """A task's clean or run operation failed or raised.

    Contains the identity of the failing task and the errors it
    accumulated, so presentation layers can report them.

    Attributes:
        task_id: Id of the failing task, None when the run was cancelled
        task_name: Friendly name of the failing task
        errors: The task's error list at the time of failure
    """

    exit_code = ExitCode.SCRIPT_EXECUTION_ERROR

    def __init__(
        self,
        message: str,
        *,
        task_id: str | None = None,
        task_name: str | None = None,
        errors: list[str] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.task_id = task_id
        self.task_name = task_name
        self.errors = list(errors or [])
