"""
Execution engine - runs ordered build tasks with fail-fast semantics.

Tasks are invoked strictly in the order given. The first task that returns
a falsy value or raises halts the run; tasks after it are never invoked.
Side effects of tasks that already completed are not rolled back.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from buildbot_runner.errors import ScriptExecutionError
from buildbot_runner.logging import get_logger, task_logger
from buildbot_runner.models.flags import Architecture, BuildConfiguration

if TYPE_CHECKING:
    from collections.abc import Sequence

    from buildbot_runner.tasks.interface import BuildTask

logger = get_logger(__name__)


class RunMode(Enum):
    """Which lifecycle hook the engine invokes."""

    CLEAN = "clean"
    BUILD = "build"


@dataclass(frozen=True)
class ExecutionPlan:
    """
    What to execute.

    Attributes:
        mode: CLEAN invokes clean(), BUILD invokes run()
        configuration: Passed unchanged to every run() call
        architecture: Passed unchanged to every run() call
    """

    mode: RunMode
    configuration: BuildConfiguration = BuildConfiguration.DEBUG
    architecture: Architecture = Architecture.X64

    @classmethod
    def clean(cls) -> ExecutionPlan:
        return cls(mode=RunMode.CLEAN)

    @classmethod
    def build(cls, configuration: BuildConfiguration, architecture: Architecture) -> ExecutionPlan:
        return cls(mode=RunMode.BUILD, configuration=configuration, architecture=architecture)


@dataclass
class ExecutionResult:
    """
    Outcome of an engine run.

    Attributes:
        mode: The mode that was executed
        completed: Ids of tasks whose hook succeeded, in execution order
        failed_task: The task that halted the run, if any
        cancelled: True if the run stopped because cancellation was requested
        error: ScriptExecutionError describing the failure, None on success
    """

    mode: RunMode
    completed: list[str] = field(default_factory=list)
    failed_task: BuildTask | None = None
    cancelled: bool = False
    error: ScriptExecutionError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def errors(self) -> list[str]:
        """Errors of the failing task, empty on success."""
        return list(self.error.errors) if self.error is not None else []


class ExecutionEngine:
    """
    Walks an ordered task sequence invoking clean() or run().

    Example:
        engine = ExecutionEngine()
        result = engine.execute(ordered_tasks, ExecutionPlan.build(config, arch))
        if not result.succeeded:
            print(result.failed_task.friendly_name, result.errors)
    """

    def execute(
        self,
        tasks: Sequence[BuildTask],
        plan: ExecutionPlan,
        cancel_event: threading.Event | None = None,
    ) -> ExecutionResult:
        """
        Execute tasks in order under the fail-fast policy.

        Args:
            tasks: Tasks in execution order
            plan: Mode plus the configuration/architecture for build mode
            cancel_event: Checked before each task; when set the run stops
                at that boundary

        Returns:
            ExecutionResult; never raises for task failures
        """
        result = ExecutionResult(mode=plan.mode)
        started = time.monotonic()
        logger.info("execution_started", mode=plan.mode.value, tasks=len(tasks))

        for task in tasks:
            if cancel_event is not None and cancel_event.is_set():
                logger.warning("execution_cancelled", completed=len(result.completed))
                result.cancelled = True
                result.error = ScriptExecutionError("Run cancelled before all tasks executed")
                return result

            succeeded, fault = self._invoke(task, plan)
            if not succeeded:
                result.failed_task = task
                result.error = ScriptExecutionError(
                    f"Task {task.friendly_name} ({task.id}) failed during {plan.mode.value}",
                    task_id=task.id,
                    task_name=task.friendly_name,
                    errors=task.errors,
                    cause=fault,
                )
                logger.error(
                    "execution_failed",
                    mode=plan.mode.value,
                    task_id=task.id,
                    task_name=task.friendly_name,
                    errors=task.errors,
                    skipped=len(tasks) - len(result.completed) - 1,
                )
                return result

            result.completed.append(task.id)

        logger.info(
            "execution_succeeded",
            mode=plan.mode.value,
            tasks=len(result.completed),
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return result

    def _invoke(self, task: BuildTask, plan: ExecutionPlan) -> tuple[bool, BaseException | None]:
        """Run one hook, returning whether it succeeded and the exception it raised."""
        log = task_logger(task)
        task.errors.clear()
        started = time.monotonic()
        log.info("task_started", mode=plan.mode.value)

        try:
            if plan.mode is RunMode.CLEAN:
                outcome = task.clean()
            else:
                outcome = task.run(plan.configuration, plan.architecture)
        except (Exception, SystemExit) as e:
            # A fault escaping the task, sys.exit() included, is the same failure as returning False
            task.errors.append(f"{type(e).__name__}: {e}")
            log.exception("task_raised", mode=plan.mode.value)
            return False, e

        duration_ms = int((time.monotonic() - started) * 1000)
        if not outcome:
            if not task.errors:
                task.errors.append(f"{plan.mode.value} reported failure without an error message")
            log.error("task_failed", mode=plan.mode.value, duration_ms=duration_ms, errors=task.errors)
            return False, None

        log.info("task_succeeded", mode=plan.mode.value, duration_ms=duration_ms)
        return True, None
