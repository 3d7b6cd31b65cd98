"""
Orchestrator - drives one BuildBot run end to end.

This module composes the task provider, dependency graph builder,
topological scheduler and execution engine, and classifies the result
into exactly one exit code category.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from buildbot_runner.dag.graph import TaskGraph, build_task_graph
from buildbot_runner.dag.topological import topological_sort
from buildbot_runner.errors import BuildBotError, NoTasksFoundError
from buildbot_runner.execution import ExecutionEngine, ExecutionPlan, ExecutionResult
from buildbot_runner.exit_codes import ExitCode
from buildbot_runner.logging import bind_context, get_logger, unbind_context

if TYPE_CHECKING:
    from buildbot_runner.models.options import RunOptions
    from buildbot_runner.providers.base import TaskProvider
    from buildbot_runner.tasks.interface import BuildTask

logger = get_logger(__name__)

GraphBuilder = Callable[[Iterable["BuildTask"]], TaskGraph]
Scheduler = Callable[[TaskGraph], list["BuildTask"]]


@dataclass(frozen=True)
class Schedule:
    """
    A scheduled run.

    Attributes:
        graph: Dependency graph in discovery order
        order: Tasks in execution order
    """

    graph: TaskGraph
    order: list[BuildTask]


@dataclass
class RunOutcome:
    """
    Terminal outcome of a run.

    Attributes:
        exit_code: The category of the outcome
        error: The error that ended the run, None on success
        order: Scheduled task ids, empty if scheduling never completed
        execution: The engine result, None if execution never started
    """

    exit_code: ExitCode
    error: BuildBotError | None = None
    order: list[str] = field(default_factory=list)
    execution: ExecutionResult | None = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code is ExitCode.SUCCESS


class Orchestrator:
    """
    Runner for build and clean runs.

    Example:
        orchestrator = Orchestrator(ScriptTaskProvider())
        outcome = orchestrator.run(options)
        sys.exit(int(outcome.exit_code))
    """

    def __init__(
        self,
        provider: TaskProvider,
        engine: ExecutionEngine | None = None,
        graph_builder: GraphBuilder = build_task_graph,
        scheduler: Scheduler = topological_sort,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            provider: Source of the run's tasks
            engine: Execution engine (default: a new ExecutionEngine)
            graph_builder: Builds the dependency graph from the task set
            scheduler: Orders the graph for execution
        """
        self.provider = provider
        self.engine = engine or ExecutionEngine()
        self.graph_builder = graph_builder
        self.scheduler = scheduler

    def run(self, options: RunOptions, cancel_event: threading.Event | None = None) -> RunOutcome:
        """
        Execute a full run.

        Configuration, discovery and graph errors end the run before any
        task executes. Every BuildBotError is classified into the outcome;
        other exceptions propagate. The provider is closed when the run
        ends, on every path.

        Args:
            options: Run options, validated here
            cancel_event: Optional cooperative cancellation, checked between tasks

        Returns:
            The RunOutcome
        """
        order: list[str] = []
        bind_context(project_directory=str(options.project_directory))
        try:
            with self.provider:
                ordered = self._schedule(options).order
                order = [task.id for task in ordered]

                if options.clean_all:
                    plan = ExecutionPlan.clean()
                else:
                    plan = ExecutionPlan.build(options.configurations, options.architectures)

                execution = self.engine.execute(ordered, plan, cancel_event)
        except BuildBotError as e:
            logger.error("run_aborted", error=str(e), exit_code=e.exit_code.name)
            return RunOutcome(exit_code=e.exit_code, error=e, order=order)
        finally:
            unbind_context("project_directory")

        if execution.error is not None:
            return RunOutcome(
                exit_code=execution.error.exit_code,
                error=execution.error,
                order=order,
                execution=execution,
            )

        return RunOutcome(exit_code=ExitCode.SUCCESS, order=order, execution=execution)

    def plan(self, options: RunOptions) -> list[BuildTask]:
        """
        Validate options, load tasks and schedule them without executing.

        Returns:
            Tasks in execution order

        Raises:
            InvalidArgumentsError: If the options are invalid
            ProjectDirectoryDoesNotExistError: If the project root is missing
            ScriptCompilationError: If a build script cannot produce tasks
            NoTasksFoundError: If no tasks were found
            TaskGraphError: If the dependency structure is invalid
        """
        return self.schedule(options).order

    def schedule(self, options: RunOptions) -> Schedule:
        """
        Like plan(), but also return the dependency graph.

        The graph keeps discovery order, which get_execution_layers() uses
        to order tasks within a layer.
        """
        with self.provider:
            return self._schedule(options)

    def _schedule(self, options: RunOptions) -> Schedule:
        options.validate()
        project_directory = Path(options.project_directory)

        tasks = self.provider.load_tasks(project_directory)
        if not tasks:
            raise NoTasksFoundError(project_directory)

        graph = self.graph_builder(tasks)
        ordered = self.scheduler(graph)

        logger.info(
            "run_planned",
            tasks=len(ordered),
            order=[task.friendly_name for task in ordered],
        )
        return Schedule(graph=graph, order=ordered)
