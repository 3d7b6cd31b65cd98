"""CLI command implementations for BuildBot."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from buildbot_runner.config import resolve_options
from buildbot_runner.dag import get_execution_layers
from buildbot_runner.errors import (
    BuildBotError,
    ScriptCompilationError,
    ScriptExecutionError,
    UnresolvedDependencyError,
)
from buildbot_runner.exit_codes import ExitCode
from buildbot_runner.models.flags import Architecture, BuildConfiguration, flag_names
from buildbot_runner.orchestrator import Orchestrator
from buildbot_runner.providers import ScriptTaskProvider

if TYPE_CHECKING:
    import argparse

    from buildbot_runner.models.options import RunOptions
    from buildbot_runner.tasks.interface import BuildTask


def build(args: argparse.Namespace) -> ExitCode:
    """Build every task in dependency order."""
    return _execute(args, clean_all=False)


def clean(args: argparse.Namespace) -> ExitCode:
    """Clean every task in dependency order."""
    return _execute(args, clean_all=True)


def list_tasks(args: argparse.Namespace) -> ExitCode:
    """Print the scheduled order without executing anything."""
    try:
        options = _options(args, clean_all=False, select_targets=False)
        schedule = Orchestrator(ScriptTaskProvider()).schedule(options)
    except BuildBotError as e:
        report_error(e)
        return e.exit_code

    if args.layers:
        for depth, layer in enumerate(get_execution_layers(schedule.graph)):
            print(f"Layer {depth}:")
            for task in layer:
                _print_task(task, indent="  ")
    else:
        for position, task in enumerate(schedule.order, start=1):
            _print_task(task, prefix=f"{position}. ")
    return ExitCode.SUCCESS


def _execute(args: argparse.Namespace, clean_all: bool) -> ExitCode:
    try:
        options = _options(args, clean_all, select_targets=not clean_all)
    except BuildBotError as e:
        report_error(e)
        return e.exit_code

    mode = "Clean" if clean_all else "Build"
    print(f"{mode}: {options.project_directory}")
    if not clean_all:
        print(f"  configurations: {', '.join(flag_names(BuildConfiguration, options.configurations))}")
        print(f"  architectures: {', '.join(flag_names(Architecture, options.architectures))}")

    outcome = Orchestrator(ScriptTaskProvider()).run(options)
    if outcome.error is not None:
        report_error(outcome.error)
    else:
        completed = len(outcome.execution.completed) if outcome.execution else 0
        print(f"{mode} succeeded: {completed} task(s)")
    return outcome.exit_code


def _options(args: argparse.Namespace, clean_all: bool, select_targets: bool) -> RunOptions:
    return resolve_options(
        project_directory=args.project_dir,
        configurations=args.configuration,
        architectures=args.architecture,
        clean_all=clean_all,
        select_targets=select_targets,
    )


def report_error(error: BuildBotError) -> None:
    """Print an error with its category and any task diagnostics to stderr."""
    print(f"Error [{error.exit_code.label}]: {error.message}", file=sys.stderr)

    if isinstance(error, ScriptExecutionError):
        if error.task_id is not None:
            print(f"  task: {error.task_name} ({error.task_id})", file=sys.stderr)
        for message in error.errors:
            print(f"  - {message}", file=sys.stderr)
    elif isinstance(error, ScriptCompilationError):
        for diagnostic in error.diagnostics:
            print(f"  - {diagnostic}", file=sys.stderr)
    elif isinstance(error, UnresolvedDependencyError):
        print(f"  task: {error.task_name} ({error.task_id})", file=sys.stderr)


def _print_task(task: BuildTask, prefix: str = "", indent: str = "") -> None:
    print(f"{indent}{prefix}{task.friendly_name} [{task.id}]")
    if task.dependencies:
        print(f"{indent}    after: {', '.join(sorted(task.dependencies))}")
    if task.help:
        print(f"{indent}    {task.help}")
