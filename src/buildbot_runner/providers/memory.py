"""In-memory task provider for embedding and testing."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from buildbot_runner.providers.base import TaskProvider

if TYPE_CHECKING:
    from buildbot_runner.tasks.interface import BuildTask


class StaticTaskProvider(TaskProvider):
    """
    Provider that returns a fixed list of tasks.

    The project directory is ignored. ``closed`` records whether the
    orchestrator released the provider.
    """

    def __init__(self, tasks: Iterable[BuildTask] = ()) -> None:
        self.tasks = list(tasks)
        self.closed = False

    def load_tasks(self, project_directory: Path) -> list[BuildTask]:
        return list(self.tasks)

    def close(self) -> None:
        self.closed = True
