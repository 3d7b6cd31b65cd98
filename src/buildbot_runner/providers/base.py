"""
Task provider interface.

A provider discovers task-definition sources for a project and turns them
into BuildTask instances. Providers own whatever they allocate to do so
and release it in close(), which the orchestrator calls on every path.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from buildbot_runner.tasks.interface import BuildTask


class TaskProvider(ABC):
    """
    Abstract task provider.

    Usage:
        with ScriptTaskProvider() as provider:
            tasks = provider.load_tasks(Path("."))
    """

    @abstractmethod
    def load_tasks(self, project_directory: Path) -> list[BuildTask]:
        """
        Discover and instantiate the tasks for a project.

        Args:
            project_directory: Root of the project tree

        Returns:
            Tasks in discovery order; may be empty

        Raises:
            ScriptCompilationError: If a discovered unit cannot produce tasks
        """

    def close(self) -> None:  # noqa: B027 - optional hook
        """Release resources allocated while loading tasks."""

    def __enter__(self) -> TaskProvider:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
