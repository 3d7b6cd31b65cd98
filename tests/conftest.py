"""Shared pytest fixtures and test task implementations."""

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pytest

from buildbot_runner.logging import configure_logging
from buildbot_runner.models.flags import Architecture, BuildConfiguration
from buildbot_runner.tasks.interface import BuildTask

# =============================================================================
# Shared Test Task Implementations
# =============================================================================


class RecordingTask(BuildTask):
    """A task that records every hook invocation into a shared list."""

    def __init__(
        self,
        task_id: str,
        depends_on: Iterable[str] = (),
        calls: list[tuple[Any, ...]] | None = None,
        run_succeeds: bool = True,
        clean_succeeds: bool = True,
        raises: BaseException | None = None,
    ) -> None:
        super().__init__()
        self._id = task_id
        self._dependencies = frozenset(depends_on)
        self.name = task_id.upper()
        self.calls = calls if calls is not None else []
        self.run_succeeds = run_succeeds
        self.clean_succeeds = clean_succeeds
        self.raises = raises

    def clean(self) -> bool:
        self.calls.append(("clean", self.id))
        if self.raises is not None:
            raise self.raises
        if not self.clean_succeeds:
            self.errors.append(f"{self.id} clean failed")
        return self.clean_succeeds

    def run(self, configuration: BuildConfiguration, architecture: Architecture) -> bool:
        self.calls.append(("run", self.id, configuration, architecture))
        if self.raises is not None:
            raise self.raises
        if not self.run_succeeds:
            self.errors.append(f"{self.id} run failed")
        return self.run_succeeds


@pytest.fixture
def calls() -> list[tuple[Any, ...]]:
    """Shared invocation log for RecordingTask instances."""
    return []


@pytest.fixture
def make_task(calls: list[tuple[Any, ...]]) -> Callable[..., RecordingTask]:
    """Factory for RecordingTask instances that share the calls log."""

    def factory(task_id: str, depends_on: Iterable[str] = (), **kwargs: Any) -> RecordingTask:
        return RecordingTask(task_id, depends_on, calls=calls, **kwargs)

    return factory


# =============================================================================
# Build script projects
# =============================================================================


@pytest.fixture
def write_script(tmp_path: Path) -> Callable[..., Path]:
    """Write a build script into ``<tmp_path>/<directory>/.buildbot/<name>``."""

    def writer(name: str, source: str, directory: str = "") -> Path:
        script_dir = tmp_path / directory / ".buildbot"
        script_dir.mkdir(parents=True, exist_ok=True)
        path = script_dir / name
        path.write_text(source, encoding="utf-8")
        return path

    return writer


@pytest.fixture(autouse=True)
def default_logging() -> None:
    """Reset logging between tests; the CLI reconfigures it per invocation."""
    configure_logging()
