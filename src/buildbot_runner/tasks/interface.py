"""
Build task interface.

This module defines the BuildTask base class that every build script task
derives from, and CallableBuildTask for wrapping plain functions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from buildbot_runner.models.flags import Architecture, BuildConfiguration


def _generate_task_id() -> str:
    """Generate a unique task ID using ULID."""
    import ulid

    return str(ulid.new())


class BuildTask(ABC):
    """
    Base class for all build tasks.

    A build task is a unit of build work with an identity, a set of task ids
    it must run after, and two lifecycle hooks. Both hooks return True on
    success and False on failure; failure details go into ``errors``.

    Class attributes let build scripts declare tasks without writing an
    ``__init__``:

        task_id: Pin the id so other tasks can depend on it (default: a ULID)
        depends_on: Ids of tasks that must run first
        name: Label for diagnostics (default: the class name)
        help: Description shown by ``buildbot list``

    Example:
        class GenerateSources(BuildTask):
            task_id = "generate-sources"

            def clean(self) -> bool:
                shutil.rmtree("generated", ignore_errors=True)
                return True

            def run(self, configuration, architecture) -> bool:
                ...
                return True

        class Compile(BuildTask):
            depends_on = ("generate-sources",)
            ...
    """

    task_id: ClassVar[str | None] = None
    depends_on: ClassVar[Iterable[str]] = ()
    name: str = ""
    help: str = ""

    def __init__(self) -> None:
        self._id = self.task_id or _generate_task_id()
        self._dependencies = frozenset(self.depends_on)
        self.errors: list[str] = []

    @property
    def id(self) -> str:
        """Unique id, stable for the lifetime of this instance."""
        return self._id

    @property
    def dependencies(self) -> frozenset[str]:
        """Ids of the tasks this task must run after."""
        return self._dependencies

    @property
    def friendly_name(self) -> str:
        """Label used in diagnostics, never as an identity key."""
        return self.name or type(self).__name__

    @abstractmethod
    def clean(self) -> bool:
        """
        Remove everything this task produces.

        Returns:
            True on success, False on failure (details in ``errors``)
        """

    @abstractmethod
    def run(self, configuration: BuildConfiguration, architecture: Architecture) -> bool:
        """
        Build this task's outputs.

        Args:
            configuration: Composite set of requested configurations
            architecture: Composite set of requested architectures

        Returns:
            True on success, False on failure (details in ``errors``)
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, dependencies={sorted(self.dependencies)!r})"


class CallableBuildTask(BuildTask):
    """
    Wraps plain callables as a build task.

    Useful for small build steps and for embedding the engine without
    writing build scripts.

    Example:
        def compile_all(configuration, architecture) -> bool:
            ...

        task = CallableBuildTask(
            "compile",
            run=compile_all,
            depends_on=["generate"],
        )
    """

    def __init__(
        self,
        task_id: str | None = None,
        *,
        run: Callable[[BuildConfiguration, Architecture], bool] | None = None,
        clean: Callable[[], bool] | None = None,
        name: str = "",
        depends_on: Iterable[str] = (),
        help: str = "",
    ) -> None:
        super().__init__()
        if task_id:
            self._id = task_id
        self._dependencies = frozenset(depends_on)
        self._run = run
        self._clean = clean
        self.name = name or task_id or ""
        self.help = help

    def clean(self) -> bool:
        if self._clean is None:
            return True
        return bool(self._clean())

    def run(self, configuration: BuildConfiguration, architecture: Architecture) -> bool:
        if self._run is None:
            return True
        return bool(self._run(configuration, architecture))
