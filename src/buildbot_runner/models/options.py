"""
RunOptions model.

The validated record that drives one orchestration run.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from buildbot_runner.errors import InvalidArgumentsError, ProjectDirectoryDoesNotExistError
from buildbot_runner.models.flags import Architecture, BuildConfiguration


@dataclass(frozen=True)
class RunOptions:
    """
    Options for a single run.

    Attributes:
        configurations: Composite set of configurations to build
        architectures: Composite set of architectures to build
        project_directory: Root of the project tree to search for build scripts
        clean_all: If True, invoke clean() on every task instead of run()
    """

    configurations: BuildConfiguration = BuildConfiguration.DEBUG
    architectures: Architecture = Architecture.X64
    project_directory: Path = Path(".")
    clean_all: bool = False

    def validate(self) -> RunOptions:
        """
        Check the options and return them unchanged.

        Raises:
            InvalidArgumentsError: If no configuration or architecture is selected
            ProjectDirectoryDoesNotExistError: If the project directory is
                missing or is not a directory
        """
        if not self.configurations:
            raise InvalidArgumentsError("At least one configuration must be selected")
        if not self.architectures:
            raise InvalidArgumentsError("At least one architecture must be selected")
        if not Path(self.project_directory).is_dir():
            raise ProjectDirectoryDoesNotExistError(self.project_directory)
        return self
