"""Configuration errors, raised before any task is touched."""

from __future__ import annotations

from pathlib import Path

from buildbot_runner.errors.base import BuildBotError
from buildbot_runner.exit_codes import ExitCode


class InvalidArgumentsError(BuildBotError):
    """Run options failed validation.

    Raised for unknown configuration or architecture names, empty flag
    selections and malformed configuration files.
    """

    exit_code = ExitCode.INVALID_ARGUMENTS


class ProjectDirectoryDoesNotExistError(BuildBotError):
    """The supplied project root is missing or is not a directory."""

    exit_code = ExitCode.PROJECT_DIRECTORY_DOES_NOT_EXIST

    def __init__(self, project_directory: Path | str) -> None:
        super().__init__(f"Project directory does not exist: {project_directory}")
        self.project_directory = Path(project_directory)
