"""Discovery and compilation errors.

Raised by task providers while turning build scripts into task objects.
Every error here aborts the run before any task executes.
"""

from __future__ import annotations

from pathlib import Path

from buildbot_runner.errors.base import BuildBotError
from buildbot_runner.exit_codes import ExitCode


class NoTasksFoundError(BuildBotError):
    """The provider yielded an empty task set."""

    exit_code = ExitCode.NO_BUILD_SCRIPTS_FOUND

    def __init__(self, project_directory: Path | str | None = None) -> None:
        if project_directory is None:
            message = "No build tasks found"
        else:
            message = f"No build tasks found under {project_directory}"
        super().__init__(message)
        self.project_directory = Path(project_directory) if project_directory is not None else None


class ScriptCompilationError(BuildBotError):
    """A build script could not be turned into task objects.

    Attributes:
        script_path: The offending script
        diagnostics: One message per problem, ``path:line: message`` where
            a line is known
    """

    exit_code = ExitCode.SCRIPT_COMPILATION_FAILURE

    def __init__(
        self,
        script_path: Path | str,
        diagnostics: list[str] | None = None,
        *,
        cause: BaseException | None = None,
    ) -> None:
        self.script_path = Path(script_path)
        self.diagnostics = list(diagnostics or [])
        message = f"Failed to compile build script {self.script_path}"
        if self.diagnostics:
            message = f"{message}: {self.diagnostics[0]}"
        super().__init__(message, cause=cause)


class EmptyBuildScriptError(ScriptCompilationError):
    """A build script compiled but exports no build tasks."""

    def __init__(self, script_path: Path | str) -> None:
        super().__init__(
            script_path,
            [
                f"{script_path}: script does not export any BuildTask classes. "
                "Build scripts should export one or more BuildTask classes."
            ],
        )
