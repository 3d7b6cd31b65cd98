"""Base exception hierarchy for BuildBot.

Two-tier exception hierarchy:

1. BuildBotBaseException - Root of every error raised by the runner
2. BuildBotError - Standard errors that the orchestrator maps to an outcome
"""

from __future__ import annotations

from buildbot_runner.exit_codes import ExitCode


class BuildBotBaseException(Exception):  # noqa: N818 - intentional base exception name
    """Base exception for all BuildBot errors.

    Attributes:
        exit_code: Process exit code category for this error
        cause: Optional original exception that caused this error
    """

    exit_code: ExitCode = ExitCode.SCRIPT_EXECUTION_ERROR

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        exit_code: ExitCode | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        if exit_code is not None:
            self.exit_code = exit_code

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} caused by: {self.cause}"
        return self.message


class BuildBotError(BuildBotBaseException):
    """Standard BuildBot error.

    Anything inheriting from this is caught by the orchestrator and turned
    into a RunOutcome instead of escaping to the caller.
    """
