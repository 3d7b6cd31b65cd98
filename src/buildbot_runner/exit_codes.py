"""
Process exit codes for BuildBot runs.

Every run ends in exactly one of these categories. Errors carry their
category in an ``exit_code`` attribute; ``exit_code_for`` resolves it for an
arbitrary exception by walking the cause chain.

Usage:
    from buildbot_runner.exit_codes import ExitCode, exit_code_for

    try:
        orchestrate()
    except Exception as e:
        code = exit_code_for(e)
        if code is None:
            raise
        sys.exit(int(code))
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit status reported to the shell.

    INVALID_ARGUMENTS shares its value with argparse's usage error so that
    both parser rejections and option validation failures look the same
    to callers.
    """

    SUCCESS = 0
    SCRIPT_EXECUTION_ERROR = 1
    INVALID_ARGUMENTS = 2
    PROJECT_DIRECTORY_DOES_NOT_EXIST = 3
    NO_BUILD_SCRIPTS_FOUND = 4
    SCRIPT_COMPILATION_FAILURE = 5
    CYCLIC_DEPENDENCY = 6
    UNRESOLVED_DEPENDENCY = 7
    DUPLICATE_TASK = 8

    @property
    def label(self) -> str:
        """Human readable category name, e.g. ``Cyclic dependency``."""
        return self.name.replace("_", " ").capitalize()


def error_chain(error: BaseException) -> list[BaseException]:
    """Traverse the __cause__ chain, return list from root to leaf.

    Args:
        error: The exception to start from

    Returns:
        Exceptions ordered from the root cause to ``error`` itself.
    """
    chain: list[BaseException] = []
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        chain.append(current)
        current = current.__cause__
    chain.reverse()
    return chain


def exit_code_for(error: BaseException) -> ExitCode | None:
    """Map an exception to its exit code category.

    The leaf exception wins; if it carries no category the cause chain is
    searched from the leaf towards the root.

    Returns:
        The ExitCode, or None when nothing in the chain is classified.
    """
    for exc in reversed(error_chain(error)):
        code = getattr(exc, "exit_code", None)
        if isinstance(code, ExitCode):
            return code
    return None
