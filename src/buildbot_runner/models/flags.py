"""
Build configuration and architecture flags.

Both are ``enum.Flag`` types, so one value can carry a composite selection
such as ``BuildConfiguration.DEBUG | BuildConfiguration.RELEASE``. Tasks
receive the composite value unchanged and decide themselves how to iterate
it.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Flag, auto
from typing import TypeVar

from buildbot_runner.errors import InvalidArgumentsError


class BuildConfiguration(Flag):
    """Build configurations that can be requested for a run."""

    DEBUG = auto()
    RELEASE = auto()


class Architecture(Flag):
    """Target architectures that can be requested for a run."""

    X86 = auto()
    X64 = auto()
    ARM = auto()
    ARM64 = auto()


FlagT = TypeVar("FlagT", BuildConfiguration, Architecture)


def parse_flags(flag_type: type[FlagT], values: Iterable[str] | str) -> FlagT:
    """
    Parse names into a composite flag value.

    Names are matched case-insensitively against member names. Each value
    may itself be a comma-separated list, so ``["debug,release"]`` and
    ``["Debug", "Release"]`` are equivalent.

    Args:
        flag_type: BuildConfiguration or Architecture
        values: Names to combine

    Returns:
        The combined flag value

    Raises:
        InvalidArgumentsError: If a name is unknown or nothing was selected
    """
    if isinstance(values, str):
        values = [values]

    names = [part.strip() for value in values for part in str(value).split(",") if part.strip()]
    if not names:
        raise InvalidArgumentsError(f"No {_label(flag_type)} selected")

    result = flag_type(0)
    for name in names:
        try:
            result |= flag_type[name.upper()]
        except KeyError:
            choices = ", ".join(flag_names(flag_type))
            raise InvalidArgumentsError(
                f"Unknown {_label(flag_type)} '{name}' (expected one of: {choices})"
            ) from None
    return result


def flag_names(flag_type: type[FlagT], value: FlagT | None = None) -> list[str]:
    """Member names of a flag type, or of the members set in ``value``."""
    members = [member for member in flag_type if member.name]
    if value is not None:
        members = [member for member in members if member in value]
    return [member.name.lower() for member in members if member.name]


def iter_members(value: FlagT) -> list[FlagT]:
    """Split a composite flag value into its single members, in declaration order."""
    return [member for member in type(value) if member in value]


def _label(flag_type: type[Flag]) -> str:
    return "configuration" if flag_type is BuildConfiguration else "architecture"
