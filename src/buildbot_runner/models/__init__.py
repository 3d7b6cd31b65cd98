"""Data models for BuildBot runs."""

from buildbot_runner.models.flags import (
    Architecture,
    BuildConfiguration,
    flag_names,
    iter_members,
    parse_flags,
)
from buildbot_runner.models.options import RunOptions

__all__ = [
    "Architecture",
    "BuildConfiguration",
    "RunOptions",
    "flag_names",
    "iter_members",
    "parse_flags",
]
