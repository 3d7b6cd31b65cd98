"""Build task definitions."""

from buildbot_runner.tasks.interface import BuildTask, CallableBuildTask
from buildbot_runner.tasks.shell import ShellBuildTask

__all__ = [
    "BuildTask",
    "CallableBuildTask",
    "ShellBuildTask",
]
