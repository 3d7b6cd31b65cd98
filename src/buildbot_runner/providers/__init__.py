"""Task providers - turn project sources into build tasks."""

from buildbot_runner.providers.base import TaskProvider
from buildbot_runner.providers.memory import StaticTaskProvider
from buildbot_runner.providers.scripts import ScriptTaskProvider, discover_scripts

__all__ = [
    "ScriptTaskProvider",
    "StaticTaskProvider",
    "TaskProvider",
    "discover_scripts",
]
