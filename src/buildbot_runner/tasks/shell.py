"""
Built-in ShellBuildTask for running shell commands.

This module provides a ready-to-use build task that:
- Executes shell commands via subprocess
- Substitutes {configuration} and {architecture} placeholders
- Runs build commands once per requested configuration/architecture pair
- Records failing commands in the task's error list
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from buildbot_runner.logging import get_logger
from buildbot_runner.models.flags import iter_members
from buildbot_runner.tasks.interface import BuildTask

if TYPE_CHECKING:
    from buildbot_runner.models.flags import Architecture, BuildConfiguration

logger = get_logger(__name__)


class ShellBuildTask(BuildTask):
    """
    Execute shell commands as a build task.

    Class Attributes:
        build_commands: Commands run by run(), once per configuration and
            architecture pair; ``{configuration}`` and ``{architecture}``
            are replaced with lower-case member names
        clean_commands: Commands run by clean(), once
        working_directory: Directory commands run in (default: current)
        timeout: Per-command timeout in seconds (default: 600)

    A command that exits non-zero or times out stops the task; the
    failure is appended to ``errors`` and the hook returns False.

    Example:
        class CompileNative(ShellBuildTask):
            task_id = "compile-native"
            build_commands = ("cmake --build build/{architecture} --config {configuration}",)
            clean_commands = ("rm -rf build",)
    """

    build_commands: ClassVar[Sequence[str]] = ()
    clean_commands: ClassVar[Sequence[str]] = ()
    working_directory: ClassVar[str | Path | None] = None
    timeout: ClassVar[float] = 600

    def clean(self) -> bool:
        return all(self._execute(command) for command in self.clean_commands)

    def run(self, configuration: BuildConfiguration, architecture: Architecture) -> bool:
        for config_member in iter_members(configuration):
            for arch_member in iter_members(architecture):
                for template in self.build_commands:
                    command = template.replace(
                        "{configuration}", (config_member.name or "").lower()
                    ).replace("{architecture}", (arch_member.name or "").lower())
                    if not self._execute(command):
                        return False
        return True

    def _execute(self, command: str) -> bool:
        logger.debug("shell_command_started", task_id=self.id, command=command)
        try:
            result = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                cwd=self.working_directory,
            )
        except subprocess.TimeoutExpired:
            self.errors.append(f"Command timed out after {self.timeout}s: {command}")
            return False

        if result.returncode != 0:
            stderr = result.stderr.strip()
            message = f"Command failed with exit code {result.returncode}: {command}"
            if stderr:
                message = f"{message}\n{stderr}"
            self.errors.append(message)
            return False

        return True
