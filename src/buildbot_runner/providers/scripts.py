"""
Build script task provider.

Discovers Python build scripts in ``.buildbot`` directories anywhere in a
project tree, imports each one as a fresh, uniquely named module,
and instantiates every BuildTask subclass the script defines.

Layout:
    project/
        .buildbot/
            native.py        # defines CompileNative(ShellBuildTask), ...
        tools/
            .buildbot/
                codegen.py   # defines GenerateSources(BuildTask), ...

Scripts are found in sorted path order and classes are taken in
definition order, which together form the discovery order used to break
ties when scheduling.
"""

from __future__ import annotations

import inspect
import os
import sys
import traceback
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path

import ulid

from buildbot_runner.errors import EmptyBuildScriptError, ScriptCompilationError
from buildbot_runner.logging import get_logger
from buildbot_runner.providers.base import TaskProvider
from buildbot_runner.tasks.interface import BuildTask

logger = get_logger(__name__)

SCRIPT_DIRECTORY = ".buildbot"
SCRIPT_SUFFIX = ".py"

# Directories never searched for build scripts
IGNORED_DIRECTORIES = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        ".tox",
        ".venv",
        "venv",
        "__pycache__",
        "node_modules",
        ".mypy_cache",
        ".pytest_cache",
    }
)


def discover_scripts(project_directory: Path) -> list[Path]:
    """
    Find build scripts under a project directory.

    Args:
        project_directory: Root of the search

    Returns:
        ``*.py`` files directly inside ``.buildbot`` directories, sorted by path
    """
    scripts: list[Path] = []
    for root, dirnames, filenames in os.walk(project_directory):
        if Path(root).name == SCRIPT_DIRECTORY:
            scripts.extend(Path(root) / name for name in filenames if name.endswith(SCRIPT_SUFFIX))
            dirnames[:] = []
            continue
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRECTORIES)
    return sorted(scripts)


class ScriptTaskProvider(TaskProvider):
    """
    Loads build tasks from Python build scripts.

    Each script is imported through importlib as a module named
    ``buildbot_script_<ulid>``, registered in sys.modules before it runs so
    that dataclasses, pickling and similar machinery work inside scripts.
    The provider owns these modules and removes them on close().
    """

    def __init__(self) -> None:
        self._modules: list[str] = []

    @property
    def loaded_modules(self) -> list[str]:
        """Names of the modules created so far."""
        return list(self._modules)

    def load_tasks(self, project_directory: Path) -> list[BuildTask]:
        scripts = discover_scripts(project_directory)
        logger.info(
            "build_scripts_discovered",
            project_directory=str(project_directory),
            scripts=len(scripts),
        )

        tasks: list[BuildTask] = []
        for script_path in scripts:
            tasks.extend(self.load_script(script_path))
        return tasks

    def load_script(self, script_path: Path) -> list[BuildTask]:
        """
        Compile a build script and instantiate the tasks it exports.

        Args:
            script_path: Path of the script

        Returns:
            One instance per concrete BuildTask subclass defined in the script

        Raises:
            ScriptCompilationError: If the script is unreadable, empty, has a
                syntax error, raises or exits while executing, or a task
                cannot be instantiated or skipped BuildTask.__init__
            EmptyBuildScriptError: If the script defines no build tasks
        """
        logger.debug("build_script_loading", script=str(script_path))

        try:
            source = script_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ScriptCompilationError(script_path, [f"{script_path}: {e}"], cause=e) from e

        if not source.strip():
            raise ScriptCompilationError(script_path, [f"{script_path}: build script is empty"])

        module_name = f"buildbot_script_{str(ulid.new()).lower()}"
        spec = spec_from_file_location(module_name, script_path)
        if spec is None or spec.loader is None:
            raise ScriptCompilationError(script_path, [f"{script_path}: no loader for build script"])
        module = module_from_spec(spec)
        sys.modules[module_name] = module
        self._modules.append(module_name)

        try:
            spec.loader.exec_module(module)
        except SyntaxError as e:
            raise ScriptCompilationError(script_path, [_format_syntax_error(script_path, e)], cause=e) from e
        except (Exception, SystemExit) as e:
            raise ScriptCompilationError(script_path, [_format_exception(script_path, e)], cause=e) from e

        # An alias such as ``Legacy = Compile`` must not yield a second task
        task_classes = list(
            dict.fromkeys(
                value
                for value in vars(module).values()
                if isinstance(value, type)
                and issubclass(value, BuildTask)
                and value.__module__ == module_name
                and not inspect.isabstract(value)
            )
        )
        if not task_classes:
            raise EmptyBuildScriptError(script_path)

        tasks: list[BuildTask] = []
        for task_class in task_classes:
            try:
                task = task_class()
            except (Exception, SystemExit) as e:
                diagnostic = _format_exception(script_path, e, f"cannot instantiate {task_class.__name__}")
                raise ScriptCompilationError(script_path, [diagnostic], cause=e) from e
            if not all(hasattr(task, attribute) for attribute in ("id", "dependencies", "errors")):
                raise ScriptCompilationError(
                    script_path,
                    [f"{script_path}: {task_class.__name__}.__init__ did not call BuildTask.__init__"],
                )
            tasks.append(task)

        logger.info(
            "build_script_loaded",
            script=str(script_path),
            tasks=[task.friendly_name for task in tasks],
        )
        return tasks

    def close(self) -> None:
        for module_name in self._modules:
            sys.modules.pop(module_name, None)
        if self._modules:
            logger.debug("build_script_modules_released", modules=len(self._modules))
        self._modules.clear()


def _format_syntax_error(script_path: Path, error: SyntaxError) -> str:
    location = f"{script_path}:{error.lineno}" if error.lineno else str(script_path)
    return f"{location}: SyntaxError: {error.msg}"


def _format_exception(script_path: Path, error: BaseException, prefix: str = "") -> str:
    """Format an exception, locating the innermost frame inside the script."""
    lineno = None
    for frame in traceback.extract_tb(error.__traceback__):
        if frame.filename == str(script_path):
            lineno = frame.lineno
    location = f"{script_path}:{lineno}" if lineno else str(script_path)
    detail = f"{type(error).__name__}: {error}"
    if prefix:
        detail = f"{prefix}: {detail}"
    return f"{location}: {detail}"
