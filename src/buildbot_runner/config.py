"""
Configuration loading for BuildBot runs.

Options are resolved from several layers, highest precedence first:

1. Explicit values (command line arguments)
2. Environment variables: BUILDBOT_CONFIGURATION, BUILDBOT_ARCHITECTURE,
   BUILDBOT_PROJECT_DIR (comma-separated names)
3. ``buildbot.yaml`` in the project directory:

       configurations: [debug, release]
       architectures: [x64]

4. Defaults: debug / x64 / current directory

A layer that is set but selects nothing (``configurations: []``, an empty
BUILDBOT_CONFIGURATION) is rejected rather than skipped. Commands that do
not build (clean, list) only resolve the project directory.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from buildbot_runner.errors import InvalidArgumentsError
from buildbot_runner.models.flags import Architecture, BuildConfiguration, parse_flags
from buildbot_runner.models.options import RunOptions

CONFIG_FILENAME = "buildbot.yaml"

ENV_CONFIGURATION = "BUILDBOT_CONFIGURATION"
ENV_ARCHITECTURE = "BUILDBOT_ARCHITECTURE"
ENV_PROJECT_DIR = "BUILDBOT_PROJECT_DIR"

DEFAULT_CONFIGURATIONS = ("debug",)
DEFAULT_ARCHITECTURES = ("x64",)


def load_config_file(project_directory: Path) -> dict[str, Any]:
    """
    Load ``buildbot.yaml`` from the project directory.

    Returns:
        The parsed mapping, empty if the file does not exist

    Raises:
        InvalidArgumentsError: If the file is not valid YAML or not a mapping
    """
    path = Path(project_directory) / CONFIG_FILENAME
    if not path.is_file():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidArgumentsError(f"Invalid {CONFIG_FILENAME}: {e}", cause=e) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise InvalidArgumentsError(f"Invalid {CONFIG_FILENAME}: expected a mapping at the top level")
    return config


def resolve_options(
    project_directory: str | Path | None = None,
    configurations: Sequence[str] | None = None,
    architectures: Sequence[str] | None = None,
    clean_all: bool = False,
    environ: Mapping[str, str] | None = None,
    select_targets: bool = True,
) -> RunOptions:
    """
    Resolve run options from arguments, environment and config file.

    The returned options are not validated against the filesystem; the
    orchestrator calls RunOptions.validate() so that a missing project
    directory is reported as its own outcome.

    Args:
        project_directory: Project root from the command line
        configurations: Configuration names from the command line
        architectures: Architecture names from the command line
        clean_all: Clean instead of build
        environ: Environment to read (default: os.environ)
        select_targets: Resolve configurations and architectures; when False
            (clean, list) the defaults are used and the environment and
            config file selections are not read

    Returns:
        The resolved RunOptions

    Raises:
        InvalidArgumentsError: If any layer holds an unknown or malformed value
    """
    env = os.environ if environ is None else environ

    directory = Path(project_directory or env.get(ENV_PROJECT_DIR) or ".")
    if not select_targets:
        return RunOptions(project_directory=directory, clean_all=clean_all)

    file_config = load_config_file(directory) if directory.is_dir() else {}

    configuration_names = _first(
        "configuration",
        [
            (configurations, "command line"),
            (_split_env(env.get(ENV_CONFIGURATION)), ENV_CONFIGURATION),
            (_file_list(file_config, "configurations"), CONFIG_FILENAME),
        ],
        DEFAULT_CONFIGURATIONS,
    )
    architecture_names = _first(
        "architecture",
        [
            (architectures, "command line"),
            (_split_env(env.get(ENV_ARCHITECTURE)), ENV_ARCHITECTURE),
            (_file_list(file_config, "architectures"), CONFIG_FILENAME),
        ],
        DEFAULT_ARCHITECTURES,
    )

    return RunOptions(
        configurations=parse_flags(BuildConfiguration, configuration_names),
        architectures=parse_flags(Architecture, architecture_names),
        project_directory=directory,
        clean_all=clean_all,
    )


def _first(
    label: str,
    layers: list[tuple[Sequence[str] | None, str]],
    default: Sequence[str],
) -> Sequence[str]:
    """Return the highest layer that is set; a layer set to nothing is an error."""
    for names, source in layers:
        if names is None:
            continue
        if not names:
            raise InvalidArgumentsError(f"No {label} selected in {source}")
        return names
    return default


def _split_env(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]


def _file_list(config: dict[str, Any], key: str) -> list[str] | None:
    value = config.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise InvalidArgumentsError(f"Invalid {CONFIG_FILENAME}: '{key}' must be a list of names")
    return value
