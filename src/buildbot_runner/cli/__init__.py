"""BuildBot command line interface."""

from buildbot_runner.cli.main import main

__all__ = ["main"]
