"""Main CLI entry point for BuildBot."""

from __future__ import annotations

import argparse
import logging
import sys

from buildbot_runner.cli.commands import build, clean, list_tasks
from buildbot_runner.exit_codes import ExitCode
from buildbot_runner.logging import configure_logging


def _add_target_arguments(parser: argparse.ArgumentParser, flags: bool = True) -> None:
    parser.add_argument(
        "-p",
        "--project-dir",
        help="Project root to search for .buildbot directories (default: current directory)",
    )
    if not flags:
        return
    parser.add_argument(
        "-c",
        "--configuration",
        action="append",
        help="Configuration to build, repeatable or comma-separated (debug, release)",
    )
    parser.add_argument(
        "-a",
        "--architecture",
        action="append",
        help="Architecture to build, repeatable or comma-separated (x86, x64, arm, arm64)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="buildbot",
        description="BuildBot - dependency-ordered build script runner",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    build_cmd = subparsers.add_parser("build", help="Run every build task in dependency order")
    _add_target_arguments(build_cmd)

    clean_cmd = subparsers.add_parser("clean", help="Clean every build task in dependency order")
    _add_target_arguments(clean_cmd, flags=False)

    list_cmd = subparsers.add_parser("list", help="Show the scheduled task order")
    _add_target_arguments(list_cmd, flags=False)
    list_cmd.add_argument(
        "--layers",
        action="store_true",
        help="Group tasks by dependency level",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(int(ExitCode.INVALID_ARGUMENTS))

    configure_logging(
        json_format=args.json_logs,
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    # clean and list take no flag selection
    for name in ("configuration", "architecture"):
        if not hasattr(args, name):
            setattr(args, name, None)

    if args.command == "build":
        code = build(args)
    elif args.command == "clean":
        code = clean(args)
    else:
        code = list_tasks(args)

    sys.exit(int(code))


if __name__ == "__main__":
    main()
