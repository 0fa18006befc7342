# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for shipwright.

Running `shipwright` with no arguments performs the full release, so the
usual invocation inside the build container needs nothing but the project's
Cargo.toml. The other subcommands run single stages or inspect the result.

The global options (--config, --log-level, --dry-run) work before or after the
subcommand through argparse's parent parser mechanism.

Usage:
    shipwright
    shipwright dist --config release.yaml
    shipwright lint
    shipwright verify --bundle-dir build/v0.0.1
"""

import argparse
import sys

from shipwright.cli.commands import (
    handle_clean,
    handle_dist,
    handle_doctor,
    handle_info,
    handle_lint,
    handle_verify,
    handle_version,
)


def _build_global_parser(suppress_defaults: bool = False) -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    add_help=False keeps its -h from colliding with each subcommand's own.

    The options are accepted both before and after the subcommand. The copy
    attached to the subcommands uses suppress_defaults, so an option the user
    left out there doesn't overwrite one given before the subcommand.
    """

    def default(value: object) -> object:
        return argparse.SUPPRESS if suppress_defaults else value

    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=default(None),
        help="Path to YAML release configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=default(None),
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (overrides the config file).",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=default(False),
        dest="dry_run",
        help="Show what would happen without running tools or writing files.",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    """Register all subcommands with their handler functions."""
    commands = [
        ("dist", "Lint, build all targets and package the release bundle.", handle_dist),
        ("lint", "Run the static-analysis quality gate only.", handle_lint),
        ("version", "Show the version the release would carry.", handle_version),
        ("verify", "Check a release bundle against its SHA256SUMS.", handle_verify),
        ("doctor", "Check that the release toolchain is installed.", handle_doctor),
        ("clean", "Wipe the build workspace.", handle_clean),
        ("info", "Display environment information.", handle_info),
    ]

    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler, bundle_dir=None)

    verify_parser = subparsers.choices["verify"]
    verify_parser.add_argument(
        "--bundle-dir",
        type=str,
        default=None,
        dest="bundle_dir",
        help="Bundle to verify (defaults to build/v<current version>).",
    )


def main() -> None:
    """
    Main CLI entrypoint; pyproject.toml's [project.scripts] points here.

    With no subcommand, the full release (`dist`) runs.
    """
    root_parser = argparse.ArgumentParser(
        prog="shipwright",
        description="shipwright: multi-target release builds for Cargo projects.",
        parents=[_build_global_parser()],
    )
    root_parser.set_defaults(func=handle_dist, bundle_dir=None)
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, _build_global_parser(suppress_defaults=True))

    args = root_parser.parse_args()

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
