# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the shipwright CLI.

Each function takes the parsed argparse namespace and returns an exit code.
No print() calls; everything goes through the structured logger.
"""

import argparse
import logging
from pathlib import Path

from shipwright.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, VALIDATION_ERROR
from shipwright.config.exceptions import ConfigError
from shipwright.config.loader import load_config
from shipwright.config.schema import ShipwrightConfig
from shipwright.logging.logger import get_logger
from shipwright.release.errors import (
    BuildError,
    ConfigurationError,
    LintFailure,
    PackagingError,
    ReleaseError,
)
from shipwright.runtime.bootstrap import bootstrap


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[ShipwrightConfig | None, logging.Logger]:
    """
    Shared setup for every command: load config, run bootstrap.

    Returns (config, logger). A config of None means loading failed and was
    already logged; the caller returns CONFIG_ERROR.
    """
    logger = get_logger(f"shipwright.cli.{command_name}", log_level=args.log_level or "INFO")

    config_path = Path(args.config) if args.config is not None else None
    try:
        config = load_config(config_path)
    except ConfigError as err:
        logger.error(
            "Configuration error",
            extra={"command": command_name, "error": str(err)},
        )
        return None, logger

    bootstrap(config.global_config, log_level=args.log_level)
    logger = get_logger(
        f"shipwright.cli.{command_name}",
        log_level=args.log_level or config.global_config.log_level,
    )
    if config_path is None:
        logger.debug("No config provided, running with defaults", extra={"command": command_name})

    return config, logger


def _project_root(config: ShipwrightConfig) -> Path:
    return Path(config.release.project_root).resolve()


def _exit_code_for(err: ReleaseError) -> int:
    if isinstance(err, ConfigurationError):
        return CONFIG_ERROR
    if isinstance(err, LintFailure):
        return VALIDATION_ERROR
    return RUNTIME_ERROR


def handle_dist(args: argparse.Namespace) -> int:
    """Lint, build every target, and package the release bundle."""
    config, logger = _load_and_bootstrap(args, "dist")
    if config is None:
        return CONFIG_ERROR

    from shipwright.release.pipeline import run_release

    try:
        result = run_release(_project_root(config), config.release, dry_run=args.dry_run)
    except BuildError as err:
        logger.error(
            "Release failed: build error",
            extra={"target": err.target, "exit_code": err.exit_code, "error": str(err)},
        )
        return RUNTIME_ERROR
    except PackagingError as err:
        logger.error(
            "Release failed: packaging error",
            extra={"target": err.target, "error": str(err)},
        )
        return RUNTIME_ERROR
    except ReleaseError as err:
        logger.error("Release failed", extra={"error": str(err)})
        return _exit_code_for(err)
    except Exception as err:
        logger.error("Release failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    logger.info(
        "Release finished",
        extra={
            "version": result.version,
            "bundle_dir": str(result.bundle_dir),
            "archives": [p.name for p in result.archives],
            "packages": [p.name for p in result.packages],
            "dry_run": result.dry_run,
        },
    )
    return SUCCESS


def handle_lint(args: argparse.Namespace) -> int:
    """Run only the quality gate."""
    config, logger = _load_and_bootstrap(args, "lint")
    if config is None:
        return CONFIG_ERROR

    from shipwright.release.quality_gate import run_quality_gate

    if args.dry_run:
        logger.info(
            "Dry run: would run quality gate",
            extra={"command": " ".join(config.release.lint_command)},
        )
        return SUCCESS

    try:
        run_quality_gate(_project_root(config), config.release.lint_command)
    except LintFailure as err:
        logger.error("Lint failed", extra={"exit_code": err.exit_code, "error": str(err)})
        return VALIDATION_ERROR

    return SUCCESS


def handle_version(args: argparse.Namespace) -> int:
    """Report the version the next release would carry."""
    config, logger = _load_and_bootstrap(args, "version")
    if config is None:
        return CONFIG_ERROR

    from shipwright.release.output import bundle_dir
    from shipwright.release.version import resolve_version
    from shipwright.utils.paths import resolve_under

    project_root = _project_root(config)
    try:
        version = resolve_version(project_root)
    except ConfigurationError as err:
        logger.error("Cannot resolve version", extra={"error": str(err)})
        return CONFIG_ERROR

    logger.info(
        "Project version",
        extra={
            "version": version,
            "bundle_dir": str(
                bundle_dir(resolve_under(project_root, config.release.build_root), version)
            ),
        },
    )
    return SUCCESS


def handle_verify(args: argparse.Namespace) -> int:
    """Re-check SHA256SUMS of a release bundle."""
    config, logger = _load_and_bootstrap(args, "verify")
    if config is None:
        return CONFIG_ERROR

    from shipwright.release.checksums import verify_checksums
    from shipwright.release.output import bundle_dir
    from shipwright.release.version import resolve_version
    from shipwright.utils.paths import resolve_under

    if args.bundle_dir is not None:
        target_dir = Path(args.bundle_dir)
    else:
        project_root = _project_root(config)
        try:
            version = resolve_version(project_root)
        except ConfigurationError as err:
            logger.error("Cannot resolve version", extra={"error": str(err)})
            return CONFIG_ERROR
        target_dir = bundle_dir(resolve_under(project_root, config.release.build_root), version)

    if not target_dir.is_dir():
        logger.error("Release bundle not found", extra={"path": str(target_dir)})
        return VALIDATION_ERROR

    result = verify_checksums(target_dir)
    if not result.is_valid:
        logger.error(
            "Bundle verification failed",
            extra={
                "path": str(target_dir),
                "mismatches": result.mismatches,
                "missing": result.missing_files,
                "errors": result.errors,
            },
        )
        return VALIDATION_ERROR

    logger.info(
        "Bundle verified",
        extra={"path": str(target_dir), "checked": result.checked_count},
    )
    return SUCCESS


def handle_doctor(args: argparse.Namespace) -> int:
    """Check that the release toolchain is present."""
    config, logger = _load_and_bootstrap(args, "doctor")
    if config is None:
        return CONFIG_ERROR

    from shipwright.release.environment import validate_environment

    checks = validate_environment(config.release, check_path=_project_root(config))
    failed = [check.name for check in checks if not check.passed]
    if failed:
        logger.error("Environment not ready", extra={"failed_checks": failed})
        return VALIDATION_ERROR

    logger.info("Environment ready", extra={"checks": len(checks)})
    return SUCCESS


def handle_clean(args: argparse.Namespace) -> int:
    """Wipe the build workspace."""
    config, logger = _load_and_bootstrap(args, "clean")
    if config is None:
        return CONFIG_ERROR

    from shipwright.release.output import clear_build_root
    from shipwright.utils.paths import resolve_under

    project_root = _project_root(config)
    build_root = resolve_under(project_root, config.release.build_root)

    if args.dry_run:
        logger.info("Dry run: would clear build workspace", extra={"build_root": str(build_root)})
        return SUCCESS

    try:
        removed = clear_build_root(build_root, project_root)
    except PackagingError as err:
        logger.error("Clean failed", extra={"error": str(err)})
        return RUNTIME_ERROR

    logger.info("Clean complete", extra={"build_root": str(build_root), "removed": removed})
    return SUCCESS


def handle_info(args: argparse.Namespace) -> int:
    """Display environment and configuration information."""
    logger = get_logger("shipwright.cli.info", log_level=args.log_level or "INFO")

    from shipwright import __version__
    from shipwright.release.environment import get_host_info

    system_info = get_host_info()

    logger.info(
        "System information",
        extra={
            "shipwright_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "config": args.config,
        },
    )
    return SUCCESS
