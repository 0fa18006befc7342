# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Pre-flight checks for the release toolchain and host.

`shipwright doctor` runs these so an operator can see a missing cross
linker or SDK before starting a long release. The release command itself
doesn't run them: a missing tool there already surfaces as a BuildError or
PackagingError naming the executable. The one exception is the interpreter
floor, which bootstrap enforces for every command.
"""

import logging
import os
import platform
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Optional

from shipwright.config.schema import ReleaseSettings
from shipwright.logging.logger import get_logger
from shipwright.release.builder import SDKROOT_ENV
from shipwright.release.targets import Target

_logger: logging.Logger = get_logger(__name__)

# tomllib arrived in 3.11.
MIN_PYTHON_MAJOR: int = 3
MIN_PYTHON_MINOR: int = 11
MIN_DISK_SPACE_BYTES: int = 1_073_741_824  # 1 GB


@dataclass(frozen=True)
class EnvironmentCheck:
    """Result of a single environment check."""

    name: str
    passed: bool
    message: str
    value: str


class HostInfo(NamedTuple):
    """The machine a release runs on, as reported by `info` and bootstrap."""

    python_version: str
    platform: str
    architecture: str
    hostname: str


def get_host_info() -> HostInfo:
    return HostInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        architecture=platform.machine(),
        hostname=platform.node(),
    )


def check_python_version(version_info: Optional[tuple[int, int, int]] = None) -> EnvironmentCheck:
    """Verify the interpreter meets the 3.11 floor; defaults to the running one."""
    major, minor, micro = version_info or tuple(sys.version_info[:3])
    version_str = f"{major}.{minor}.{micro}"
    passed = major > MIN_PYTHON_MAJOR or (major == MIN_PYTHON_MAJOR and minor >= MIN_PYTHON_MINOR)
    if passed:
        msg = f"Python {version_str} meets minimum {MIN_PYTHON_MAJOR}.{MIN_PYTHON_MINOR}"
    else:
        msg = (
            f"shipwright requires Python >= {MIN_PYTHON_MAJOR}.{MIN_PYTHON_MINOR}, "
            f"running {version_str}"
        )
    return EnvironmentCheck(name="python_version", passed=passed, message=msg, value=version_str)


def check_executable(name: str, executable: str) -> EnvironmentCheck:
    """Check that an executable is on PATH."""
    location = shutil.which(executable)
    if location is None:
        return EnvironmentCheck(
            name=name,
            passed=False,
            message=f"{executable} not found on PATH",
            value="not_found",
        )
    return EnvironmentCheck(name=name, passed=True, message=f"{executable} found", value=location)


def check_cargo_subcommand(command: list[str]) -> Optional[EnvironmentCheck]:
    """
    Cargo subcommands like `zigbuild` are separate `cargo-<sub>` binaries.
    Returns None when the build command isn't a cargo subcommand.
    """
    if len(command) < 2 or Path(command[0]).name != "cargo" or command[1].startswith("-"):
        return None
    if command[1] in {"build", "rustc"}:
        return None
    return check_executable("build_subcommand", f"cargo-{command[1]}")


def check_sdk_root(sdk_root: Optional[str]) -> EnvironmentCheck:
    """The Apple targets need a macOS SDK, from config or the SDKROOT variable."""
    value = sdk_root or os.environ.get(SDKROOT_ENV)
    if not value:
        return EnvironmentCheck(
            name="sdk_root",
            passed=False,
            message=f"{SDKROOT_ENV} is not set; Apple targets will fail to link",
            value="unset",
        )
    if not Path(value).is_dir():
        return EnvironmentCheck(
            name="sdk_root",
            passed=False,
            message=f"{SDKROOT_ENV} points to a missing directory: {value}",
            value=value,
        )
    return EnvironmentCheck(name="sdk_root", passed=True, message="SDK found", value=value)


def check_disk_space(path: Optional[Path] = None) -> EnvironmentCheck:
    """Check available disk space where the bundle will be written."""
    check_path = path or Path.cwd()
    try:
        usage = shutil.disk_usage(str(check_path))
    except OSError as err:
        return EnvironmentCheck(
            name="disk_space",
            passed=False,
            message=f"Cannot check disk space: {err}",
            value="error",
        )

    free_gb = usage.free / (1024**3)
    passed = usage.free >= MIN_DISK_SPACE_BYTES
    if passed:
        msg = f"{free_gb:.1f} GB free (minimum {MIN_DISK_SPACE_BYTES / (1024**3):.0f} GB)"
    else:
        msg = f"Only {free_gb:.1f} GB free, need at least {MIN_DISK_SPACE_BYTES / (1024**3):.0f} GB"
    return EnvironmentCheck(name="disk_space", passed=passed, message=msg, value=f"{free_gb:.1f}GB")


def validate_environment(
    settings: ReleaseSettings,
    check_path: Optional[Path] = None,
) -> list[EnvironmentCheck]:
    """
    Run every check relevant to the configured release.

    Returns a list of check results; callers decide what a failure means.
    """
    checks = [
        check_python_version(),
        check_executable("build_tool", settings.build_command[0]),
        check_executable("lint_tool", settings.lint_command[0]),
    ]

    subcommand = check_cargo_subcommand(settings.build_command)
    if subcommand is not None:
        checks.append(subcommand)

    if settings.deb_targets:
        checks.append(check_executable("deb_tool", settings.deb_command[0]))

    if any(Target(triple).needs_sdk for triple in settings.targets):
        checks.append(check_sdk_root(settings.sdk_root))

    checks.append(check_disk_space(check_path))

    for check in checks:
        log_fn = _logger.info if check.passed else _logger.error
        log_fn(
            "Environment check",
            extra={"check": check.name, "passed": check.passed, "check_message": check.message},
        )

    passed_count = sum(1 for c in checks if c.passed)
    _logger.info(
        "Environment validation complete",
        extra={"passed": passed_count, "failed": len(checks) - passed_count},
    )
    return checks
