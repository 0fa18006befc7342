# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Sequential cross-compilation of every release target.

Each target gets one `cargo zigbuild --target <triple> --release --quiet`
run in the project root. Targets are built one after another, never in
parallel; they share cargo's target directory.

The first failing target stops the loop. Binaries already built stay where
cargo put them; the run as a whole is still a failure.

There is no timeout. A hung toolchain blocks the run until the operator
interrupts it.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

from shipwright.logging.logger import get_logger
from shipwright.release.errors import BuildError
from shipwright.release.targets import Target, binary_path

_logger: logging.Logger = get_logger(__name__)

SDKROOT_ENV = "SDKROOT"


@dataclass(frozen=True)
class BuiltTarget:
    """A target whose binary exists on disk."""

    target: Target
    binary: Path


def build_command(base_command: Sequence[str], triple: str) -> list[str]:
    """The full toolchain invocation for one target."""
    return [*base_command, "--target", triple, "--release", "--quiet"]


def _build_env(sdk_root: Optional[str]) -> dict[str, str]:
    """Inherited environment, with SDKROOT pinned when one is configured."""
    env = dict(os.environ)
    if sdk_root:
        env[SDKROOT_ENV] = sdk_root
    return env


def build(
    target: Target,
    project_root: Path,
    target_root: Path,
    binary_name: str,
    base_command: Sequence[str] = ("cargo", "zigbuild"),
    sdk_root: Optional[str] = None,
) -> Path:
    """
    Cross-compile one target in release mode.

    Returns:
        Path of the produced binary, <target_root>/<triple>/release/<binary>.

    Raises:
        BuildError: If the toolchain can't be started, exits non-zero, or
            exits zero without leaving the binary where expected.
    """
    command = build_command(base_command, target.triple)
    _logger.info("Building target", extra={"target": target.triple})

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            cwd=str(project_root),
            env=_build_env(sdk_root),
        )
    except FileNotFoundError as err:
        _logger.error(
            "Build tool not found",
            extra={"target": target.triple, "executable": command[0]},
        )
        raise BuildError(target.triple, f"{command[0]} executable not found") from err

    if result.returncode != 0:
        output = (result.stdout or "") + (result.stderr or "")
        _logger.error(
            "Build failed",
            extra={
                "target": target.triple,
                "exit_code": result.returncode,
                "output": output.strip(),
            },
        )
        raise BuildError(
            target.triple,
            f"toolchain exited with code {result.returncode}",
            exit_code=result.returncode,
            output=output,
        )

    binary = binary_path(target_root, target.triple, binary_name)
    if not binary.is_file():
        raise BuildError(target.triple, f"build succeeded but no binary at {binary}")

    _logger.info(
        "Build finished",
        extra={"target": target.triple, "binary": str(binary)},
    )
    return binary


def build_all(
    targets: Iterable[Target],
    project_root: Path,
    target_root: Path,
    binary_name: str,
    base_command: Sequence[str] = ("cargo", "zigbuild"),
    sdk_root: Optional[str] = None,
) -> list[BuiltTarget]:
    """
    Build every target in order, stopping at the first failure.

    Raises:
        BuildError: From the first target that fails; later targets are
            never attempted.
    """
    built: list[BuiltTarget] = []
    for target in targets:
        binary = build(
            target,
            project_root,
            target_root,
            binary_name,
            base_command=base_command,
            sdk_root=sdk_root,
        )
        built.append(BuiltTarget(target=target, binary=binary))

    _logger.info("All targets built", extra={"count": len(built)})
    return built
