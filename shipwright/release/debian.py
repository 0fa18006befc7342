# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Debian package assembly for the Linux targets.

For each configured (triple, architecture) pair:

    <tmp>/<name>-<triple>-<version>/
    ├─ DEBIAN/control
    └─ usr/local/bin/<name>

is staged in a throwaway directory, handed to `dpkg-deb --build
--root-owner-group`, and the resulting .deb is moved into the release bundle.
The staging tree never outlives the call.

The architecture is passed in explicitly from the configured table; it is
never parsed out of the triple.
"""

import logging
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from shipwright.logging.logger import get_logger
from shipwright.release.errors import PackagingError
from shipwright.release.targets import binary_path, deb_name
from shipwright.utils.filesystem import atomic_write

_logger: logging.Logger = get_logger(__name__)

INSTALL_PREFIX = Path("usr") / "local" / "bin"


@dataclass(frozen=True)
class PackageMetadata:
    """Fields of the generated DEBIAN/control file."""

    package: str
    version: str
    architecture: str
    maintainer: str
    description: str


def render_control(metadata: PackageMetadata) -> str:
    """Render a minimal Debian control file."""
    return (
        f"Package: {metadata.package}\n"
        f"Version: {metadata.version}\n"
        f"Architecture: {metadata.architecture}\n"
        f"Maintainer: {metadata.maintainer}\n"
        f"Description: {metadata.description}\n"
    )


def stage_package(staging_dir: Path, binary: Path, metadata: PackageMetadata) -> Path:
    """
    Lay out the package filesystem tree under staging_dir.

    Returns:
        Path of the staged binary.
    """
    bin_dir = staging_dir / INSTALL_PREFIX
    bin_dir.mkdir(parents=True, exist_ok=True)
    staged_binary = bin_dir / metadata.package
    shutil.copy2(str(binary), str(staged_binary))
    staged_binary.chmod(0o755)

    control_dir = staging_dir / "DEBIAN"
    control_dir.mkdir(parents=True, exist_ok=True)
    control_dir.chmod(0o755)
    control_path = control_dir / "control"
    atomic_write(control_path, render_control(metadata))
    control_path.chmod(0o644)

    return staged_binary


def package_deb(
    triple: str,
    architecture: str,
    version: str,
    output_dir: Path,
    target_root: Path,
    name: str,
    maintainer: str,
    description: str,
    command: Sequence[str] = ("dpkg-deb", "--build", "--root-owner-group"),
    staging_parent: Optional[Path] = None,
) -> Path:
    """
    Build <name>-<triple>-<version>.deb from the already-built binary and
    move it into output_dir.

    Returns:
        Path of the package inside output_dir.

    Raises:
        PackagingError: If the binary is missing, the packaging tool can't be
            started or fails, or it doesn't produce the expected file.
    """
    binary = binary_path(target_root, triple, name)
    if not binary.is_file():
        raise PackagingError(f"Binary not found: {binary}", target=triple)

    metadata = PackageMetadata(
        package=name,
        version=version,
        architecture=architecture,
        maintainer=maintainer,
        description=description,
    )
    package_filename = deb_name(triple, name, version)

    temp_root = Path(tempfile.mkdtemp(
        prefix="shipwright_deb_",
        dir=str(staging_parent) if staging_parent else None,
    ))
    try:
        staging_dir = temp_root / Path(package_filename).stem
        stage_package(staging_dir, binary, metadata)

        full_command = [*command, str(staging_dir)]
        _logger.info(
            "Building Debian package",
            extra={"target": triple, "architecture": architecture},
        )

        try:
            result = subprocess.run(
                full_command,
                capture_output=True,
                text=True,
                cwd=str(temp_root),
            )
        except FileNotFoundError as err:
            raise PackagingError(f"{command[0]} executable not found", target=triple) from err

        if result.returncode != 0:
            output = (result.stdout or "") + (result.stderr or "")
            _logger.error(
                "Debian packaging failed",
                extra={"target": triple, "exit_code": result.returncode, "output": output.strip()},
            )
            raise PackagingError(
                f"{command[0]} exited with code {result.returncode}", target=triple
            )

        built = temp_root / package_filename
        if not built.is_file():
            raise PackagingError(f"{command[0]} did not produce {built.name}", target=triple)

        destination = output_dir / package_filename
        shutil.move(str(built), str(destination))

    finally:
        shutil.rmtree(temp_root, ignore_errors=True)

    _logger.info(
        "Debian package written",
        extra={"target": triple, "version": version, "package": str(destination)},
    )
    return destination
