# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tarball packaging.

Every built target gets <name>-<triple>.tar.gz in the release bundle,
holding exactly one member: the binary under its canonical name (ll or
ll.exe), with no directory prefix. Re-running for the same version and target
overwrites the archive at the same path.
"""

import logging
import tarfile
from pathlib import Path

from shipwright.logging.logger import get_logger
from shipwright.release.errors import PackagingError
from shipwright.release.targets import archive_name, binary_name

_logger: logging.Logger = get_logger(__name__)


def archive(triple: str, binary: Path, version: str, output_dir: Path, name: str) -> Path:
    """
    Wrap one target's binary into a gzip-compressed tarball.

    Returns:
        Path of the written archive.

    Raises:
        PackagingError: If the binary is missing or the archive can't be written.
    """
    if not binary.is_file():
        raise PackagingError(f"Binary not found: {binary}", target=triple)

    output_path = output_dir / archive_name(triple, name)
    member = binary_name(triple, name)

    try:
        with tarfile.open(output_path, "w:gz") as tar:
            tar.add(str(binary), arcname=member, recursive=False)
    except (OSError, tarfile.TarError) as err:
        output_path.unlink(missing_ok=True)
        raise PackagingError(f"Cannot write archive {output_path}: {err}", target=triple) from err

    _logger.info(
        "Archive written",
        extra={"target": triple, "version": version, "archive": str(output_path)},
    )
    return output_path
