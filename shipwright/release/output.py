# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Owner of the build workspace and the versioned release bundle.

The workspace (build/ by default) is wiped at the start of every run and
then build/v<version>/ is created. Every packager writes only there. Bundles
are not kept across runs; the previous one is what the operator uploads
before starting the next.
"""

import logging
import shutil
from pathlib import Path

from shipwright.logging.logger import get_logger
from shipwright.release.errors import PackagingError
from shipwright.utils.paths import ensure_directory

_logger: logging.Logger = get_logger(__name__)


def bundle_dir(build_root: Path, version: str) -> Path:
    """The versioned output directory, build_root/v<version>."""
    return build_root / f"v{version}"


def clear_build_root(build_root: Path, project_root: Path | None = None) -> int:
    """
    Remove everything inside build_root, keeping the directory itself.

    Safe when build_root doesn't exist. Returns the number of removed
    top-level entries.

    Raises:
        PackagingError: If build_root is the project root or one of its
            parents, or if it exists but is not a directory.
    """
    if project_root is not None:
        resolved = build_root.resolve()
        root = project_root.resolve()
        if resolved == root or resolved in root.parents:
            raise PackagingError(
                f"Refusing to wipe {build_root}: it contains the project root"
            )

    if not build_root.exists():
        return 0
    if not build_root.is_dir():
        raise PackagingError(f"Build root is not a directory: {build_root}")

    removed = 0
    for entry in build_root.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()
        removed += 1

    if removed:
        _logger.info(
            "Cleared build workspace",
            extra={"build_root": str(build_root), "removed": removed},
        )
    return removed


def prepare_output_root(build_root: Path, version: str, project_root: Path | None = None) -> Path:
    """
    Wipe the build workspace and create build_root/v<version>/.

    Idempotent and safe to call when nothing existed before.

    Returns:
        Path to the (empty) release bundle directory.
    """
    clear_build_root(build_root, project_root)
    output_dir = ensure_directory(bundle_dir(build_root, version))
    _logger.info("Release bundle ready", extra={"bundle_dir": str(output_dir)})
    return output_dir
