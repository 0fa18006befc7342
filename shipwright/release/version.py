# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Version resolution from the Cargo manifest.

The version in Cargo.toml names every artifact of a run: the bundle
directory, each archive's parent, and each Debian package. The pipeline reads
it exactly once, before anything else happens, and passes the value down.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

from shipwright.logging.logger import get_logger
from shipwright.release.errors import ConfigurationError

_logger: logging.Logger = get_logger(__name__)

MANIFEST_FILENAME = "Cargo.toml"


def _load_manifest(project_root: Path) -> dict[str, Any]:
    manifest_path = project_root / MANIFEST_FILENAME
    if not manifest_path.is_file():
        raise ConfigurationError(f"Manifest not found: {manifest_path}")

    try:
        with open(manifest_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as err:
        raise ConfigurationError(f"Invalid TOML in {manifest_path}: {err}") from err
    except UnicodeDecodeError as err:
        raise ConfigurationError(f"Manifest {manifest_path} is not valid UTF-8: {err}") from err
    except OSError as err:
        raise ConfigurationError(f"Cannot read manifest {manifest_path}: {err}") from err


def _package_field(manifest: dict[str, Any], field: str, project_root: Path) -> str:
    package = manifest.get("package")
    if not isinstance(package, dict):
        raise ConfigurationError(
            f"{project_root / MANIFEST_FILENAME} has no [package] section"
        )

    value = package.get(field)
    if not isinstance(value, str) or not value:
        raise ConfigurationError(
            f"{project_root / MANIFEST_FILENAME} has no usable package.{field}"
        )
    return value


def resolve_version(project_root: Path) -> str:
    """
    Return `package.version` from Cargo.toml, untouched.

    Raises:
        ConfigurationError: If the manifest is missing, not TOML, or lacks
            a non-empty string at package.version.
    """
    version = _package_field(_load_manifest(project_root), "version", project_root)
    _logger.info("Resolved version", extra={"version": version})
    return version


def resolve_package_name(project_root: Path) -> str:
    """Return `package.name`, used as the binary name when none is configured."""
    return _package_field(_load_manifest(project_root), "name", project_root)
