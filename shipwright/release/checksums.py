# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Checksums for the release bundle.

The package-formula update needs the SHA256 of each uploaded archive, so the
pipeline finishes by writing SHA256SUMS next to the artifacts:

    <sha256hex>  <filename>
    <sha256hex>  <filename>

One line per file, two spaces between hash and name (GNU `sha256sum -c`
format), sorted by filename. Reading also accepts the binary-mode marker
(`<sha256hex> *<filename>`) that `sha256sum -b` writes.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from shipwright.logging.logger import get_logger
from shipwright.utils.filesystem import atomic_write
from shipwright.utils.hashing import compute_sha256, verify_checksum

_logger: logging.Logger = get_logger(__name__)

CHECKSUM_FILENAME = "SHA256SUMS"


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a checksum verification run."""

    is_valid: bool
    checked_count: int
    mismatches: list[str] = field(default_factory=list)
    missing_files: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def generate_checksums(bundle_dir: Path) -> dict[str, str]:
    """
    Hash every regular file in the bundle except SHA256SUMS itself.

    Raises:
        FileNotFoundError: If bundle_dir doesn't exist.
    """
    if not bundle_dir.is_dir():
        raise FileNotFoundError(f"Release bundle not found: {bundle_dir}")

    checksums: dict[str, str] = {}
    for file_path in sorted(bundle_dir.iterdir()):
        if not file_path.is_file() or file_path.name == CHECKSUM_FILENAME:
            continue
        checksums[file_path.name] = compute_sha256(file_path)

    _logger.info(
        "Checksums generated",
        extra={"file_count": len(checksums), "bundle_dir": str(bundle_dir)},
    )
    return checksums


def write_checksum_file(bundle_dir: Path, checksums: dict[str, str]) -> Path:
    """Write SHA256SUMS into the bundle and return its path."""
    checksum_path = bundle_dir / CHECKSUM_FILENAME
    lines = [f"{checksums[name]}  {name}" for name in sorted(checksums)]
    atomic_write(checksum_path, "\n".join(lines) + "\n")
    checksum_path.chmod(0o644)

    _logger.info(
        "Checksum file written",
        extra={"path": str(checksum_path), "entries": len(lines)},
    )
    return checksum_path


def parse_checksum_file(checksum_path: Path) -> dict[str, str]:
    """
    Parse SHA256SUMS into {filename: sha256_hex}.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If a line is malformed.
    """
    if not checksum_path.is_file():
        raise FileNotFoundError(f"Checksum file not found: {checksum_path}")

    checksums: dict[str, str] = {}
    content = checksum_path.read_text(encoding="utf-8")

    for line_num, line in enumerate(content.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        sha256_hex, _, rest = line.partition(" ")
        if rest[:1] not in {" ", "*"} or len(rest) < 2:
            raise ValueError(
                f"Invalid checksum format at line {line_num}: expected "
                f"'<sha256>  <filename>' or '<sha256> *<filename>', got: {line!r}"
            )
        filename = rest[1:]
        if len(sha256_hex) != 64:
            raise ValueError(
                f"Invalid SHA256 hash length at line {line_num}: "
                f"expected 64 chars, got {len(sha256_hex)}"
            )
        checksums[filename] = sha256_hex.lower()

    return checksums


def verify_checksums(bundle_dir: Path) -> VerificationResult:
    """
    Re-hash every file listed in SHA256SUMS.

    Reports all mismatches and missing files, not just the first.
    """
    checksum_path = bundle_dir / CHECKSUM_FILENAME
    if not checksum_path.is_file():
        return VerificationResult(
            is_valid=False,
            checked_count=0,
            errors=[f"{CHECKSUM_FILENAME} not found in {bundle_dir}"],
        )

    try:
        expected = parse_checksum_file(checksum_path)
    except ValueError as err:
        return VerificationResult(
            is_valid=False,
            checked_count=0,
            errors=[f"Failed to parse {CHECKSUM_FILENAME}: {err}"],
        )

    mismatches: list[str] = []
    missing_files: list[str] = []
    checked = 0

    for filename, expected_hash in sorted(expected.items()):
        file_path = bundle_dir / filename
        if not file_path.is_file():
            missing_files.append(filename)
            _logger.error("File missing during verification", extra={"file": filename})
            continue

        checked += 1
        if not verify_checksum(file_path, expected_hash):
            mismatches.append(filename)
            _logger.error("Checksum mismatch", extra={"file": filename})

    is_valid = not mismatches and not missing_files
    if is_valid:
        _logger.info("All checksums verified", extra={"checked_count": checked})
    else:
        _logger.error(
            "Checksum verification failed",
            extra={"mismatches": len(mismatches), "missing": len(missing_files)},
        )

    return VerificationResult(
        is_valid=is_valid,
        checked_count=checked,
        mismatches=mismatches,
        missing_files=missing_files,
    )
