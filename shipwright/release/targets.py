# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Target triples and the few facts the pipeline derives from them.

A triple is an opaque token. Only two substring checks are ever made: one
picks the `.exe` suffix for Windows targets, the other decides whether a
target is Linux-family and therefore eligible for a Debian package.

The Debian architecture names are a hand-maintained table. Cargo says
`aarch64`, dpkg says `arm64`; the two vocabularies don't map by rule.
"""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_TARGETS: tuple[str, ...] = (
    "x86_64-pc-windows-gnu",
    "aarch64-pc-windows-gnullvm",
    "x86_64-apple-darwin",
    "aarch64-apple-darwin",
    "x86_64-unknown-linux-gnu",
    "aarch64-unknown-linux-gnu",
)

DEB_ARCHITECTURES: dict[str, str] = {
    "aarch64-unknown-linux-gnu": "arm64",
    "x86_64-unknown-linux-gnu": "amd64",
}

WINDOWS_EXECUTABLE_SUFFIX = ".exe"


@dataclass(frozen=True)
class Target:
    """One entry of the build list."""

    triple: str

    def __str__(self) -> str:
        return self.triple

    @property
    def is_windows(self) -> bool:
        return is_windows(self.triple)

    @property
    def is_linux(self) -> bool:
        return is_linux(self.triple)

    @property
    def needs_sdk(self) -> bool:
        """Apple targets link against a foreign SDK supplied through SDKROOT."""
        return "apple" in self.triple


def is_windows(triple: str) -> bool:
    return "windows" in triple


def is_linux(triple: str) -> bool:
    return "-linux-" in triple or triple.endswith("-linux")


def binary_name(triple: str, name: str) -> str:
    """Canonical file name of the binary for this target."""
    if is_windows(triple):
        return f"{name}{WINDOWS_EXECUTABLE_SUFFIX}"
    return name


def binary_path(target_root: Path, triple: str, name: str) -> Path:
    """Where cargo leaves the release binary: <root>/<triple>/release/<binary>."""
    return target_root / triple / "release" / binary_name(triple, name)


def archive_name(triple: str, name: str) -> str:
    return f"{name}-{triple}.tar.gz"


def deb_name(triple: str, name: str, version: str) -> str:
    return f"{name}-{triple}-{version}.deb"
