# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Failure types for the release pipeline.

Every one of these is fatal for the run. Nothing is retried.
"""

from typing import Optional


class ReleaseError(Exception):
    """Base for all release pipeline failures."""


class ConfigurationError(ReleaseError):
    """Cargo.toml is missing, unparsable, or has no usable package.version."""


class LintFailure(ReleaseError):
    """The static-analysis gate rejected the source tree."""

    def __init__(self, message: str, exit_code: int = -1, output: str = "") -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.output = output


class BuildError(ReleaseError):
    """The toolchain failed to produce a binary for one target."""

    def __init__(self, target: str, message: str, exit_code: int = -1, output: str = "") -> None:
        super().__init__(f"{target}: {message}")
        self.target = target
        self.exit_code = exit_code
        self.output = output


class PackagingError(ReleaseError):
    """Archive or Debian package assembly failed."""

    def __init__(self, message: str, target: Optional[str] = None) -> None:
        super().__init__(f"{target}: {message}" if target else message)
        self.target = target
