# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for shipwright.

Every section is a frozen pydantic model with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

The defaults describe the stock release of `ll`: six targets, two Debian
packages, cargo-zigbuild for cross compilation and clippy in pedantic mode as
the quality gate. A config file only needs to list what differs.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from shipwright.release.targets import DEB_ARCHITECTURES, DEFAULT_TARGETS, is_linux


class GlobalConfig(BaseModel):
    """Cross-cutting settings: schema version and observability."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        default="1.0.0",
        description="Schema version for compatibility tracking, e.g. '1.0.0'",
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return upper


class ReleaseSettings(BaseModel):
    """
    Everything the release pipeline needs besides the version, which always
    comes from Cargo.toml.

    Paths are relative to `project_root` unless absolute.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    project_root: str = Field(default=".", description="Directory holding Cargo.toml")
    binary_name: Optional[str] = Field(
        default=None,
        description="Name of the produced binary; defaults to the Cargo package name",
    )
    build_root: str = Field(
        default="build",
        description="Top-level build workspace, wiped at the start of every run",
    )
    target_root: str = Field(
        default="target",
        description="Cargo's build output directory",
    )
    targets: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TARGETS),
        description="Target triples, built strictly in this order",
    )
    deb_targets: dict[str, str] = Field(
        default_factory=lambda: dict(DEB_ARCHITECTURES),
        description="Linux triple → Debian architecture name, packaged in this order",
    )
    build_command: list[str] = Field(
        default_factory=lambda: ["cargo", "zigbuild"],
        description="Cross-compilation command; --target/--release/--quiet are appended",
    )
    lint_command: list[str] = Field(
        default_factory=lambda: [
            "cargo",
            "clippy",
            "--quiet",
            "--",
            "-Dwarnings",
            "-Dclippy::all",
            "-Dclippy::pedantic",
        ],
        description="Static analysis command; any non-zero exit aborts the release",
    )
    deb_command: list[str] = Field(
        default_factory=lambda: ["dpkg-deb", "--build", "--root-owner-group"],
        description="Native package builder; the staging directory is appended",
    )
    sdk_root: Optional[str] = Field(
        default=None,
        description="SDKROOT handed to builds; falls back to the inherited environment",
    )
    maintainer: str = Field(default="Nando Vieira <me@fnando.com>")
    description: str = Field(
        default="A prettier terminal's ls command, with color and nerdfonts.com icons."
    )
    write_checksums: bool = Field(
        default=True,
        description="Write SHA256SUMS next to the artifacts",
    )

    @field_validator("targets")
    @classmethod
    def _check_targets(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("At least one target is required")
        if any(not triple.strip() for triple in value):
            raise ValueError("Target triples must be non-empty strings")
        duplicates = sorted({t for t in value if value.count(t) > 1})
        if duplicates:
            raise ValueError(f"Duplicate targets: {', '.join(duplicates)}")
        return value

    @field_validator("build_command", "lint_command", "deb_command")
    @classmethod
    def _check_command(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("Command must contain at least the executable")
        return value

    @model_validator(mode="after")
    def _check_deb_targets(self) -> "ReleaseSettings":
        for triple, architecture in self.deb_targets.items():
            if triple not in self.targets:
                raise ValueError(f"Deb target {triple} is not in the build target list")
            if not is_linux(triple):
                raise ValueError(f"Deb target {triple} is not a Linux target")
            if not architecture:
                raise ValueError(f"Deb target {triple} has an empty architecture")
        return self


class ShipwrightConfig(BaseModel):
    """
    Top-level config container.

    Both sections are optional in the YAML file; a missing section takes its
    defaults.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    release: ReleaseSettings = Field(default_factory=ReleaseSettings)
