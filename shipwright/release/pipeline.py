# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The release pipeline, end to end.

    resolve version → quality gate → prepare bundle → build all targets
        → archive each target → Debian packages → SHA256SUMS

One process, one thread, one step at a time. The version is read once and
passed to every later step. Any failure propagates as a ReleaseError and
ends the run:

  - ConfigurationError / LintFailure happen before anything is written.
  - BuildError stops at the failing target; earlier binaries stay in
    cargo's target directory, the bundle holds no archives yet.
  - PackagingError stops at the failing artifact. Whatever was already
    packaged stays in build/v<version>/ for inspection and is wiped by the
    next run.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from shipwright.config.schema import ReleaseSettings
from shipwright.logging.logger import get_logger
from shipwright.release.archive import archive
from shipwright.release.builder import build_all, build_command
from shipwright.release.checksums import generate_checksums, write_checksum_file
from shipwright.release.debian import package_deb
from shipwright.release.errors import ConfigurationError
from shipwright.release.output import bundle_dir, prepare_output_root
from shipwright.release.quality_gate import run_quality_gate
from shipwright.release.targets import Target, archive_name, deb_name
from shipwright.release.version import resolve_package_name, resolve_version
from shipwright.utils.paths import resolve_under, validate_path_within_project

_logger: logging.Logger = get_logger(__name__)


@dataclass(frozen=True)
class ReleasePlan:
    """Everything a run will produce, worked out before any tool runs."""

    version: str
    binary_name: str
    project_root: Path
    build_root: Path
    target_root: Path
    bundle_dir: Path
    targets: tuple[Target, ...]
    deb_targets: tuple[tuple[str, str], ...]

    @property
    def archive_paths(self) -> list[Path]:
        return [self.bundle_dir / archive_name(t.triple, self.binary_name) for t in self.targets]

    @property
    def package_paths(self) -> list[Path]:
        return [
            self.bundle_dir / deb_name(triple, self.binary_name, self.version)
            for triple, _ in self.deb_targets
        ]


@dataclass(frozen=True)
class ReleaseResult:
    """Outcome of a completed run."""

    version: str
    bundle_dir: Path
    archives: list[Path] = field(default_factory=list)
    packages: list[Path] = field(default_factory=list)
    checksum_file: Optional[Path] = None
    dry_run: bool = False


def plan_release(project_root: Path, settings: ReleaseSettings) -> ReleasePlan:
    """
    Resolve the version and every output path.

    Raises:
        ConfigurationError: If Cargo.toml can't provide the version (or the
            package name, when no binary name is configured), or the build
            root points outside the project.
    """
    version = resolve_version(project_root)
    name = settings.binary_name or resolve_package_name(project_root)
    build_root = resolve_under(project_root, settings.build_root)
    try:
        validate_path_within_project(build_root, project_root)
    except ValueError as err:
        raise ConfigurationError(f"Build root must live inside the project: {err}") from err
    if build_root.resolve() == project_root.resolve():
        raise ConfigurationError("Build root cannot be the project root itself")

    return ReleasePlan(
        version=version,
        binary_name=name,
        project_root=project_root,
        build_root=build_root,
        target_root=resolve_under(project_root, settings.target_root),
        bundle_dir=bundle_dir(build_root, version),
        targets=tuple(Target(triple) for triple in settings.targets),
        deb_targets=tuple(settings.deb_targets.items()),
    )


def run_release(
    project_root: Path,
    settings: ReleaseSettings,
    dry_run: bool = False,
) -> ReleaseResult:
    """
    Run the full release for the project at project_root.

    With dry_run, only the plan is resolved and logged; no tool runs and the
    filesystem is not touched.

    Raises:
        ConfigurationError, LintFailure, BuildError, PackagingError
    """
    plan = plan_release(project_root, settings)

    _logger.info(
        "Starting release",
        extra={
            "version": plan.version,
            "binary": plan.binary_name,
            "targets": [t.triple for t in plan.targets],
            "bundle_dir": str(plan.bundle_dir),
            "dry_run": dry_run,
        },
    )

    if dry_run:
        for target in plan.targets:
            _logger.info(
                "Dry run: would build",
                extra={
                    "target": target.triple,
                    "command": " ".join(build_command(settings.build_command, target.triple)),
                },
            )
        _logger.info(
            "Dry run: would write",
            extra={
                "archives": [p.name for p in plan.archive_paths],
                "packages": [p.name for p in plan.package_paths],
            },
        )
        return ReleaseResult(version=plan.version, bundle_dir=plan.bundle_dir, dry_run=True)

    run_quality_gate(project_root, settings.lint_command)

    output_dir = prepare_output_root(plan.build_root, plan.version, project_root)

    built = build_all(
        plan.targets,
        project_root,
        plan.target_root,
        plan.binary_name,
        base_command=settings.build_command,
        sdk_root=settings.sdk_root,
    )

    archives = [
        archive(item.target.triple, item.binary, plan.version, output_dir, plan.binary_name)
        for item in built
    ]

    packages = [
        package_deb(
            triple,
            architecture,
            plan.version,
            output_dir,
            plan.target_root,
            plan.binary_name,
            settings.maintainer,
            settings.description,
            command=settings.deb_command,
        )
        for triple, architecture in plan.deb_targets
    ]

    checksum_file = None
    if settings.write_checksums:
        checksum_file = write_checksum_file(output_dir, generate_checksums(output_dir))

    _logger.info(
        "Release complete",
        extra={
            "version": plan.version,
            "bundle_dir": str(output_dir),
            "archives": len(archives),
            "packages": len(packages),
        },
    )

    return ReleaseResult(
        version=plan.version,
        bundle_dir=output_dir,
        archives=archives,
        packages=packages,
        checksum_file=checksum_file,
    )
