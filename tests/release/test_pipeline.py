# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
End-to-end tests for the release pipeline with a fake toolchain.
"""

import subprocess
import tarfile
from pathlib import Path

import pytest

from shipwright.config.schema import ReleaseSettings
from shipwright.release.checksums import verify_checksums
from shipwright.release.errors import BuildError, ConfigurationError, LintFailure, PackagingError
from shipwright.release.pipeline import plan_release, run_release
from shipwright.release.targets import DEFAULT_TARGETS

EXPECTED_ARCHIVES = sorted(f"ll-{t}.tar.gz" for t in DEFAULT_TARGETS)
EXPECTED_PACKAGES = [
    "ll-aarch64-unknown-linux-gnu-0.0.1.deb",
    "ll-x86_64-unknown-linux-gnu-0.0.1.deb",
]


class TestFullRelease:
    def test_bundle_contents(self, cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
        result = run_release(cargo_project, ReleaseSettings())

        bundle = cargo_project / "build" / "v0.0.1"
        assert result.bundle_dir == bundle
        assert result.version == "0.0.1"

        names = sorted(p.name for p in bundle.iterdir())
        assert sorted(n for n in names if n.endswith(".tar.gz")) == EXPECTED_ARCHIVES
        assert sorted(n for n in names if n.endswith(".deb")) == EXPECTED_PACKAGES
        assert names == sorted(EXPECTED_ARCHIVES + EXPECTED_PACKAGES + ["SHA256SUMS"])

    def test_steps_run_in_order(self, cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
        run_release(cargo_project, ReleaseSettings())

        tools = [call[1] if call[0] == "cargo" else call[0] for call in fake_toolchain.calls]
        assert tools == ["clippy"] + ["zigbuild"] * 6 + ["dpkg-deb"] * 2
        assert fake_toolchain.built_targets == list(DEFAULT_TARGETS)

    def test_packaged_binary_names(self, cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
        result = run_release(cargo_project, ReleaseSettings())

        for archive_path in result.archives:
            with tarfile.open(archive_path, "r:gz") as tar:
                expected = "ll.exe" if "windows" in archive_path.name else "ll"
                assert tar.getnames() == [expected]

    def test_deb_architectures(self, cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
        result = run_release(cargo_project, ReleaseSettings())

        by_name = {p.name: p.read_text() for p in result.packages}
        assert "Architecture: arm64" in by_name["ll-aarch64-unknown-linux-gnu-0.0.1.deb"]
        assert "Architecture: amd64" in by_name["ll-x86_64-unknown-linux-gnu-0.0.1.deb"]

    def test_checksums_verify(self, cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
        result = run_release(cargo_project, ReleaseSettings())
        assert result.checksum_file is not None
        assert verify_checksums(result.bundle_dir).checked_count == 8

    def test_checksums_can_be_disabled(self, cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
        result = run_release(cargo_project, ReleaseSettings(write_checksums=False))
        assert result.checksum_file is None
        assert not (result.bundle_dir / "SHA256SUMS").exists()

    def test_rerun_replaces_previous_bundle(self, cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
        stale = cargo_project / "build" / "v0.0.0"
        stale.mkdir(parents=True)
        (stale / "ll-old.tar.gz").write_bytes(b"old")

        first = run_release(cargo_project, ReleaseSettings())
        second = run_release(cargo_project, ReleaseSettings())

        assert [p.name for p in (cargo_project / "build").iterdir()] == ["v0.0.1"]
        assert first.archives == second.archives

    def test_version_is_read_once(self, cargo_project: Path, fake_toolchain, monkeypatch) -> None:  # type: ignore[no-untyped-def]
        manifest = cargo_project / "Cargo.toml"
        original_call = fake_toolchain.__call__

        def bump_version_on_first_build(command, **kwargs):  # type: ignore[no-untyped-def]
            if "zigbuild" in command and "9.9.9" not in manifest.read_text():
                manifest.write_text('[package]\nname = "ll"\nversion = "9.9.9"\n')
            return original_call(command, **kwargs)

        monkeypatch.setattr(subprocess, "run", bump_version_on_first_build)

        result = run_release(cargo_project, ReleaseSettings())

        assert result.version == "0.0.1"
        assert sorted(p.name for p in result.packages) == EXPECTED_PACKAGES
        assert not (cargo_project / "build" / "v9.9.9").exists()


class TestFailures:
    def test_missing_manifest_runs_nothing(self, tmp_path: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(ConfigurationError):
            run_release(tmp_path, ReleaseSettings())
        assert fake_toolchain.calls == []
        assert not (tmp_path / "build").exists()

    def test_lint_failure_writes_nothing(self, cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
        fake_toolchain.lint_exit_code = 1

        with pytest.raises(LintFailure):
            run_release(cargo_project, ReleaseSettings())

        assert not (cargo_project / "build").exists()
        assert fake_toolchain.built_targets == []

    def test_third_build_failure_halts(self, cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
        fake_toolchain.failing_target = DEFAULT_TARGETS[2]

        with pytest.raises(BuildError) as excinfo:
            run_release(cargo_project, ReleaseSettings())

        assert excinfo.value.target == DEFAULT_TARGETS[2]
        assert fake_toolchain.built_targets == list(DEFAULT_TARGETS[:3])
        assert list((cargo_project / "build" / "v0.0.1").iterdir()) == []

    def test_packaging_failure_keeps_partial_bundle(self, cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
        fake_toolchain.failing_deb = True

        with pytest.raises(PackagingError):
            run_release(cargo_project, ReleaseSettings())

        bundle = cargo_project / "build" / "v0.0.1"
        names = sorted(p.name for p in bundle.iterdir())
        assert names == EXPECTED_ARCHIVES
        # The first failing package stops the run.
        assert sum(1 for call in fake_toolchain.calls if call[0] == "dpkg-deb") == 1


class TestDryRun:
    def test_dry_run_touches_nothing(self, cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
        result = run_release(cargo_project, ReleaseSettings(), dry_run=True)

        assert result.dry_run
        assert result.version == "0.0.1"
        assert fake_toolchain.calls == []
        assert not (cargo_project / "build").exists()

    def test_plan_lists_every_artifact(self, cargo_project: Path) -> None:
        plan = plan_release(cargo_project, ReleaseSettings())

        assert plan.bundle_dir == cargo_project / "build" / "v0.0.1"
        assert sorted(p.name for p in plan.archive_paths) == EXPECTED_ARCHIVES
        assert [p.name for p in plan.package_paths] == EXPECTED_PACKAGES

    def test_binary_name_override(self, cargo_project: Path) -> None:
        plan = plan_release(cargo_project, ReleaseSettings(binary_name="lsd"))
        assert plan.binary_name == "lsd"
        assert plan.archive_paths[0].name == "lsd-x86_64-pc-windows-gnu.tar.gz"


@pytest.mark.parametrize("build_root", ["..", ".", "/"])
def test_build_root_must_be_inside_project(cargo_project: Path, build_root: str) -> None:
    with pytest.raises(ConfigurationError, match="Build root"):
        plan_release(cargo_project, ReleaseSettings(build_root=build_root))
