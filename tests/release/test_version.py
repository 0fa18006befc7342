# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for version resolution from Cargo.toml.
"""

from pathlib import Path

import pytest

from shipwright.release.errors import ConfigurationError
from shipwright.release.version import resolve_package_name, resolve_version


def _write_manifest(root: Path, content: str) -> None:
    (root / "Cargo.toml").write_text(content, encoding="utf-8")


class TestResolveVersion:
    def test_returns_package_version(self, cargo_project: Path) -> None:
        assert resolve_version(cargo_project) == "0.0.1"

    @pytest.mark.parametrize("version", ["1.2.3", "0.10.0-beta.1", "2.0.0+build.7"])
    def test_returns_version_verbatim(self, tmp_path: Path, version: str) -> None:
        _write_manifest(tmp_path, f'[package]\nname = "ll"\nversion = "{version}"\n')
        assert resolve_version(tmp_path) == version

    def test_missing_manifest(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            resolve_version(tmp_path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        _write_manifest(tmp_path, "[package\nversion = ")
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            resolve_version(tmp_path)

    def test_non_utf8_manifest(self, tmp_path: Path) -> None:
        (tmp_path / "Cargo.toml").write_bytes(
            b'[package]\nname = "ll"\nversion = "0.0.1"\n# \xff\xfe\n'
        )
        with pytest.raises(ConfigurationError, match="UTF-8"):
            resolve_version(tmp_path)

    def test_missing_package_section(self, tmp_path: Path) -> None:
        _write_manifest(tmp_path, '[workspace]\nmembers = ["a"]\n')
        with pytest.raises(ConfigurationError, match=r"\[package\]"):
            resolve_version(tmp_path)

    def test_missing_version_field(self, tmp_path: Path) -> None:
        _write_manifest(tmp_path, '[package]\nname = "ll"\n')
        with pytest.raises(ConfigurationError, match="package.version"):
            resolve_version(tmp_path)

    def test_version_must_be_a_string(self, tmp_path: Path) -> None:
        _write_manifest(tmp_path, '[package]\nname = "ll"\nversion = 1\n')
        with pytest.raises(ConfigurationError):
            resolve_version(tmp_path)

    def test_empty_version_rejected(self, tmp_path: Path) -> None:
        _write_manifest(tmp_path, '[package]\nname = "ll"\nversion = ""\n')
        with pytest.raises(ConfigurationError):
            resolve_version(tmp_path)

    def test_does_not_modify_manifest(self, cargo_project: Path) -> None:
        before = (cargo_project / "Cargo.toml").read_bytes()
        resolve_version(cargo_project)
        assert (cargo_project / "Cargo.toml").read_bytes() == before
        assert sorted(p.name for p in cargo_project.iterdir()) == ["Cargo.toml"]


def test_resolve_package_name(cargo_project: Path) -> None:
    assert resolve_package_name(cargo_project) == "ll"
