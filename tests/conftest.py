# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for shipwright tests.

Neither cargo nor dpkg-deb is assumed to be installed. `fake_toolchain`
replaces subprocess.run with a stand-in that behaves like the real tools
on disk: builds drop a binary where cargo would, dpkg-deb drops a .deb
next to the staging directory.
"""

import subprocess
import textwrap
from pathlib import Path
from typing import Optional

import pytest


class FakeToolchain:
    """Records every command and imitates clippy, cargo-zigbuild and dpkg-deb."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.lint_exit_code = 0
        self.failing_target: Optional[str] = None
        self.failing_deb: bool = False
        self.skip_binary_for: Optional[str] = None
        self.envs: list[Optional[dict[str, str]]] = []

    @property
    def built_targets(self) -> list[str]:
        return [
            call[call.index("--target") + 1]
            for call in self.calls
            if "zigbuild" in call and "--target" in call
        ]

    def __call__(self, command, capture_output=False, text=False, cwd=None, env=None, **kwargs):  # type: ignore[no-untyped-def]
        command = list(command)
        self.calls.append(command)
        self.envs.append(env)
        cwd_path = Path(cwd) if cwd is not None else Path.cwd()

        if "clippy" in command:
            stderr = "warning: needless borrow\n" if self.lint_exit_code else ""
            return subprocess.CompletedProcess(command, self.lint_exit_code, "", stderr)

        if "zigbuild" in command:
            triple = command[command.index("--target") + 1]
            if triple == self.failing_target:
                return subprocess.CompletedProcess(command, 101, "", "error: linking failed\n")
            if triple != self.skip_binary_for:
                name = "ll.exe" if "windows" in triple else "ll"
                binary = cwd_path / "target" / triple / "release" / name
                binary.parent.mkdir(parents=True, exist_ok=True)
                binary.write_bytes(f"binary for {triple}".encode())
                binary.chmod(0o755)
            return subprocess.CompletedProcess(command, 0, "", "")

        if command[0] == "dpkg-deb":
            if self.failing_deb:
                return subprocess.CompletedProcess(command, 2, "", "dpkg-deb: error\n")
            staging = Path(command[-1])
            control = (staging / "DEBIAN" / "control").read_text(encoding="utf-8")
            staging.with_name(staging.name + ".deb").write_text(control, encoding="utf-8")
            return subprocess.CompletedProcess(command, 0, "", "")

        raise AssertionError(f"Unexpected command: {command}")


@pytest.fixture()
def fake_toolchain(monkeypatch: pytest.MonkeyPatch) -> FakeToolchain:
    toolchain = FakeToolchain()
    monkeypatch.setattr(subprocess, "run", toolchain)
    return toolchain


@pytest.fixture()
def cargo_project(tmp_path: Path) -> Path:
    """A project root with a minimal Cargo.toml at version 0.0.1."""
    project = tmp_path / "ll"
    project.mkdir()
    (project / "Cargo.toml").write_text(
        textwrap.dedent("""\
            [package]
            name = "ll"
            version = "0.0.1"
            edition = "2021"

            [dependencies]
            clap = { version = "4", features = ["derive"] }
        """),
        encoding="utf-8",
    )
    return project


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """A small valid release config."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          log_level: "DEBUG"
        release:
          targets:
            - x86_64-unknown-linux-gnu
          deb_targets:
            x86_64-unknown-linux-gnu: amd64
    """)
    config_file = tmp_path / "release.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
