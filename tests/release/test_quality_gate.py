# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the clippy quality gate.
"""

from pathlib import Path

import pytest

from shipwright.config.schema import ReleaseSettings
from shipwright.release.errors import LintFailure
from shipwright.release.quality_gate import run_quality_gate


def test_passes_on_zero_exit(cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
    run_quality_gate(cargo_project, ReleaseSettings().lint_command)
    assert fake_toolchain.calls == [
        ["cargo", "clippy", "--quiet", "--", "-Dwarnings", "-Dclippy::all", "-Dclippy::pedantic"]
    ]


def test_any_finding_raises(cargo_project: Path, fake_toolchain) -> None:  # type: ignore[no-untyped-def]
    fake_toolchain.lint_exit_code = 101
    with pytest.raises(LintFailure) as excinfo:
        run_quality_gate(cargo_project, ReleaseSettings().lint_command)

    assert excinfo.value.exit_code == 101
    assert "needless borrow" in excinfo.value.output


def test_missing_tool_raises(cargo_project: Path) -> None:
    with pytest.raises(LintFailure, match="not found"):
        run_quality_gate(cargo_project, ["shipwright-no-such-linter-binary"])
