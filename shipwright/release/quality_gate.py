# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Pre-build quality gate.

Runs clippy with every lint class promoted to an error. A single finding
stops the release before the build workspace is touched, so a rejected run
leaves nothing behind.
"""

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from shipwright.logging.logger import get_logger
from shipwright.release.errors import LintFailure

_logger: logging.Logger = get_logger(__name__)


def run_quality_gate(project_root: Path, command: Sequence[str]) -> None:
    """
    Run the static-analysis command in the project root.

    Raises:
        LintFailure: If the command exits non-zero or cannot be started.
    """
    _logger.info("Running quality gate", extra={"command": " ".join(command)})

    try:
        result = subprocess.run(
            list(command),
            capture_output=True,
            text=True,
            cwd=str(project_root),
        )
    except FileNotFoundError as err:
        _logger.error("Lint tool not found", extra={"executable": command[0]})
        raise LintFailure(f"{command[0]} executable not found") from err

    if result.returncode != 0:
        output = (result.stdout or "") + (result.stderr or "")
        _logger.error(
            "Quality gate failed",
            extra={"exit_code": result.returncode, "output": output.strip()},
        )
        raise LintFailure(
            f"Static analysis failed with exit code {result.returncode}",
            exit_code=result.returncode,
            output=output,
        )

    _logger.info("Quality gate passed")
