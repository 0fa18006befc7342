# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
One-time setup before any command does real work:
  1. Validate the interpreter
  2. Apply the configured log level and optional log file
  3. Log what we're running on
"""

from pathlib import Path
from typing import Optional

from shipwright.config.schema import GlobalConfig
from shipwright.logging.logger import configure_package_logging, get_logger
from shipwright.release.environment import check_python_version, get_host_info


def bootstrap(config: GlobalConfig, log_level: Optional[str] = None) -> None:
    """
    Put the process into a known state.

    Args:
        config: The validated global configuration.
        log_level: Command-line override for config.log_level.

    Raises:
        RuntimeError: If the interpreter is older than the supported floor.
    """
    python_check = check_python_version()
    if not python_check.passed:
        raise RuntimeError(python_check.message)

    level = log_level or config.log_level
    log_file = Path(config.log_file) if config.log_file is not None else None
    configure_package_logging(level, log_file)

    logger = get_logger("shipwright.runtime", log_level=level, log_file=log_file)

    host = get_host_info()
    logger.debug(
        "Bootstrap complete",
        extra={
            "python_version": host.python_version,
            "platform": host.platform,
            "architecture": host.architecture,
        },
    )
