# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the release configuration file.

Kept separate so the CLI can catch config failures without importing the
pydantic schema machinery.
"""


class ConfigError(Exception):
    """Base for all release-config errors."""


class ConfigLoadError(ConfigError):
    """Raised when a config file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when a config file parses fine but fails schema validation.
    This covers missing required fields, type mismatches, unknown keys and
    cross-field problems such as a deb target that is not being built.
    """
