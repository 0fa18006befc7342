# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
shipwright: multi-target release builds for Cargo projects.

One invocation lints the project, cross-compiles it for every configured
target, and lays out archives, Debian packages and checksums under
build/v<version>/.
"""

__version__ = "0.1.0"
