# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Release pipeline for shipwright.

Version resolution, the clippy quality gate, sequential cross-compilation,
tarball and Debian packaging, and bundle checksums. Everything writes into
a single versioned directory, build/v<version>/, which is the hand-off to the
manual upload and formula-update steps.
"""
