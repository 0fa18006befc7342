# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Path helpers.

Config paths are relative to the project root, directory creation is always
explicit, and nothing the pipeline writes may land outside the project.
"""

from pathlib import Path


def resolve_under(project_root: Path, configured: str) -> Path:
    """Interpret a configured path relative to the project root unless it is absolute."""
    path = Path(configured)
    if path.is_absolute():
        return path
    return project_root / path


def ensure_directory(path: Path) -> Path:
    """
    Create a directory (and parents) if it doesn't exist. Returns the path for chaining.

    Args:
        path: Directory path to create.

    Returns:
        The same path, now guaranteed to exist.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def validate_path_within_project(target: Path, project_root: Path) -> Path:
    """
    Make sure a path doesn't escape the project directory.

    Both paths are resolved before comparing, so `../..` tricks and symlinks
    pointing elsewhere get caught.

    Returns:
        The resolved absolute path if it's safe.

    Raises:
        ValueError: If the path escapes the project root.
    """
    resolved_target = target.resolve()
    resolved_root = project_root.resolve()

    if resolved_target != resolved_root and resolved_root not in resolved_target.parents:
        raise ValueError(
            f"Path '{target}' resolves to '{resolved_target}' which is outside "
            f"the project root '{resolved_root}'. This is not allowed."
        )

    return resolved_target
