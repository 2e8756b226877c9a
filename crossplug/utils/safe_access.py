"""Path containment checks for every plugin file operation.

Every read, write, glob, or existence check on a plugin-origin path goes
through this module. Paths are canonicalized (symlinks and ``.``/``..``
resolved) and compared against a base directory; anything that lands outside
the base raises :class:`PathTraversalError`.

Strict operations (``resolve``, ``read_text``, ``write_text``, ``copy_file``,
``safe_join``) raise. Probe operations (``exists``, ``is_file``,
``dir_exists``, ``glob``) degrade to ``False`` or an empty list instead.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from crossplug.utils import filesystem

logger = logging.getLogger(__name__)

StrPath = str | os.PathLike[str]


class PathTraversalError(Exception):
    """A path resolves outside of its sanctioned base directory."""

    def __init__(self, message: str, path: StrPath | None = None):
        self.path = path
        super().__init__(message)


class SafeFileNotFoundError(FileNotFoundError):
    """A validated path does not exist or is not a regular file."""


def resolve(path: StrPath | None, base_dir: StrPath | None = None) -> Path:
    """Canonicalize a path and verify it stays within ``base_dir``.

    Args:
        path: The path to validate (relative paths resolve against the cwd)
        base_dir: Optional directory the path must equal or descend from

    Returns:
        The canonical absolute path

    Raises:
        PathTraversalError: If the path is empty or escapes ``base_dir``
    """
    if path is None or str(path) == "":
        raise PathTraversalError("Empty path", path)

    resolved = Path(path).expanduser().resolve()

    if base_dir is not None:
        base = Path(base_dir).expanduser().resolve()
        if not resolved.is_relative_to(base):
            raise PathTraversalError(f"Path escapes base directory {base}: {path}", path)

    return resolved


def safe_join(base: StrPath, *parts: StrPath) -> Path:
    """Join path components onto ``base`` and re-validate the result.

    Catches ``..`` segments and absolute components smuggled through
    ``parts`` before they can point outside ``base``.

    Raises:
        PathTraversalError: If the joined path escapes ``base``
    """
    joined = Path(base).joinpath(*parts)
    return resolve(joined, base_dir=base)


def validate_relative_path(path: str) -> str:
    """Validate a relative path component such as a script reference.

    Raises:
        PathTraversalError: If the path is absolute or contains ``..``
    """
    if not path:
        raise PathTraversalError("Empty relative path", path)
    if path.startswith("/") or Path(path).is_absolute():
        raise PathTraversalError(f"Relative path cannot be absolute: {path}", path)
    if ".." in Path(path).parts:
        raise PathTraversalError(f"Relative path contains traversal sequence: {path}", path)
    return path


def validate_name(name: str) -> str:
    """Validate a name used as a single directory component.

    Raises:
        PathTraversalError: If the name is empty, ``.``/``..``, or contains a separator
    """
    if not name or name in (".", "..") or "/" in name or "\\" in name or "\0" in name:
        raise PathTraversalError(f"Invalid path component: {name!r}", name)
    return name


def read_text(path: StrPath, base_dir: StrPath | None = None) -> str:
    """Read a UTF-8 text file after validating its location.

    Raises:
        PathTraversalError: If the path escapes ``base_dir``
        SafeFileNotFoundError: If the path is missing or not a regular file
    """
    safe_path = resolve(path, base_dir)
    if not safe_path.exists():
        raise SafeFileNotFoundError(f"File not found: {path}")
    if not safe_path.is_file():
        raise SafeFileNotFoundError(f"Path is not a regular file: {path}")
    return filesystem.read_text_file(safe_path)


def write_text(path: StrPath, content: str, base_dir: StrPath) -> Path:
    """Write a text file, creating parent directories inside ``base_dir``.

    Returns:
        The canonical path written

    Raises:
        PathTraversalError: If the path escapes ``base_dir``
    """
    safe_path = resolve(path, base_dir)
    filesystem.write_text_file(safe_path, content)
    return safe_path


def copy_file(
    src: StrPath,
    dest: StrPath,
    *,
    dest_base: StrPath,
    src_base: StrPath | None = None,
    executable: bool = False,
) -> Path:
    """Copy a file byte-for-byte with both ends validated.

    Args:
        src: Source file
        dest: Destination file
        dest_base: Directory the destination must stay within
        src_base: Optional directory the source must stay within
        executable: Mark the copy executable

    Returns:
        The canonical destination path

    Raises:
        PathTraversalError: If either path escapes its base
        SafeFileNotFoundError: If the source is missing or not a regular file
    """
    safe_src = resolve(src, src_base)
    if not safe_src.is_file():
        raise SafeFileNotFoundError(f"File not found: {src}")
    safe_dest = resolve(dest, dest_base)
    return filesystem.copy_file(safe_src, safe_dest, executable=executable)


def exists(path: StrPath, base_dir: StrPath | None = None) -> bool:
    """Check existence, returning False for paths outside ``base_dir``."""
    try:
        return resolve(path, base_dir).exists()
    except PathTraversalError:
        return False


def is_file(path: StrPath, base_dir: StrPath | None = None) -> bool:
    """Check for a regular file, returning False for paths outside ``base_dir``."""
    try:
        return resolve(path, base_dir).is_file()
    except PathTraversalError:
        return False


def dir_exists(path: StrPath, base_dir: StrPath | None = None) -> bool:
    """Check for a directory, returning False for paths outside ``base_dir``."""
    try:
        return resolve(path, base_dir).is_dir()
    except PathTraversalError:
        return False


def glob(base: StrPath, pattern: str, base_dir: StrPath | None = None) -> list[Path]:
    """Glob under ``base``, dropping any match that resolves outside it.

    Args:
        base: Directory to glob from
        pattern: Glob pattern relative to ``base`` (``**`` supported)
        base_dir: Optional outer directory ``base`` itself must stay within

    Returns:
        Sorted canonical paths of the matches; empty if ``base`` is unsafe
    """
    try:
        root = resolve(base, base_dir)
    except PathTraversalError:
        logger.debug("Refusing to glob outside %s: %s", base_dir, base)
        return []

    if not root.is_dir():
        return []

    matches: list[Path] = []
    for candidate in root.glob(pattern):
        try:
            matches.append(resolve(candidate, root))
        except PathTraversalError:
            logger.debug("Skipping glob match outside %s: %s", root, candidate)
    return sorted(matches)
