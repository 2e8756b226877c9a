"""Filesystem primitives for Crossplug.

These helpers operate on paths that have already been validated by
:mod:`crossplug.utils.safe_access`. Callers handling plugin-origin paths
should go through that module rather than calling these directly.
"""

import os
import shutil
import stat
import tempfile
from pathlib import Path, PurePosixPath

EXECUTABLE_MODE = 0o755


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def copy_file(src: Path, dest: Path, executable: bool = False) -> Path:
    """Copy a file byte-for-byte to a destination file path.

    Args:
        src: Source file path
        dest: Destination file path
        executable: If True, mark the copy as executable (0o755)

    Returns:
        Path to the copied file
    """
    ensure_directory(dest.parent)
    shutil.copyfile(src, dest)
    if executable:
        make_executable(dest)
    return dest


def make_executable(path: Path) -> None:
    """Set 0o755 permissions on a file."""
    path.chmod(EXECUTABLE_MODE)


def is_executable(path: Path) -> bool:
    """Check whether the owner execute bit is set on a file."""
    return bool(path.stat().st_mode & stat.S_IXUSR)


def write_text_file(path: Path, content: str) -> None:
    """Atomically write content to a text file.

    The content is written to a temporary file in the same directory and
    moved into place, so readers never observe a partially written file.

    Args:
        path: Path to the file
        content: Content to write
    """
    ensure_directory(path.parent)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp_path, path)
    except Exception:
        Path(tmp_path).unlink(missing_ok=True)
        raise


def read_text_file(path: Path) -> str:
    """Read a UTF-8 text file."""
    return path.read_text(encoding="utf-8")


def remove_file(path: Path) -> bool:
    """Remove a file.

    Args:
        path: File path to remove

    Returns:
        True if the file was removed, False if it didn't exist
    """
    if not path.is_file():
        return False
    path.unlink()
    return True


def remove_empty_parents(path: Path, stop_at: Path) -> list[Path]:
    """Remove empty directories upward from a deleted file's parent.

    Walks from ``path.parent`` toward ``stop_at`` (exclusive), removing each
    directory while it is empty.

    Args:
        path: Path of a file that was just removed
        stop_at: Directory that is never removed

    Returns:
        Directories that were removed, innermost first
    """
    removed: list[Path] = []
    current = path.parent
    while current != stop_at and current.is_relative_to(stop_at):
        if not current.is_dir() or any(current.iterdir()):
            break
        current.rmdir()
        removed.append(current)
        current = current.parent
    return removed


def to_record_path(path: Path, root: Path) -> str:
    """Express a path relative to a root using forward slashes.

    Args:
        path: Absolute path inside ``root``
        root: Root directory

    Returns:
        POSIX-style relative path string
    """
    return PurePosixPath(*path.relative_to(root).parts).as_posix()
