"""Plugin file discovery."""

import logging
from pathlib import Path

from crossplug.utils import safe_access

logger = logging.getLogger(__name__)

# Directories whose contents are never plugin components.
EXCLUDED_DIRECTORIES = frozenset({".git", ".claude-plugin"})

# Repository boilerplate at the plugin root, matched case-insensitively.
EXCLUDED_FILES = frozenset({"readme.md", "license.md"})


def list_plugin_files(plugin_dir: Path) -> list[Path]:
    """List every regular file of a plugin that may hold a component.

    Symlinks resolving outside the plugin directory are dropped.

    Args:
        plugin_dir: Root directory of the plugin

    Returns:
        Sorted canonical file paths
    """
    root = safe_access.resolve(plugin_dir)
    files: list[Path] = []

    for path in safe_access.glob(root, "**/*"):
        if not path.is_file():
            continue
        relative = path.relative_to(root)
        if EXCLUDED_DIRECTORIES.intersection(relative.parts[:-1]):
            continue
        if len(relative.parts) == 1 and path.name.lower() in EXCLUDED_FILES:
            continue
        files.append(path)

    logger.debug("Found %d plugin file(s) under %s", len(files), root)
    return files
