"""Removal of a recorded plugin adaptation."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from crossplug.config.schemas import InstallRecord
from crossplug.hooks.manifest import HookManifestStore
from crossplug.utils import safe_access
from crossplug.utils.filesystem import remove_empty_parents, remove_file

logger = logging.getLogger(__name__)


@dataclass
class UninstallResult:
    """Result of removing a recorded install."""

    removed: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    pruned_directories: list[str] = field(default_factory=list)
    hooks_changed: bool = False


def uninstall(record: InstallRecord, project_root: Path) -> UninstallResult:
    """Delete the files an adaptation created and remove its hook entries.

    The shared ``.cursor/hooks.json`` is never deleted directly; only the
    entries this plugin contributed are removed from it (and the file goes
    away once it has no hooks left).

    Args:
        record: The install record returned by the adaptation
        project_root: The workspace the plugin was adapted into

    Returns:
        UninstallResult describing what was removed

    Raises:
        PathTraversalError: If a recorded path points outside the project
    """
    project_root = project_root.resolve()
    store = HookManifestStore(project_root)
    base_dir = project_root / HookManifestStore.MANIFEST_DIR
    result = UninstallResult()

    for rel_path in record.files:
        if rel_path == store.relative_path:
            continue

        file_path = safe_access.safe_join(project_root, rel_path)
        if not remove_file(file_path):
            logger.debug("Already gone: %s", rel_path)
            result.missing.append(rel_path)
            continue

        logger.info("Removed: %s", rel_path)
        result.removed.append(rel_path)
        for directory in remove_empty_parents(file_path, stop_at=base_dir):
            result.pruned_directories.append(directory.relative_to(project_root).as_posix())

    if record.hooks:
        result.hooks_changed = store.remove(record.hooks)

    return result
