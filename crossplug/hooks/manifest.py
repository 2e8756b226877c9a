"""Target hook manifest store.

Cursor reads project hooks from ``.cursor/hooks.json``. The file is shared
by every installed plugin (and by hand-written hooks), so it is only ever
changed through read-modify-write transactions that touch entries by their
``command`` string:

    {"version": 1, "hooks": {"afterFileEdit": [{"command": "...", "timeout": 30}]}}
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from crossplug.config.schemas import HookEventMap, TargetHookManifest
from crossplug.utils import safe_access
from crossplug.utils.filesystem import remove_file

logger = logging.getLogger(__name__)


class HookManifestStore:
    """Reads and rewrites the project's ``.cursor/hooks.json``.

    Nothing is cached between calls; every operation loads the current file
    from disk, so sequential installs and uninstalls never act on stale state.
    """

    MANIFEST_DIR = ".cursor"
    MANIFEST_FILE = "hooks.json"

    def __init__(self, project_root: Path) -> None:
        """Initialize the store.

        Args:
            project_root: Path to the target workspace
        """
        self.project_root = project_root.resolve()

    @property
    def relative_path(self) -> str:
        """Manifest path relative to the project root."""
        return f"{self.MANIFEST_DIR}/{self.MANIFEST_FILE}"

    @property
    def path(self) -> Path:
        """Absolute manifest path, validated to stay in the project."""
        return safe_access.safe_join(self.project_root, self.MANIFEST_DIR, self.MANIFEST_FILE)

    def load(self) -> TargetHookManifest:
        """Load the manifest, treating a missing or malformed file as empty.

        Only unreadable JSON or a document that is not an object with a
        ``hooks`` object counts as malformed; individual foreign entries are
        never validated.
        """
        path = self.path
        if not path.is_file():
            return TargetHookManifest()

        try:
            data = json.loads(safe_access.read_text(path, self.project_root))
            return TargetHookManifest.model_validate(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Existing %s is malformed, starting fresh: %s", self.relative_path, e)
        except ValidationError as e:
            logger.warning("Existing %s has an unexpected shape, starting fresh: %s", self.relative_path, e)
        return TargetHookManifest()

    def save(self, manifest: TargetHookManifest) -> Path:
        """Write the manifest with ``version: 1`` in a single atomic write."""
        content = json.dumps(manifest.to_dict(), indent=2) + "\n"
        return safe_access.write_text(self.path, content, self.project_root)

    def merge(self, new_hooks: HookEventMap) -> TargetHookManifest:
        """Append new entries, skipping commands already present for the event.

        Args:
            new_hooks: Translated hooks keyed by Cursor event

        Returns:
            The manifest as written
        """
        manifest = self.load()

        for event, entries in new_hooks.items():
            existing = manifest.hooks.setdefault(event, [])
            if not isinstance(existing, list):
                logger.warning(
                    "Event %s in %s is not a list; leaving it unchanged", event, self.relative_path
                )
                continue
            for entry in entries:
                if any(_command_of(e) == entry.command for e in existing):
                    logger.debug("Hook already present for %s: %s", event, entry.command)
                    continue
                existing.append(entry.to_dict())

        self.save(manifest)
        logger.info("Merged hooks into %s", self.relative_path)
        return manifest

    def remove(self, installed_hooks: HookEventMap) -> bool:
        """Remove the entries one plugin contributed.

        Entries are matched by identical command string. Events this removal
        leaves empty are dropped, and the file is deleted once no hooks remain.

        Args:
            installed_hooks: The hooks map recorded when the plugin was adapted

        Returns:
            True if the manifest changed
        """
        path = self.path
        if not path.is_file():
            return False

        manifest = self.load()
        changed = False

        for event, entries in installed_hooks.items():
            current = manifest.hooks.get(event)
            if not isinstance(current, list):
                continue
            commands = {entry.command for entry in entries}
            kept = [e for e in current if _command_of(e) not in commands]
            if len(kept) == len(current):
                continue
            changed = True
            if kept:
                manifest.hooks[event] = kept
            else:
                del manifest.hooks[event]

        if not changed:
            return False

        if not manifest.hooks:
            remove_file(path)
            logger.info("Deleted %s (empty after plugin removal)", self.relative_path)
        else:
            self.save(manifest)
            logger.info("Updated %s (removed plugin hooks)", self.relative_path)
        return True


def _command_of(entry: Any) -> Any:
    """The command of a raw manifest entry, or None for foreign shapes."""
    return entry.get("command") if isinstance(entry, dict) else None
