"""Hook adapter.

Translates a plugin's hooks.json into entries of the project-wide
``.cursor/hooks.json``. Scripts referenced through ``${CLAUDE_PLUGIN_ROOT}``
are copied to .cursor/hooks/crossplug/<marketplace>/<plugin>/ and the
commands rewritten to point there.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from crossplug.adapters import register_adapter
from crossplug.adapters.base import ComponentAdapter
from crossplug.adapters.command import PLUGIN_ROOT_TOKEN, find_script_references
from crossplug.config.schemas import (
    AdapterOutput,
    ComponentCluster,
    ComponentKind,
    HookEntry,
    HookEventMap,
    HookSourceDocument,
)
from crossplug.hooks import events
from crossplug.hooks.manifest import HookManifestStore
from crossplug.utils import safe_access
from crossplug.utils.safe_access import PathTraversalError

logger = logging.getLogger(__name__)

HOOKS_DIRECTORY = "hooks"


@register_adapter("hook-manifest")
class HookAdapter(ComponentAdapter):
    """Adapter for hook definition documents."""

    @property
    def kind(self) -> ComponentKind:
        return "hook-manifest"

    def hook_root(self) -> Path:
        """The plugin's hook script directory."""
        return self.namespaced(self.get_hooks_directory())

    def adapt(self, cluster: ComponentCluster) -> AdapterOutput:
        output = AdapterOutput()

        document = None
        hooks_file = None
        for candidate in cluster.files:
            document = self.load_document(Path(candidate), output)
            if document is not None:
                hooks_file = Path(candidate)
                break

        if document is None or hooks_file is None:
            return output

        skipped = [str(f) for f in cluster.files if Path(f) != hooks_file]
        if skipped:
            logger.debug("Using %s; ignoring other hook documents: %s", hooks_file, ", ".join(skipped))

        translated, scripts = self.translate(document, hooks_file, output)
        if not translated:
            logger.info("No translatable hooks in %s", hooks_file.name)
            return output

        store = HookManifestStore(self.project_root)
        store.merge(translated)

        output.files.append(store.relative_path)
        output.files.extend(scripts)
        output.hooks = translated
        return output

    def load_document(self, path: Path, output: AdapterOutput) -> HookSourceDocument | None:
        """Parse a hooks document, returning None (with a warning) when invalid."""
        text = self.read_source_or_warn(path, output)
        if text is None:
            return None

        try:
            data = json.loads(text)
            return HookSourceDocument.model_validate(data)
        except json.JSONDecodeError as e:
            message = f"Invalid JSON in {path.name}: {e}"
        except ValidationError as e:
            message = f"Unexpected hook document shape in {path.name}: {e.error_count()} error(s)"

        logger.warning(message)
        output.warnings.append(message)
        return None

    # =========================================================================
    # Translation
    # =========================================================================

    def translate(
        self,
        document: HookSourceDocument,
        hooks_file: Path,
        output: AdapterOutput,
    ) -> tuple[HookEventMap, list[str]]:
        """Translate source hooks into target events.

        Returns:
            Tuple of (translated hooks by target event, copied script record paths)
        """
        translated: HookEventMap = {}
        scripts: list[str] = []
        unsupported: list[str] = []
        prompt_hooks = 0
        source_root = self.source_root(hooks_file)

        for event, groups in document.hooks.items():
            if not events.is_supported(event):
                unsupported.append(event)
                continue
            if event not in events.EVENT_MAP:
                logger.debug("Unknown hook event %s, using %s", event, events.DEFAULT_EVENT)

            for group in groups:
                target_event = events.resolve_target_event(event, group.matcher)

                for hook in group.hooks:
                    if hook.type == "prompt":
                        prompt_hooks += 1
                        continue
                    if hook.type != "command" or not hook.command:
                        logger.debug("Skipping %s hook without a command on %s", hook.type, event)
                        continue

                    command = self.relocate_command(hook.command, source_root, scripts, output)
                    bucket = translated.setdefault(target_event, [])
                    if any(entry.command == command for entry in bucket):
                        continue
                    if hook.timeout is None:
                        bucket.append(HookEntry(command=command))
                    else:
                        bucket.append(HookEntry(command=command, timeout=hook.timeout))

        if unsupported:
            message = (
                f"Skipped hooks for events Cursor does not support: {', '.join(unsupported)}"
            )
            logger.warning(message)
            output.warnings.append(message)

        if prompt_hooks:
            message = (
                f"Skipped {prompt_hooks} prompt-based hook(s); "
                "Cursor cannot evaluate prompts as hooks"
            )
            logger.warning(message)
            output.warnings.append(message)

        return translated, scripts

    @staticmethod
    def source_root(hooks_file: Path) -> Path:
        """The plugin root a hooks document's script references resolve from.

        A document inside the conventional ``hooks/`` directory resolves
        from that directory's parent.
        """
        directory = Path(hooks_file).parent
        if directory.name == HOOKS_DIRECTORY:
            return directory.parent
        return directory

    def relocate_command(
        self,
        command: str,
        source_root: Path,
        scripts: list[str],
        output: AdapterOutput,
    ) -> str:
        """Copy scripts a command references and rewrite its token prefix.

        If any referenced script is missing or escapes the plugin root,
        nothing is copied and the command is returned unmodified.
        """
        if PLUGIN_ROOT_TOKEN not in command:
            return command

        found: list[tuple[str, Path]] = []
        missing: list[str] = []
        for reference in find_script_references(command):
            try:
                safe_access.validate_relative_path(reference)
                script = safe_access.safe_join(source_root, reference)
            except PathTraversalError as e:
                message = f"Unsafe hook script reference {reference}: {e}; leaving command unchanged: {command}"
                logger.warning(message)
                output.warnings.append(message)
                return command
            if self.source_exists(script):
                found.append((reference, script))
            else:
                missing.append(reference)

        if missing:
            message = (
                f"Hook script(s) not found: {', '.join(missing)}; "
                f"leaving command unchanged: {command}"
            )
            logger.warning(message)
            output.warnings.append(message)
            return command

        for reference, script in found:
            dest = self.namespaced(self.get_hooks_directory(), *Path(reference).parts)
            record = self.copy_output(script, dest)
            if record not in scripts:
                scripts.append(record)

        return command.replace(PLUGIN_ROOT_TOKEN, self.relative(self.hook_root()))
