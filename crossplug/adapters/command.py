"""Slash command adapter.

Claude Code commands become flat Cursor commands:
.cursor/commands/crossplug/<marketplace>/<plugin>/<name>.md

Commands may reference plugin scripts as ``${CLAUDE_PLUGIN_ROOT}/<path>``.
Each referenced script is located by searching upward from the command's
own directory, copied under the plugin's command directory with the same
relative path, and the placeholder is rewritten to that directory.
"""

import logging
import re
from pathlib import Path

from crossplug.adapters import register_adapter
from crossplug.adapters.base import ComponentAdapter
from crossplug.config.schemas import AdapterOutput, ComponentCluster, ComponentKind
from crossplug.utils import frontmatter
from crossplug.utils.safe_access import PathTraversalError, validate_relative_path

logger = logging.getLogger(__name__)

PLUGIN_ROOT_TOKEN = "${CLAUDE_PLUGIN_ROOT}"

# Token, optionally followed by "/<relative path>".
_TOKEN_REFERENCE = re.compile(re.escape(PLUGIN_ROOT_TOKEN) + r"(?:/([\w.\-/]+))?")

BASH_EXECUTION_MARKER = "!`"
BASH_EXECUTION_NOTE = (
    "\n**Note:** This command originally used Claude Code's `!` prefix for bash execution. "
    "Cursor does not support this feature. "
    "The bash commands are documented below for reference.\n"
)


def _normalize_reference(raw: str) -> str:
    # A sentence-ending period is not part of the path.
    return raw.rstrip(".").rstrip("/")


def find_script_references(text: str) -> list[str]:
    """Collect distinct relative paths referenced through the placeholder token.

    Returns:
        Relative paths in order of first appearance
    """
    references: list[str] = []
    for match in _TOKEN_REFERENCE.finditer(text):
        if not match.group(1):
            continue
        reference = _normalize_reference(match.group(1))
        if reference and reference not in references:
            references.append(reference)
    return references


@register_adapter("command")
class CommandAdapter(ComponentAdapter):
    """Adapter for slash commands."""

    @property
    def kind(self) -> ComponentKind:
        return "command"

    def command_root(self) -> Path:
        """The plugin's command directory, also the root for copied scripts."""
        return self.namespaced(self.get_commands_directory())

    def adapt(self, cluster: ComponentCluster) -> AdapterOutput:
        output = AdapterOutput()

        for file_path in cluster.files:
            content = self.read_source_or_warn(file_path, output)
            if content is None:
                continue

            copied, missing = self._copy_referenced_scripts(file_path, content, output)
            content = self.rewrite_plugin_root(content, missing)
            content = self.adapt_command_content(content, file_path)

            command_file = self.namespaced(self.get_commands_directory(), f"{Path(file_path).stem}.md")
            output.files.append(self.write_output(command_file, content))
            output.files.extend(record for record in copied if record not in output.files)

        return output

    # =========================================================================
    # Script Resolution
    # =========================================================================

    def find_script(self, command_file: Path, relative_path: str) -> Path | None:
        """Search upward from the command's directory for a referenced script.

        Stops at the first directory containing ``relative_path`` or at the
        filesystem root. Probes outside the plugin root (when known) never match.
        """
        directory = Path(command_file).parent
        for _ in range(len(directory.parts)):
            candidate = directory / relative_path
            if self.source_exists(candidate):
                return candidate
            if directory.parent == directory:
                break
            directory = directory.parent
        return None

    def _copy_referenced_scripts(
        self,
        command_file: Path,
        content: str,
        output: AdapterOutput,
    ) -> tuple[list[str], set[str]]:
        copied: list[str] = []
        missing: set[str] = set()

        for reference in find_script_references(content):
            try:
                validate_relative_path(reference)
            except PathTraversalError as e:
                message = (
                    f"Unsafe script reference {reference} in {Path(command_file).name}: {e}; "
                    f"leaving {PLUGIN_ROOT_TOKEN} in place"
                )
                logger.warning(message)
                output.warnings.append(message)
                missing.add(reference)
                continue

            script = self.find_script(command_file, reference)
            if script is None:
                message = (
                    f"Script {reference} referenced by {Path(command_file).name} was not found; "
                    f"leaving {PLUGIN_ROOT_TOKEN} in place"
                )
                logger.warning(message)
                output.warnings.append(message)
                missing.add(reference)
                continue

            dest = self.namespaced(self.get_commands_directory(), *Path(reference).parts)
            copied.append(self.copy_output(script, dest))

        return copied, missing

    def rewrite_plugin_root(self, content: str, missing: set[str]) -> str:
        """Replace the placeholder token with the plugin's command directory.

        Occurrences followed by a script that could not be resolved keep the
        token so the reference stays recognizable.
        """
        root = self.relative(self.command_root())

        def replace(match: re.Match[str]) -> str:
            reference = match.group(1)
            if reference and _normalize_reference(reference) in missing:
                return match.group(0)
            return root + (f"/{reference}" if reference else "")

        return _TOKEN_REFERENCE.sub(replace, content)

    # =========================================================================
    # Frontmatter
    # =========================================================================

    def adapt_command_content(self, content: str, file_path: Path) -> str:
        """Keep command frontmatter, or synthesize a minimal description.

        Command fields (description, argument-hint, allowed-tools, model) are
        already understood by Cursor. Inline ``!`` bash execution is not, so a
        note is added after the block when the body uses it.
        """
        split = frontmatter.split_block(content)
        if split is None:
            return frontmatter.wrap(content, {"description": f"Command from {Path(file_path).name}"})

        if BASH_EXECUTION_MARKER in split.body:
            return frontmatter.insert_after_block(content, BASH_EXECUTION_NOTE)
        return content
