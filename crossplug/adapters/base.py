"""Abstract base class for component adapters.

Each adapter turns one classified cluster of Claude Code plugin files into
Cursor workspace files. All file access goes through
:mod:`crossplug.utils.safe_access`: reads are contained to the plugin root
(when known) and writes are contained to the target project.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from crossplug.config.schemas import (
    AdapterOutput,
    ComponentCluster,
    ComponentKind,
    PlacementContext,
)
from crossplug.utils import frontmatter, safe_access
from crossplug.utils.filesystem import to_record_path
from crossplug.utils.safe_access import PathTraversalError, SafeFileNotFoundError

logger = logging.getLogger(__name__)

# Rule metadata Cursor needs that Claude Code documents lack.
CURSOR_RULE_DEFAULTS: dict[str, Any] = {"globs": [], "alwaysApply": False}

_COMPONENT_DIRECTORIES = ("commands", "agents", "skills")


class ComponentAdapter(ABC):
    """Abstract base class for component adapters.

    Adapters handle everything specific to one component kind:
    - Metadata (frontmatter) rewriting
    - Output naming and placement under the plugin's namespace
    - Copying supporting scripts and assets

    Subclasses must implement ``kind`` and ``adapt``.
    """

    def __init__(self, context: PlacementContext) -> None:
        """Initialize the adapter.

        Args:
            context: Target workspace and namespace for adapted files
        """
        self.context = context

    # =========================================================================
    # Metadata
    # =========================================================================

    @property
    @abstractmethod
    def kind(self) -> ComponentKind:
        """The component kind this adapter handles."""
        ...

    @abstractmethod
    def adapt(self, cluster: ComponentCluster) -> AdapterOutput:
        """Adapt a cluster of source files.

        Args:
            cluster: Classified source files

        Returns:
            AdapterOutput listing every created file relative to the project root
        """
        ...

    # =========================================================================
    # Directory Structure
    # =========================================================================

    @property
    def project_root(self) -> Path:
        return self.context.project_root

    def get_base_directory(self) -> Path:
        """Cursor's configuration directory (.cursor)."""
        return self.context.base_directory

    def get_rules_directory(self) -> Path:
        """Rules live in .cursor/rules/."""
        return self.get_base_directory() / "rules"

    def get_scripts_directory(self) -> Path:
        """Skill scripts and assets live in .cursor/scripts/."""
        return self.get_base_directory() / "scripts"

    def get_commands_directory(self) -> Path:
        """Commands live in .cursor/commands/."""
        return self.get_base_directory() / "commands"

    def get_hooks_directory(self) -> Path:
        """Hook scripts live in .cursor/hooks/."""
        return self.get_base_directory() / "hooks"

    def namespaced(self, directory: Path, *parts: str) -> Path:
        """Append the plugin namespace (and extra parts) to a directory.

        Raises:
            PathTraversalError: If the result escapes the project root
        """
        joined = safe_access.safe_join(directory, *self.context.namespace, *parts)
        return safe_access.resolve(joined, self.project_root)

    def relative(self, path: Path) -> str:
        """Express a created path relative to the project root."""
        return to_record_path(path, self.project_root)

    @property
    def rule_extension(self) -> str:
        return ".mdc" if self.context.agent == "cursor" else ".md"

    # =========================================================================
    # File Handling
    # =========================================================================

    def read_source(self, path: Path) -> str:
        """Read a plugin file, contained to the plugin root when known."""
        return safe_access.read_text(path, self.context.plugin_root)

    def read_source_or_warn(self, path: Path, output: AdapterOutput) -> str | None:
        """Read a plugin file, recording a warning instead of failing.

        Unreadable sources (outside the plugin root, missing, or not UTF-8)
        are skipped so the rest of the plugin is still adapted.
        """
        try:
            return self.read_source(path)
        except (PathTraversalError, SafeFileNotFoundError) as e:
            message = f"Skipped {Path(path).name}: {e}"
        except UnicodeDecodeError:
            message = f"Skipped {Path(path).name}: not valid UTF-8 text"

        logger.warning(message)
        output.warnings.append(message)
        return None

    def write_output(self, path: Path, content: str) -> str:
        """Write an adapted file inside the project and return its record path."""
        written = safe_access.write_text(path, content, self.project_root)
        logger.info("Saved: %s", self.relative(written))
        return self.relative(written)

    def copy_output(self, src: Path, dest: Path) -> str:
        """Copy a plugin file into the project as an executable."""
        copied = safe_access.copy_file(
            src,
            dest,
            src_base=self.context.plugin_root,
            dest_base=self.project_root,
            executable=True,
        )
        logger.info("Copied: %s", self.relative(copied))
        return self.relative(copied)

    def source_exists(self, path: Path) -> bool:
        """Probe for a plugin file without raising."""
        return safe_access.is_file(path, self.context.plugin_root)

    # =========================================================================
    # Rule Placement
    # =========================================================================

    @staticmethod
    def extract_component_type(file_path: Path) -> str:
        """Derive the component type from the source path's directories.

        Returns:
            "commands", "agents", or "skills" when that directory appears in
            the path, otherwise "misc"
        """
        directories = Path(file_path).parts[:-1]
        for component in _COMPONENT_DIRECTORIES:
            if component in directories:
                return component
        return "misc"

    def rule_path(self, source_path: Path, stem: str | None = None) -> Path:
        """Output path for a rule adapted from ``source_path``.

        Layout: .cursor/rules/crossplug/<marketplace>/<plugin>/<component>/<stem><ext>
        """
        name = f"{stem or Path(source_path).stem}{self.rule_extension}"
        return self.namespaced(
            self.get_rules_directory(),
            self.extract_component_type(source_path),
            name,
        )

    # =========================================================================
    # Frontmatter
    # =========================================================================

    def rule_fields(self, description: str) -> dict[str, Any]:
        """Fields for a synthesized rule metadata block."""
        fields: dict[str, Any] = {"description": description}
        if self.context.agent == "cursor":
            fields.update(CURSOR_RULE_DEFAULTS)
        return fields

    def inject_rule_metadata(self, content: str, source_path: Path) -> str:
        """Ensure a document carries the metadata a Cursor rule needs.

        Existing blocks gain any missing ``globs``/``alwaysApply`` keys;
        documents without a block get one describing their origin.
        """
        if frontmatter.has_block(content):
            if self.context.agent == "cursor":
                return frontmatter.ensure_keys(content, CURSOR_RULE_DEFAULTS)
            return content

        description = f"Imported rule from {Path(source_path).name}"
        return frontmatter.wrap(content, self.rule_fields(description))
