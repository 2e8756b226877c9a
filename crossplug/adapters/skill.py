"""Skill adapter.

A Claude Code skill is a directory with a SKILL.md anchor plus supporting
scripts and assets. Cursor has no skill concept, so the anchor becomes a
rule named after the skill directory, and everything else is copied to a
scripts directory the rule points at:

.cursor/
├── rules/crossplug/<marketplace>/<plugin>/skills/<skill>.mdc
└── scripts/crossplug/<marketplace>/<plugin>/<skill>/
    ├── scripts/run.sh
    └── reference/docs.txt
"""

import logging
from pathlib import Path

from crossplug.adapters import register_adapter
from crossplug.adapters.base import CURSOR_RULE_DEFAULTS, ComponentAdapter
from crossplug.config.schemas import AdapterOutput, ComponentCluster, ComponentKind
from crossplug.utils import frontmatter
from crossplug.utils.safe_access import PathTraversalError, SafeFileNotFoundError

logger = logging.getLogger(__name__)

SKILL_ANCHOR = "SKILL.md"


def is_skill_anchor(path: Path) -> bool:
    """Check whether a file is a skill's anchor (case-insensitive SKILL.md)."""
    return Path(path).name.lower() == SKILL_ANCHOR.lower()


@register_adapter("skill")
class SkillAdapter(ComponentAdapter):
    """Adapter for skill clusters (one anchor plus assets)."""

    @property
    def kind(self) -> ComponentKind:
        return "skill"

    def script_location(self, skill_name: str) -> str:
        """Project-relative directory holding a skill's copied files."""
        return f"{self.relative(self.namespaced(self.get_scripts_directory(), skill_name))}/"

    def adapt(self, cluster: ComponentCluster) -> AdapterOutput:
        output = AdapterOutput()

        anchor = next((f for f in cluster.files if is_skill_anchor(f)), None)
        if anchor is None:
            logger.debug("Skill cluster has no %s; nothing to adapt", SKILL_ANCHOR)
            return output

        skill_root = Path(anchor).parent
        skill_name = skill_root.name
        hint = f"Scripts located at: {self.script_location(skill_name)}"

        content = self.read_source_or_warn(anchor, output)
        if content is None:
            # Assets without their rule would be orphaned.
            return output
        adapted = self.inject_skill_metadata(content, anchor, hint)
        # Every anchor is SKILL.md, so name the rule after the skill directory.
        rule = self.rule_path(anchor, stem=skill_name)
        output.files.append(self.write_output(rule, adapted))

        for file_path in cluster.files:
            if file_path == anchor:
                continue
            try:
                relative = Path(file_path).relative_to(skill_root)
            except ValueError:
                message = f"Skipping {file_path}: not inside skill directory {skill_root}"
                logger.warning(message)
                output.warnings.append(message)
                continue

            dest = self.namespaced(self.get_scripts_directory(), skill_name, *relative.parts)
            try:
                output.files.append(self.copy_output(file_path, dest))
            except (PathTraversalError, SafeFileNotFoundError) as e:
                message = f"Skipped skill asset {relative.as_posix()}: {e}"
                logger.warning(message)
                output.warnings.append(message)

        return output

    def inject_skill_metadata(self, content: str, anchor: Path, hint: str) -> str:
        """Add the script location hint to the skill's description."""
        if not frontmatter.has_block(content):
            description = f"Imported skill from {Path(anchor).name}. {hint}"
            return frontmatter.wrap(content, self.rule_fields(description))

        content, patched = frontmatter.append_to_description(content, hint)
        if not patched:
            content = frontmatter.ensure_keys(content, {"description": hint})
        if self.context.agent == "cursor":
            content = frontmatter.ensure_keys(content, CURSOR_RULE_DEFAULTS)
        return content
