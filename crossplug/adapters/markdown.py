"""Plain instruction document adapter.

Claude Code documents become Cursor rules:
.cursor/rules/crossplug/<marketplace>/<plugin>/<component>/<name>.mdc
"""

from crossplug.adapters import register_adapter
from crossplug.adapters.base import ComponentAdapter
from crossplug.config.schemas import AdapterOutput, ComponentCluster, ComponentKind


@register_adapter("document")
class DocumentAdapter(ComponentAdapter):
    """Adapter for free-form instruction documents.

    The output keeps the source basename; its directory is derived from the
    commands/agents/skills segment of the source path ("misc" otherwise).
    """

    @property
    def kind(self) -> ComponentKind:
        return "document"

    def adapt(self, cluster: ComponentCluster) -> AdapterOutput:
        output = AdapterOutput()
        for file_path in cluster.files:
            content = self.read_source_or_warn(file_path, output)
            if content is None:
                continue
            adapted = self.inject_rule_metadata(content, file_path)
            output.files.append(self.write_output(self.rule_path(file_path), adapted))
        return output
