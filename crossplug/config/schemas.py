"""Pydantic schemas and result types for Crossplug.

This module defines the data models for:
- placement of adapted files in a target workspace
- the plugin's hooks.json (source hook document)
- .cursor/hooks.json (target hook manifest)
- install records written by ``crossplug adapt --record``
- classification clusters and adapter results
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from crossplug.utils.safe_access import PathTraversalError, validate_name

# =============================================================================
# Common Types
# =============================================================================

AgentType = Literal["cursor", "markdown"]
ComponentKind = Literal[
    "document",
    "skill",
    "command",
    "hook-manifest",
    "unsupported",
    "unclassified",
]

TOOL_NAMESPACE = "crossplug"


# =============================================================================
# Placement
# =============================================================================


class PlacementContext(BaseModel):
    """Where and under which namespace adapted files are written.

    - project_root: the target workspace; Cursor files live under ``.cursor/``
    - marketplace_name / plugin_name: namespace segments for collision-free paths
    - agent: ``cursor`` writes ``.mdc`` rules with Cursor metadata, ``markdown``
      writes plain ``.md`` files
    - plugin_root: when set, every plugin-origin read is contained to it
    """

    project_root: Path
    marketplace_name: str
    plugin_name: str
    agent: AgentType = "cursor"
    plugin_root: Path | None = None

    @field_validator("project_root", "plugin_root")
    @classmethod
    def resolve_directory(cls, v: Path | None) -> Path | None:
        """Store directories in canonical form."""
        return v.expanduser().resolve() if v is not None else None

    @field_validator("marketplace_name", "plugin_name")
    @classmethod
    def validate_component_name(cls, v: str) -> str:
        """Names become directory components and must not traverse."""
        try:
            return validate_name(v)
        except PathTraversalError as e:
            raise ValueError(str(e)) from e

    @property
    def namespace(self) -> tuple[str, str, str]:
        """Path segments shared by every output of this plugin."""
        return (TOOL_NAMESPACE, self.marketplace_name, self.plugin_name)

    @property
    def base_directory(self) -> Path:
        """The target workspace's ``.cursor`` directory."""
        return self.project_root / ".cursor"


# =============================================================================
# Source Hook Document (plugin hooks.json)
# =============================================================================


class HookDefinition(BaseModel):
    """A single hook inside a matcher group."""

    model_config = {"extra": "ignore"}

    type: str = "command"
    command: str | None = None
    prompt: str | None = None
    timeout: float | None = None


class HookMatcherGroup(BaseModel):
    """Hooks that fire for an event, optionally filtered by a tool matcher."""

    model_config = {"extra": "ignore"}

    matcher: str | None = None
    hooks: list[HookDefinition] = Field(default_factory=list)


class HookSourceDocument(BaseModel):
    """Plugin hooks.json schema: event name -> matcher groups."""

    model_config = {"extra": "ignore"}

    description: str | None = None
    hooks: dict[str, list[HookMatcherGroup]] = Field(default_factory=dict)


# =============================================================================
# Target Hook Manifest (.cursor/hooks.json)
# =============================================================================


class HookEntry(BaseModel):
    """A hook entry in the target manifest.

    Entries contributed by other tools may carry extra fields; they are kept
    as-is. Serialize with ``exclude_unset=True`` so an absent timeout stays
    absent.
    """

    model_config = {"extra": "allow"}

    command: str
    timeout: float | None = None

    def to_dict(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        # Keep integral timeouts integral in the written JSON.
        timeout = data.get("timeout")
        if isinstance(timeout, float) and timeout.is_integer():
            data["timeout"] = int(timeout)
        return data


HookEventMap = dict[str, list[HookEntry]]


class TargetHookManifest(BaseModel):
    """The project-wide hook manifest shared by every installed plugin.

    Event lists hold raw JSON values, so entries written by other tools (or
    by hand) round-trip untouched even when they do not fit ``HookEntry``.
    """

    model_config = {"extra": "allow"}

    version: Any = 1
    hooks: dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"version": 1, "hooks": {}}
        for event, entries in self.hooks.items():
            if isinstance(entries, list):
                entries = [e.to_dict() if isinstance(e, HookEntry) else e for e in entries]
            data["hooks"][event] = entries
        data.update(self.model_extra or {})
        return data


# =============================================================================
# Install Record (written by `crossplug adapt --record`)
# =============================================================================


class InstallRecord(BaseModel):
    """Everything one adaptation created, for later removal."""

    marketplace: str
    plugin: str
    agent: AgentType = "cursor"
    files: list[str] = Field(default_factory=list)  # Relative to project root
    hooks: HookEventMap = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "marketplace": self.marketplace,
            "plugin": self.plugin,
            "agent": self.agent,
            "files": list(self.files),
            "hooks": {
                event: [entry.to_dict() for entry in entries]
                for event, entries in self.hooks.items()
            },
        }


# =============================================================================
# Project Defaults (crossplug.yaml)
# =============================================================================


class ProjectDefaults(BaseModel):
    """Optional defaults for the CLI, read from crossplug.yaml."""

    agent: AgentType = "cursor"
    marketplace: str | None = None


# =============================================================================
# Classification and Adapter Results
# =============================================================================


@dataclass
class ComponentCluster:
    """Source files sharing a classification.

    Skill clusters also carry their anchor file (SKILL.md) and root
    directory (the anchor's parent).
    """

    kind: ComponentKind
    files: list[Path] = field(default_factory=list)
    anchor: Path | None = None
    root: Path | None = None


@dataclass
class AdapterOutput:
    """Files created by one adapter run."""

    files: list[str] = field(default_factory=list)
    hooks: HookEventMap = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


@dataclass
class AdaptResult:
    """Aggregate result of adapting a plugin's file list."""

    files: list[str] = field(default_factory=list)
    hooks: HookEventMap = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    clusters: list[ComponentCluster] = field(default_factory=list)

    def to_record(self, context: PlacementContext) -> InstallRecord:
        """Build the install record for this result."""
        return InstallRecord(
            marketplace=context.marketplace_name,
            plugin=context.plugin_name,
            agent=context.agent,
            files=list(self.files),
            hooks={event: list(entries) for event, entries in self.hooks.items()},
        )
