"""Classification of plugin files and dispatch to component adapters.

The file list is partitioned in a fixed priority order. Each step removes
the files it claims from the pool, so every input file ends up in exactly
one cluster:

1. skills: each SKILL.md anchor claims every file under its directory
2. commands: files under a ``commands`` directory
3. hook documents: basenames ending in ``hooks.json``
4. agents: files under an ``agents`` directory (dropped with a warning)
5. documents: remaining Markdown files
6. anything else is reported as unclassified
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from crossplug.adapters import get_adapter
from crossplug.adapters.skill import is_skill_anchor
from crossplug.config.schemas import AdaptResult, ComponentCluster, PlacementContext

logger = logging.getLogger(__name__)

HOOKS_DOCUMENT_SUFFIX = "hooks.json"
DOCUMENT_SUFFIXES = frozenset({".md", ".mdc", ".markdown"})


def _segments(path: Path, root: Path | None) -> tuple[str, ...]:
    """Directory segments of a path, relative to ``root`` when inside it."""
    if root is not None:
        resolved = path.resolve()
        if resolved.is_relative_to(root):
            return resolved.relative_to(root).parts[:-1]
    return path.parts[:-1]


def classify(files: Iterable[str | os.PathLike[str]], root: Path | None = None) -> list[ComponentCluster]:
    """Partition plugin files into component clusters.

    Args:
        files: Plugin file paths
        root: Plugin root; directory names above it are ignored when matching
            ``commands``/``agents`` segments

    Returns:
        Non-empty clusters in dispatch order
    """
    pool = [Path(os.path.abspath(f)) for f in files]
    if root is not None:
        root = Path(root).resolve()
    clusters: list[ComponentCluster] = []

    for anchor in [f for f in pool if is_skill_anchor(f)]:
        if anchor not in pool:
            # Claimed as an asset of an enclosing skill.
            continue
        skill_root = anchor.parent
        members = [f for f in pool if f.is_relative_to(skill_root)]
        pool = [f for f in pool if not f.is_relative_to(skill_root)]
        clusters.append(ComponentCluster("skill", members, anchor=anchor, root=skill_root))

    def claim(predicate) -> list[Path]:
        nonlocal pool
        claimed = [f for f in pool if predicate(f)]
        pool = [f for f in pool if not predicate(f)]
        return claimed

    commands = claim(lambda f: "commands" in _segments(f, root))
    hooks = claim(lambda f: f.name.endswith(HOOKS_DOCUMENT_SUFFIX))
    agents = claim(lambda f: "agents" in _segments(f, root))
    documents = claim(lambda f: f.suffix.lower() in DOCUMENT_SUFFIXES)

    for kind, members in (
        ("command", commands),
        ("hook-manifest", hooks),
        ("unsupported", agents),
        ("document", documents),
        ("unclassified", pool),
    ):
        if members:
            clusters.append(ComponentCluster(kind, members))

    return clusters


class Dispatcher:
    """Runs every classified cluster through its adapter and merges the results."""

    def __init__(self, context: PlacementContext) -> None:
        self.context = context

    def adapt(self, files: Iterable[str | os.PathLike[str]]) -> AdaptResult:
        """Adapt a plugin's files into the target workspace.

        Raises:
            PathTraversalError: If an output path escapes the project root
        """
        result = AdaptResult()
        result.clusters = classify(files, self.context.plugin_root)

        for cluster in result.clusters:
            if cluster.kind == "unsupported":
                self._skip(
                    result,
                    cluster,
                    f"Skipped {len(cluster.files)} agent file(s): "
                    "Cursor has no equivalent for Claude Code subagents",
                )
                continue
            if cluster.kind == "unclassified":
                names = ", ".join(f.name for f in cluster.files)
                self._skip(result, cluster, f"Unclassified files were not adapted: {names}")
                continue

            logger.debug("Adapting %d %s file(s)", len(cluster.files), cluster.kind)
            output = get_adapter(cluster.kind, self.context).adapt(cluster)

            result.files.extend(f for f in output.files if f not in result.files)
            for event, entries in output.hooks.items():
                result.hooks.setdefault(event, []).extend(entries)
            result.warnings.extend(output.warnings)

        return result

    @staticmethod
    def _skip(result: AdaptResult, cluster: ComponentCluster, message: str) -> None:
        logger.warning(message)
        result.warnings.append(message)
        result.skipped.extend(str(f) for f in cluster.files)


def adapt(files: Iterable[str | os.PathLike[str]], context: PlacementContext) -> AdaptResult:
    """Adapt plugin files into a Cursor workspace.

    Args:
        files: Absolute (or cwd-relative) plugin file paths
        context: Target workspace and namespace

    Returns:
        AdaptResult with every created path (relative to the project root)
        and the hooks merged into the manifest
    """
    return Dispatcher(context).adapt(files)
