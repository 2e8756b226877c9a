"""Metadata block (YAML frontmatter) editing for text documents.

A metadata block occupies the first lines of a document, delimited by a
``---`` sentinel line at offset 0 and the next ``---`` line after it:

    ---
    description: Review pull requests
    globs: []
    ---
    # Body text...

Detection is a two-state line scan (before block / in block). Only the very
first line can open a block, so a ``---`` rule deeper in the body is never
mistaken for metadata. Editing functions work on the block's lines and leave
the body byte-identical.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import yaml

logger = logging.getLogger(__name__)

SENTINEL = "---"

_TOP_LEVEL_KEY = re.compile(r"^([A-Za-z_][\w-]*)[ \t]*:(?:[ \t]|$)")


@dataclass
class FrontmatterSplit:
    """A document split at its metadata block."""

    opening: str
    lines: list[str]
    closing: str
    body: str

    def join(self, snippet: str = "") -> str:
        """Reassemble the document, optionally inserting text after the block."""
        return self.opening + "".join(self.lines) + self.closing + snippet + self.body


def _is_sentinel(line: str) -> bool:
    return line.rstrip("\r\n").rstrip() == SENTINEL


def split_block(text: str) -> FrontmatterSplit | None:
    """Split a document into its metadata block and body.

    Returns:
        FrontmatterSplit if the document starts with a block, None otherwise
    """
    lines = text.splitlines(keepends=True)
    if not lines or not _is_sentinel(lines[0]) or not lines[0].endswith("\n"):
        return None

    # First line opened the block; the first sentinel after it closes it.
    for index in range(1, len(lines)):
        if _is_sentinel(lines[index]):
            return FrontmatterSplit(
                opening=lines[0],
                lines=lines[1:index],
                closing=lines[index],
                body="".join(lines[index + 1 :]),
            )
    return None


def has_block(text: str) -> bool:
    """Check whether a document starts with a complete metadata block."""
    return split_block(text) is not None


def block_keys(text: str) -> list[str]:
    """List top-level keys declared in the metadata block, in order."""
    split = split_block(text)
    if split is None:
        return []
    keys: list[str] = []
    for line in split.lines:
        match = _TOP_LEVEL_KEY.match(line)
        if match:
            keys.append(match.group(1))
    return keys


def parse_block(text: str) -> dict[str, Any]:
    """Parse the metadata block as YAML.

    Returns:
        The block's mapping; empty if there is no block or it is not valid YAML
    """
    split = split_block(text)
    if split is None:
        return {}
    try:
        data = yaml.safe_load("".join(split.lines))
    except yaml.YAMLError as e:
        logger.warning("Could not parse metadata block: %s", e)
        return {}
    return data if isinstance(data, dict) else {}


def render_fields(fields: Mapping[str, Any]) -> str:
    """Render fields as block lines (``key: value``), lists in flow style."""
    if not fields:
        return ""
    return yaml.safe_dump(
        dict(fields),
        sort_keys=False,
        default_flow_style=None,
        allow_unicode=True,
        width=float("inf"),
    )


def wrap(text: str, fields: Mapping[str, Any]) -> str:
    """Prepend a new metadata block built from ``fields``.

    Documents that already have a block are returned unchanged. The original
    text follows the closing sentinel unmodified.
    """
    if has_block(text):
        return text
    return f"{SENTINEL}\n{render_fields(fields)}{SENTINEL}\n{text}"


def ensure_keys(text: str, defaults: Mapping[str, Any]) -> str:
    """Add missing top-level keys to an existing metadata block.

    Missing keys are inserted immediately after the opening sentinel with
    their default values. Keys already present are never modified, and
    documents without a block are returned unchanged.
    """
    split = split_block(text)
    if split is None:
        return text

    present = set(block_keys(text))
    missing = {key: value for key, value in defaults.items() if key not in present}
    if not missing:
        return text

    split.lines.insert(0, render_fields(missing))
    return split.join()


def append_to_description(text: str, addition: str) -> tuple[str, bool]:
    """Append a sentence to the block's ``description`` value.

    Only the first top-level ``description:`` key inside the block is
    touched. Its line, plus any indented continuation lines of a multi-line
    value (``|`` and ``>`` block scalars included), is re-rendered so the
    value stays valid YAML.

    Returns:
        Tuple of (new text, whether a description line was patched)
    """
    split = split_block(text)
    if split is None:
        return text, False

    lines = split.lines
    for index, line in enumerate(lines):
        match = _TOP_LEVEL_KEY.match(line)
        if not match or match.group(1) != "description":
            continue

        end = index + 1
        while end < len(lines) and (not lines[end].strip() or lines[end][0] in " \t"):
            end += 1
        while end > index + 1 and not lines[end - 1].strip():
            end -= 1

        raw_value = line[match.end() :].strip()
        data = parse_block(text)
        if "description" in data:
            current = data["description"]
        elif raw_value.startswith(("|", ">")):
            logger.debug("Not patching unparseable description block scalar")
            return text, False
        else:
            try:
                current = yaml.safe_load(raw_value) if raw_value else ""
            except yaml.YAMLError:
                current = raw_value
        current = "" if current is None else str(current).strip()

        combined = f"{current.rstrip('. ')}. {addition}" if current else addition
        lines[index:end] = [render_fields({"description": combined})]
        return split.join(), True

    return text, False


def insert_after_block(text: str, snippet: str) -> str:
    """Insert text directly after the closing sentinel of the block."""
    split = split_block(text)
    if split is None:
        return text
    return split.join(snippet)
