"""Claude Code -> Cursor hook event translation.

Claude Code hooks are keyed by lifecycle event and can filter on the tool
name with a ``matcher``. Cursor has a smaller event vocabulary and no
matcher concept, so translation is a static table plus one split:
``PostToolUse`` becomes ``afterFileEdit`` when its matcher names only
file-editing tools, and ``afterShellExecution`` otherwise.
"""

import re

# Direct one-to-one event mappings.
EVENT_MAP: dict[str, str] = {
    "PreToolUse": "beforeShellExecution",
    "PostToolUse": "afterShellExecution",
    "UserPromptSubmit": "beforeSubmitPrompt",
    "Stop": "stop",
}

SPLIT_EVENT = "PostToolUse"
FILE_EDIT_EVENT = "afterFileEdit"
DEFAULT_EVENT = "afterShellExecution"

# Events with no Cursor equivalent. Hooks on these are dropped whole.
UNSUPPORTED_EVENTS: frozenset[str] = frozenset(
    {
        "SessionStart",
        "SessionEnd",
        "SubagentStop",
        "PreCompact",
        "Notification",
    }
)

# Write, Edit, either two-way union, or any Notebook* tool.
FILE_EDIT_MATCHER = re.compile(r"\A(?:Write|Edit|Write\|Edit|Edit\|Write|Notebook.*)\Z", re.IGNORECASE)


def is_supported(event: str) -> bool:
    """Check whether hooks on a Claude Code event can be translated."""
    return event not in UNSUPPORTED_EVENTS


def is_file_edit_matcher(matcher: str | None) -> bool:
    """Check whether a matcher names the file-editing tools."""
    return bool(matcher) and FILE_EDIT_MATCHER.match(matcher) is not None


def resolve_target_event(event: str, matcher: str | None = None) -> str:
    """Map a Claude Code event (and optional matcher) to a Cursor event.

    Args:
        event: Claude Code lifecycle event name
        matcher: Tool matcher of the hook's group, if any

    Returns:
        Cursor event name. Unknown events fall back to ``afterShellExecution``.
    """
    if event == SPLIT_EVENT and is_file_edit_matcher(matcher):
        return FILE_EDIT_EVENT
    return EVENT_MAP.get(event, DEFAULT_EVENT)
