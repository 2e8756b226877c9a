"""Stop-hook output translation.

Claude Code stop hooks ask to keep the conversation going by either exiting
with status 2 (reason on stderr) or exiting 0 with
``{"decision": "block", "reason": "..."}`` on stdout. Cursor stop hooks
instead exit 0 and print ``{"followup_message": "..."}``. Anything else
passes through unchanged.
"""

import json
import logging
import subprocess
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

BLOCK_EXIT_CODE = 2


@dataclass
class StopHookOutput:
    """Translated stop-hook result."""

    stdout: str
    exit_code: int


def _parse_json_object(text: str) -> dict[str, Any] | None:
    if not text:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _followup(message: str) -> StopHookOutput:
    if not message:
        return StopHookOutput(stdout="", exit_code=0)
    return StopHookOutput(stdout=json.dumps({"followup_message": message}), exit_code=0)


def translate_stop_output(stdout: str | None, stderr: str | None, exit_code: int) -> StopHookOutput:
    """Translate a Claude Code stop hook's output into Cursor's contract.

    Args:
        stdout: Captured standard output of the hook
        stderr: Captured standard error of the hook
        exit_code: The hook's exit status

    Returns:
        The output and exit status Cursor should see
    """
    out = (stdout or "").strip()
    err = (stderr or "").strip()

    if exit_code == BLOCK_EXIT_CODE:
        return _followup(err)

    if exit_code == 0:
        parsed = _parse_json_object(out)
        if parsed is not None and parsed.get("decision") == "block":
            reason = parsed.get("reason")
            return _followup("" if reason is None else str(reason))

    return StopHookOutput(stdout=out, exit_code=exit_code)


def run_stop_hook(command: list[str], stdin: str | None = None) -> StopHookOutput:
    """Run a Claude Code stop hook and translate its result.

    Args:
        command: The hook command and its arguments
        stdin: Event payload forwarded to the hook

    Returns:
        Translated output
    """
    logger.debug("Running stop hook: %s", command)
    completed = subprocess.run(
        command,
        input=stdin,
        capture_output=True,
        text=True,
        check=False,
    )
    return translate_stop_output(completed.stdout, completed.stderr, completed.returncode)
