"""
Conversion of engine results into one-line user messages.
"""

from __future__ import annotations

from typing import Any, Tuple

from vc_change_engine.result import ErrorCode, Result


ERROR_MESSAGES = {
    ErrorCode.NO_CHANGES: "No changes to commit.",
    ErrorCode.NO_GROUPS_APPROVED: "No commit groups were approved.",
    ErrorCode.GET_CHANGES_FAILED: "Could not list pending changes.",
    ErrorCode.STAGE_FAILED: "Staging failed; earlier commits of this batch were rolled back.",
    ErrorCode.COMMIT_FAILED: "Commit failed; earlier commits of this batch were rolled back.",
    ErrorCode.BATCH_COMMIT_ERROR: "One or more commits failed.",
    ErrorCode.SMART_COMMIT_ERROR: "Smart commit failed.",
    ErrorCode.INBOUND_ANALYSIS_ERROR: "Inbound analysis failed.",
    ErrorCode.GIT_UNAVAILABLE: "Git is not available in this workspace.",
    ErrorCode.GIT_STATUS_ERROR: "Failed to read git status.",
    ErrorCode.GIT_COMMIT_ERROR: "Commit failed.",
}


def format_result_message(command: str, result: Result[Any]) -> Tuple[str, str]:
    """Return ``(level, text)`` where level is ``"info"`` or ``"error"``."""
    if not result.ok:
        error = result.error
        text = ERROR_MESSAGES.get(error.code, error.message)
        return "error", f"[{command}] {text}"

    value = result.value
    if command == "status":
        state = "dirty" if value.is_dirty else "clean"
        return "info", (
            f"{value.branch} ({state}) - staged: {value.staged}, "
            f"unstaged: {value.unstaged}, untracked: {value.untracked}"
        )
    if command == "commit":
        return "info", f"Committed: {value}"
    if command == "smart-commit":
        return "info", (
            f"Smart commit: {len(value.commits)} commit(s) from "
            f"{value.total_groups} group(s), {value.total_files} file(s)"
        )
    if command == "inbound":
        return "info", f"{value.branch}: {value.summary.description}"
    return "info", f"[{command}] OK"
