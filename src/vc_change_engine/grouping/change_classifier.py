"""
Heuristics for describing a change group as a Conventional Commit.

The classifier is intentionally simple and deterministic so that it can
be unit tested without any external service. The commit type is chosen
by the first matching rule:

1. ``feat``     – the group adds files and neither modifies nor deletes any
2. ``fix``      – the group only modifies files
3. ``docs``     – every file is documentation (``.md``, ``.txt``, ``.rst``)
4. ``refactor`` – every file is modified and there is more than one
5. ``chore``    – anything else

Rule 4 is unreachable: rule 2 already claims every all-modified group.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import List

from vc_change_engine.grouping.group_model import (
    STATUS_ADDED,
    STATUS_DELETED,
    STATUS_MODIFIED,
    ChangeGroup,
    FileChange,
    SuggestedMessage,
)


DOCS_PATTERN = re.compile(r"\.(md|txt|rst)$", re.IGNORECASE)

ACTION_VERBS = {
    "A": "add",
    "M": "update",
    "D": "remove",
    "R": "rename",
}


def classify_group(files: List[FileChange]) -> str:
    """Return the Conventional Commit type for a list of changes."""
    statuses = {change.status for change in files}
    has_adds = STATUS_ADDED in statuses
    has_modifies = STATUS_MODIFIED in statuses
    has_deletes = STATUS_DELETED in statuses

    if has_adds and not has_modifies and not has_deletes:
        return "feat"
    if has_modifies and not has_adds and not has_deletes:
        return "fix"
    if all(DOCS_PATTERN.search(change.file_type) for change in files):
        return "docs"
    if all(change.status == STATUS_MODIFIED for change in files) and len(files) > 1:
        return "refactor"
    return "chore"


def most_common_domain(files: List[FileChange]) -> str:
    """Most frequent domain; the first one seen wins a tie."""
    if not files:
        return ""
    counts = Counter(change.domain for change in files)
    best, best_count = "", 0
    # Counter preserves first-insertion order, strict '>' keeps the earliest.
    for domain, count in counts.items():
        if count > best_count:
            best, best_count = domain, count
    return best


def action_verb(status: str) -> str:
    return ACTION_VERBS.get(status, "modify")


class CommitMessageSuggester:
    """Propose a :class:`SuggestedMessage` for a :class:`ChangeGroup`."""

    def suggest(self, group: ChangeGroup) -> SuggestedMessage:
        files = group.files
        commit_type = classify_group(files)
        scope = most_common_domain(files)
        return SuggestedMessage.build(commit_type, scope, self.describe(files, scope))

    @staticmethod
    def describe(files: List[FileChange], scope: str) -> str:
        if len(files) == 1:
            change = files[0]
            filename = change.path.rsplit("/", 1)[-1] or change.path
            return f"{action_verb(change.status)} {filename}"
        if len({change.status for change in files}) == 1:
            return f"{action_verb(files[0].status)} {len(files)} {scope} files"
        return f"update {len(files)} files"
