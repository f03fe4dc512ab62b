"""
Orchestration of the change engine.

:class:`ChangeEngine` wires the grouper, the message suggester, the batch
committer and the inbound analyzer to one provider and one logger, and
exposes the operations a host (the CLI, an editor extension, a bot)
invokes. Every method returns a :class:`~vc_change_engine.result.Result`.
Nothing is cached between calls.
"""

from __future__ import annotations

import dataclasses
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from vc_change_engine.commit.batch_committer import BatchCommitter, CommitInfo
from vc_change_engine.grouping.change_classifier import CommitMessageSuggester
from vc_change_engine.grouping.change_grouper import ChangeGrouper
from vc_change_engine.grouping.extraction import to_file_changes
from vc_change_engine.grouping.group_model import ChangeGroup
from vc_change_engine.inbound.analyzer import DEFAULT_REMOTE, InboundAnalyzer
from vc_change_engine.inbound.models import InboundChanges
from vc_change_engine.log import Logger
from vc_change_engine.result import ErrorCode, Result, failure, success
from vc_change_engine.vcs.provider import GitProvider, GitStatus


Approver = Callable[[List[ChangeGroup]], List[ChangeGroup]]


@dataclass(frozen=True)
class SmartCommitResult:
    commits: List[CommitInfo]
    total_files: int
    total_groups: int
    duration_ms: int


class ChangeEngine:
    """Entry point for grouping, committing and inbound analysis."""

    def __init__(
        self,
        provider: GitProvider,
        logger: Logger,
        grouper: Optional[ChangeGrouper] = None,
        suggester: Optional[CommitMessageSuggester] = None,
        committer: Optional[BatchCommitter] = None,
        analyzer: Optional[InboundAnalyzer] = None,
        remote: str = DEFAULT_REMOTE,
    ) -> None:
        self.provider = provider
        self.logger = logger
        self.grouper = grouper or ChangeGrouper()
        self.suggester = suggester or CommitMessageSuggester()
        self.committer = committer or BatchCommitter(provider, logger)
        self.analyzer = analyzer or InboundAnalyzer(provider, logger, remote=remote)

    def initialize(self) -> Result[GitStatus]:
        """Check that the provider can talk to a repository."""
        self.logger.info("Initializing change engine", "ChangeEngine.initialize")
        status = self.provider.status()
        if not status.ok:
            return failure(
                ErrorCode.GIT_UNAVAILABLE,
                "Git is not available or not initialized",
                details=status.error,
                context="ChangeEngine.initialize",
            )
        self.logger.info(f"Git initialized (branch: {status.value.branch})", "ChangeEngine.initialize")
        return status

    def status(self) -> Result[GitStatus]:
        try:
            return self.provider.status()
        except Exception as exc:
            return failure(
                ErrorCode.GIT_STATUS_ERROR,
                "Failed to fetch git status",
                details=exc,
                context="ChangeEngine.status",
            )

    def commit(self, message: str) -> Result[str]:
        """Commit whatever is staged with ``message``."""
        if not isinstance(message, str) or not message.strip():
            return failure(
                ErrorCode.INVALID_PARAMS,
                "Commit message is required and cannot be empty",
                context="ChangeEngine.commit",
            )
        try:
            self.logger.info(f"Committing with message: {message!r}", "ChangeEngine.commit")
            return self.provider.commit(message)
        except Exception as exc:
            return failure(
                ErrorCode.GIT_COMMIT_ERROR,
                "Failed to commit to git",
                details=exc,
                context="ChangeEngine.commit",
            )

    def plan_commit(self) -> Result[List[ChangeGroup]]:
        """Read pending changes and return groups with suggested messages."""
        context = "ChangeEngine.plan_commit"
        records = self.provider.get_all_changes()
        if not records.ok:
            return failure(
                ErrorCode.GET_CHANGES_FAILED,
                "Failed to get git changes",
                details=records.error,
                context=context,
            )
        if not records.value:
            return failure(ErrorCode.NO_CHANGES, "No changes to commit", context=context)

        self.logger.info(f"Found {len(records.value)} changed files", context)
        changes = to_file_changes(records.value)
        groups = [
            dataclasses.replace(group, suggested_message=self.suggester.suggest(group))
            for group in self.grouper.group(changes)
        ]
        self.logger.info(f"Grouped {len(changes)} files into {len(groups)} groups", context)
        return success(groups)

    def smart_commit(
        self,
        auto_approve: bool = False,
        approve: Optional[Approver] = None,
    ) -> Result[SmartCommitResult]:
        """Plan, approve and commit the pending changes as a batch.

        ``approve`` receives the planned groups and returns the ones to
        commit, possibly with edited messages. Without a callback, or with
        ``auto_approve``, every group is committed.
        """
        context = "ChangeEngine.smart_commit"
        started = time.monotonic()
        try:
            planned = self.plan_commit()
            if not planned.ok:
                return planned
            groups = planned.value

            if auto_approve or approve is None:
                self.logger.info("Approving all groups", context)
                approved = list(groups)
            else:
                self.logger.info(f"Presenting {len(groups)} groups for approval", context)
                approved = list(approve(groups))

            if not approved:
                return failure(
                    ErrorCode.NO_GROUPS_APPROVED,
                    "No groups approved for commit",
                    context=context,
                )

            committed = self.committer.execute_batch(approved)
            if not committed.ok:
                return committed

            result = SmartCommitResult(
                commits=committed.value,
                total_files=sum(len(group.files) for group in groups),
                total_groups=len(groups),
                duration_ms=int((time.monotonic() - started) * 1000),
            )
            self.logger.info(
                f"Smart commit completed: {len(result.commits)} commits, "
                f"{result.total_files} files in {result.duration_ms}ms",
                context,
            )
            return success(result)
        except Exception as exc:
            self.logger.error("Smart commit error", context, exc)
            return failure(
                ErrorCode.SMART_COMMIT_ERROR,
                "Failed to execute smart commit",
                details=exc,
                context=context,
            )

    def analyze_inbound(self) -> Result[InboundChanges]:
        context = "ChangeEngine.analyze_inbound"
        self.logger.info("Analyzing inbound changes from remote", context)
        result = self.analyzer.analyze()
        if not result.ok:
            self.logger.error("Failed to analyze inbound changes", context, result.error)
            return result
        self.logger.info(
            f"Inbound analysis complete: {result.value.total_inbound} remote changes, "
            f"{len(result.value.conflicts)} conflicts",
            context,
        )
        return result
