"""
Batch execution of approved change groups.

Each group is staged and committed in turn, strictly one provider call at
a time: staging or committing in parallel against one working tree can
corrupt the index. When any step fails, every commit made earlier in the
same batch is undone with a soft reset to the parent of the first one,
which leaves all of their changes staged.

Atomicity is best effort only. If the process dies between two commits
the partial batch stays in place, and commits already pushed by someone
else cannot be taken back.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List

from vc_change_engine.grouping.group_model import ChangeGroup
from vc_change_engine.log import Logger
from vc_change_engine.result import ErrorCode, Result, failure, success
from vc_change_engine.vcs.provider import GitProvider


CONTEXT = "BatchCommitter"


@dataclass(frozen=True)
class CommitInfo:
    """Record of a commit created by a batch."""

    hash: str
    message: str
    files: List[str] = field(default_factory=list)
    timestamp: int = 0  # epoch milliseconds


class BatchCommitter:
    """Stage and commit approved groups in order, rolling back on failure."""

    def __init__(self, provider: GitProvider, logger: Logger) -> None:
        self.provider = provider
        self.logger = logger

    def execute_batch(self, approved_groups: List[ChangeGroup]) -> Result[List[CommitInfo]]:
        commits: List[CommitInfo] = []
        try:
            for group in approved_groups:
                paths = group.paths
                message = group.suggested_message.full

                staged = self.provider.stage(paths)
                if not staged.ok:
                    self._rollback(commits)
                    return failure(
                        ErrorCode.STAGE_FAILED,
                        f"Failed to stage files for group {group.id}",
                        details=staged.error,
                        context=f"{CONTEXT}.execute_batch",
                    )

                committed = self.provider.commit(message)
                if not committed.ok:
                    self._rollback(commits)
                    return failure(
                        ErrorCode.COMMIT_FAILED,
                        f"Failed to commit group {group.id}",
                        details=committed.error,
                        context=f"{CONTEXT}.execute_batch",
                    )

                commits.append(
                    CommitInfo(
                        hash=committed.value,
                        message=message,
                        files=paths,
                        timestamp=int(time.time() * 1000),
                    )
                )
                self.logger.info(f"Committed group {group.id}: {message}", CONTEXT)

            return success(commits)
        except Exception as exc:
            self.logger.error("Unexpected error during batch commit", CONTEXT, exc)
            self._rollback(commits)
            return failure(
                ErrorCode.BATCH_COMMIT_ERROR,
                "Unexpected error during batch commit",
                details=exc,
                context=f"{CONTEXT}.execute_batch",
            )

    def _rollback(self, commits: List[CommitInfo]) -> None:
        """Soft reset to the parent of the first commit of this batch.

        Failures are logged only; the caller reports the error that
        triggered the rollback.
        """
        if not commits:
            return

        target = f"{commits[0].hash}^"
        self.logger.info(f"Rolling back {len(commits)} commit(s) to {target}", CONTEXT)
        try:
            reset = self.provider.reset(target, mode="soft")
        except Exception as exc:
            self.logger.error(f"Rollback failed: could not reset to {target}", CONTEXT, exc)
            return
        if not reset.ok:
            self.logger.error(f"Rollback failed: could not reset to {target}", CONTEXT, reset.error)
        else:
            self.logger.info("Rollback successful", CONTEXT)
