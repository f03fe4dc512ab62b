"""
Sequential batch commits with compensating rollback.

See :class:`vc_change_engine.commit.batch_committer.BatchCommitter`.
"""

from .batch_committer import BatchCommitter, CommitInfo  # noqa: F401
