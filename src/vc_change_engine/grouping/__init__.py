"""
Grouping logic for batch commits.

This package turns raw provider change records into domain annotated
:class:`FileChange` records, clusters them into :class:`ChangeGroup`
objects and proposes a Conventional Commit message for each group. See
:mod:`vc_change_engine.grouping.change_grouper` and
:mod:`vc_change_engine.grouping.change_classifier` for details.
"""

from .group_model import ChangeGroup, FileChange, SuggestedMessage  # noqa: F401
from .extraction import extract_domain, file_type, to_file_changes  # noqa: F401
from .change_grouper import ChangeGrouper  # noqa: F401
from .change_classifier import CommitMessageSuggester, classify_group  # noqa: F401
