"""
Analysis of inbound changes on the remote tracking branch.

:class:`InboundAnalyzer` fetches the remote, compares what arrived with
what is staged locally and reports paths likely to conflict on pull.
"""

from .models import ChangesSummary, ConflictFile, InboundChanges, SeverityCounts  # noqa: F401
from .analyzer import (  # noqa: F401
    InboundAnalyzer,
    build_diff_link,
    estimate_changes,
    parse_name_status,
)
