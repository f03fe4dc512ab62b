"""
Report objects produced by :class:`~vc_change_engine.inbound.analyzer.InboundAnalyzer`.

All of them are built once per analysis and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class ConflictFile:
    """A path changed both locally and on the remote."""

    path: str
    local_status: str
    remote_status: str
    severity: str  # 'high', 'medium' or 'low'
    local_changes: int
    remote_changes: int


@dataclass(frozen=True)
class SeverityCounts:
    high: int = 0
    medium: int = 0
    low: int = 0


@dataclass(frozen=True)
class ChangesSummary:
    description: str
    conflicts: SeverityCounts = field(default_factory=SeverityCounts)
    file_types: Dict[str, int] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class InboundChanges:
    remote: str
    branch: str
    total_inbound: int
    total_local: int
    conflicts: List[ConflictFile]
    summary: ChangesSummary
    diff_link: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
