"""
Greedy clustering of file changes.

The grouper walks the changes in their original order. The first
ungrouped change becomes the seed of a new group and every remaining
change scoring above the threshold against that seed joins it. Members
are only ever compared with the seed, never with each other, so the
result depends on input order but is fully deterministic for a given
order.
"""

from __future__ import annotations

import uuid
from typing import Callable, List, Optional

from vc_change_engine.grouping.group_model import ChangeGroup, FileChange


SIMILARITY_THRESHOLD = 0.4


def _new_group_id() -> str:
    return uuid.uuid4().hex[:12]


def similarity_score(a: FileChange, b: FileChange) -> float:
    """Score how alike two changes are, between 0 and 1.

    Status, domain and file type each contribute a third. A full match
    scores 1.0; changes differing in all three score about 0.233.
    """
    type_match = 1.0 if a.status == b.status else 0.5
    domain_match = 1.0 if a.domain == b.domain else 0.0
    file_type_match = 0.5 if a.file_type == b.file_type else 0.2
    return (type_match + domain_match + file_type_match) / 3


class ChangeGrouper:
    """Partition changes into similarity clusters."""

    def __init__(
        self,
        threshold: float = SIMILARITY_THRESHOLD,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.threshold = threshold
        self._id_factory = id_factory or _new_group_id

    def group(self, changes: List[FileChange]) -> List[ChangeGroup]:
        groups: List[ChangeGroup] = []
        # Identical records stay distinct; the pool keeps its relative order.
        pool = list(changes)
        while pool:
            seed = pool[0]
            members = [seed]
            remaining: List[FileChange] = []
            for candidate in pool[1:]:
                if similarity_score(seed, candidate) > self.threshold:
                    members.append(candidate)
                else:
                    remaining.append(candidate)
            pool = remaining
            groups.append(
                ChangeGroup(
                    id=self._id_factory(),
                    files=members,
                    similarity=self._group_similarity(members),
                )
            )
        return groups

    @staticmethod
    def _group_similarity(members: List[FileChange]) -> float:
        if len(members) < 2:
            return 1.0
        seed = members[0]
        total = sum(similarity_score(seed, member) for member in members[1:])
        return min(1.0, total / (len(members) - 1))
