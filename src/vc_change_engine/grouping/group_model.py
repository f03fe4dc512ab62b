"""
Data models for commit grouping.

A :class:`FileChange` is one pending modification annotated with the
logical domain it belongs to. A :class:`ChangeGroup` is a cluster of such
changes that should be committed together, carrying the
:class:`SuggestedMessage` proposed for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


STATUS_ADDED = "A"
STATUS_MODIFIED = "M"
STATUS_DELETED = "D"
STATUS_RENAMED = "R"


@dataclass(frozen=True)
class FileChange:
    """A single pending file change.

    Attributes
    ----------
    path : str
        Path relative to the repository root, using ``/`` separators.
    status : str
        One of ``A`` (added), ``M`` (modified), ``D`` (deleted) or
        ``R`` (renamed).
    domain : str
        Logical area of the code base derived from the path.
    file_type : str
        Lower-case extension including the leading dot, or ``""``.
    additions, deletions : int
        Line counts reported by the provider.
    """

    path: str
    status: str
    domain: str
    file_type: str
    additions: int = 0
    deletions: int = 0


@dataclass(frozen=True)
class SuggestedMessage:
    """Conventional Commit descriptor."""

    type: str
    scope: str
    description: str
    full: str

    @classmethod
    def build(cls, type: str, scope: str, description: str) -> "SuggestedMessage":
        header = f"{type}({scope})" if scope else type
        return cls(type=type, scope=scope, description=description, full=f"{header}: {description}")


PLACEHOLDER_MESSAGE = SuggestedMessage(type="chore", scope="", description="", full="")


@dataclass
class ChangeGroup:
    """A cluster of changes committed together.

    Attributes
    ----------
    id : str
        Opaque identifier, unique within a planning run.
    files : List[FileChange]
        Members in the order they were added; the first one is the seed.
    suggested_message : SuggestedMessage
        Message used when the group is committed.
    similarity : float
        Mean similarity of the members to the seed, ``1.0`` for singletons.
    """

    id: str
    files: List[FileChange]
    suggested_message: SuggestedMessage = PLACEHOLDER_MESSAGE
    similarity: float = 1.0

    @property
    def paths(self) -> List[str]:
        return [change.path for change in self.files]
