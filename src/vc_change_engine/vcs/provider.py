"""
Abstract version control provider.

Every engine component talks to the repository exclusively through this
interface. All methods return a :class:`~vc_change_engine.result.Result`
instead of raising, so a provider failure reaches the engine as a value
it can forward or wrap.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from vc_change_engine.result import Result


@dataclass(frozen=True)
class GitStatus:
    """Snapshot of the working tree state."""

    branch: str
    is_dirty: bool
    staged: int
    unstaged: int
    untracked: int


@dataclass(frozen=True)
class GitFileChange:
    """Raw change record as reported by the provider."""

    path: str
    status: str  # 'A', 'M', 'D' or 'R'
    additions: int = 0
    deletions: int = 0


class GitProvider(ABC):
    """Capability set required from a version control backend."""

    @abstractmethod
    def status(self) -> Result[GitStatus]:
        ...

    @abstractmethod
    def get_all_changes(self) -> Result[List[GitFileChange]]:
        """Return staged and unstaged changes combined, one record per path."""

    @abstractmethod
    def stage(self, paths: List[str]) -> Result[None]:
        ...

    @abstractmethod
    def commit(self, message: str) -> Result[str]:
        """Commit the index and return the new commit hash."""

    @abstractmethod
    def reset(self, ref: str, mode: str = "soft") -> Result[None]:
        ...

    @abstractmethod
    def fetch(self, remote: str = "origin") -> Result[None]:
        ...

    @abstractmethod
    def get_remote_url(self, remote: str = "origin") -> Result[str]:
        ...

    @abstractmethod
    def get_current_branch(self) -> Result[str]:
        ...

    @abstractmethod
    def diff(self, revision: str) -> Result[str]:
        """Return ``STATUS<TAB>path`` lines for ``revision`` (e.g. ``HEAD..origin/main``)."""

    @abstractmethod
    def get_diff(self) -> Result[str]:
        """Return ``STATUS<TAB>path`` lines for the staged changes."""
