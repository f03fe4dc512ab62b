"""
Inbound change analysis.

The analyzer fetches the remote, lists what changed between ``HEAD`` and
the remote tracking branch, lists what is staged locally and reports the
paths that appear on both sides together with a severity:

=========  ==========  ========
local      remote      severity
=========  ==========  ========
M          M           high
M          D           high
D          M           high
A          A           medium
=========  ==========  ========

Any other pair present on both sides is not reported.

Apart from the initial ``fetch`` nothing here touches the repository.
Intermediate problems (unparsable lines, a failing summary, a remote URL
that cannot be turned into a link) degrade to empty or fallback values
and are logged. Only a missing precondition such as an unusable branch
name fails the whole analysis.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from vc_change_engine.grouping.extraction import file_type
from vc_change_engine.inbound.models import (
    ChangesSummary,
    ConflictFile,
    InboundChanges,
    SeverityCounts,
)
from vc_change_engine.log import Logger
from vc_change_engine.result import AppError, ErrorCode, Result, failure, success
from vc_change_engine.vcs.provider import GitProvider


CONTEXT = "InboundAnalyzer"
DEFAULT_REMOTE = "origin"
UP_TO_DATE = "Remote branch is up-to-date"
MAX_LISTED_CONFLICTS = 3
LOCAL_REF = "local"
NO_EXTENSION = "(none)"

# (local, remote) -> (severity, estimate local side, estimate remote side)
CONFLICT_RULES: Dict[Tuple[str, str], Tuple[str, bool, bool]] = {
    ("M", "M"): ("high", True, True),
    ("M", "D"): ("high", True, False),
    ("D", "M"): ("high", False, True),
    ("A", "A"): ("medium", True, True),
}

LOCAL_ACTIONS = {"D": "deleted", "A": "added"}

HOST_PATTERNS = [
    ("github.com", re.compile(r"github\.com[:/](.+?)/(.+?)(?:\.git)?$"),
     "https://github.com/{owner}/{repo}/compare/{branch}...{remote}/{branch}"),
    ("gitlab.com", re.compile(r"gitlab\.com[:/](.+?)/(.+?)(?:\.git)?$"),
     "https://gitlab.com/{owner}/{repo}/-/compare/{branch}...{remote}/{branch}"),
    ("bitbucket", re.compile(r"bitbucket\.org[:/](.+?)/(.+?)(?:\.git)?$"),
     "https://bitbucket.org/{owner}/{repo}/compare/{branch}...{remote}/{branch}"),
]


def parse_name_status(text: Optional[str], logger: Optional[Logger] = None) -> Dict[str, str]:
    """Parse ``STATUS<whitespace>path`` lines into an ordered path -> status map.

    Blank lines are ignored; lines without both a status and a path are
    skipped. A path listed twice keeps its first position and its last
    status.
    """
    changes: Dict[str, str] = {}
    if not text or not isinstance(text, str):
        return changes

    for line in text.strip().splitlines():
        if not line.strip():
            continue
        parts = line.split()
        if len(parts) < 2:
            if logger:
                logger.debug(f"Skipping malformed diff line: {line!r}", f"{CONTEXT}.parse")
            continue
        status, path = parts[0], " ".join(parts[1:])
        if not status or not path:
            if logger:
                logger.debug("Skipping line with empty status or path", f"{CONTEXT}.parse")
            continue
        changes[path] = status
    return changes


def estimate_changes(path: str, ref: str) -> int:
    """Deterministic stand-in for the size of a change, between 1 and 100.

    This is not read from git. It hashes ``path|ref`` (31-multiplier hash
    wrapped to a signed 32-bit integer) so the same inputs always give
    the same number. Returns 0 when either argument is empty.
    """
    if not path or not ref:
        return 0
    value = 0
    for char in f"{path}|{ref}":
        value = (value * 31 + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value) % 100 + 1


def fallback_diff_link(branch: str, remote: str = DEFAULT_REMOTE) -> str:
    return f"View with: git diff HEAD..{remote}/{branch or 'HEAD'}"


def build_diff_link(remote_url: str, branch: str, remote: str = DEFAULT_REMOTE) -> str:
    """Build a web compare link for GitHub, GitLab or Bitbucket remotes.

    Falls back to a ``git diff`` hint when the host is not recognised or
    either argument is unusable.
    """
    if not remote_url or not isinstance(remote_url, str) or not branch:
        return fallback_diff_link(branch, remote)

    url = remote_url.strip().rstrip("/")
    for host, pattern, template in HOST_PATTERNS:
        if host not in url:
            continue
        match = pattern.search(url)
        if match and match.group(1).strip() and match.group(2).strip():
            return template.format(
                owner=match.group(1).strip(),
                repo=match.group(2).strip(),
                branch=branch,
                remote=remote,
            )
    return fallback_diff_link(branch, remote)


class InboundAnalyzer:
    """Detect conflicts between local staged changes and the remote branch."""

    def __init__(
        self,
        provider: GitProvider,
        logger: Logger,
        remote: str = DEFAULT_REMOTE,
        max_listed_conflicts: int = MAX_LISTED_CONFLICTS,
    ) -> None:
        self.provider = provider
        self.logger = logger
        self.remote = remote
        self.max_listed_conflicts = max_listed_conflicts

    def analyze(self) -> Result[InboundChanges]:
        try:
            return self._analyze()
        except Exception as exc:
            self.logger.error("Inbound analysis failed", CONTEXT, exc)
            return failure(
                ErrorCode.INBOUND_ANALYSIS_ERROR,
                "Failed to analyze inbound changes; check git is installed with: git --version",
                details=exc,
                context=f"{CONTEXT}.analyze",
            )

    def _analyze(self) -> Result[InboundChanges]:
        self.logger.info(f"Fetching from {self.remote}...", CONTEXT)
        fetched = self.provider.fetch(self.remote)
        if not fetched.ok:
            return fetched

        current = self.provider.get_current_branch()
        if not current.ok:
            return current
        branch = current.value.strip() if isinstance(current.value, str) else ""
        # 'HEAD' is what git reports for a detached HEAD; there is no
        # tracking branch to compare against then.
        if not branch or branch == "HEAD":
            return failure(
                ErrorCode.INBOUND_ANALYSIS_ERROR,
                f"Invalid branch name from git provider: {current.value!r}",
                context=f"{CONTEXT}.analyze",
            )

        upstream = f"{self.remote}/{branch}"
        inbound_diff = self.provider.diff(f"HEAD..{upstream}")
        if not inbound_diff.ok:
            return inbound_diff
        if inbound_diff.value is None:
            return failure(
                ErrorCode.INBOUND_DIFF_PARSE_ERROR,
                "Git provider returned no diff output",
                context=f"{CONTEXT}.analyze",
            )

        if not inbound_diff.value.strip():
            return success(self._up_to_date(branch))

        local_diff = self.provider.get_diff()
        if not local_diff.ok:
            return local_diff
        if local_diff.value is None:
            self.logger.warn("Local diff is empty; treating as no local changes", CONTEXT)

        inbound = parse_name_status(inbound_diff.value, self.logger)
        local = parse_name_status(local_diff.value, self.logger)
        if not inbound:
            self.logger.warn("No inbound changes could be parsed from the diff", CONTEXT)

        conflicts = self.detect_conflicts(inbound, local, branch)
        summary = self.summarize(inbound, conflicts)
        diff_link = self._diff_link(branch)

        self.logger.info(
            f"Inbound analysis: {len(inbound)} remote change(s), {len(conflicts)} conflict(s)",
            CONTEXT,
        )
        return success(
            InboundChanges(
                remote=self.remote,
                branch=branch,
                total_inbound=len(inbound),
                total_local=len(local),
                conflicts=conflicts,
                summary=summary,
                diff_link=diff_link,
            )
        )

    def _up_to_date(self, branch: str) -> InboundChanges:
        return InboundChanges(
            remote=self.remote,
            branch=branch,
            total_inbound=0,
            total_local=0,
            conflicts=[],
            summary=ChangesSummary(
                description=UP_TO_DATE,
                recommendations=["✅ No remote changes detected. Fully synced."],
            ),
            diff_link=fallback_diff_link(branch, self.remote),
        )

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------
    def detect_conflicts(
        self,
        inbound: Dict[str, str],
        local: Dict[str, str],
        branch: str,
    ) -> List[ConflictFile]:
        """Classify every path changed on both sides.

        Returns whatever was classified before an unexpected error, if any.
        """
        conflicts: List[ConflictFile] = []
        if inbound is None or local is None or not branch:
            self.logger.warn("Invalid conflict detection input; reporting no conflicts", CONTEXT)
            return conflicts

        remote_ref = f"{self.remote}/{branch}"
        try:
            for path, remote_status in inbound.items():
                local_status = local.get(path)
                if not path or not remote_status or not local_status:
                    continue
                rule = CONFLICT_RULES.get((local_status, remote_status))
                if rule is None:
                    continue
                severity, estimate_local, estimate_remote = rule
                conflicts.append(
                    ConflictFile(
                        path=path,
                        local_status=local_status,
                        remote_status=remote_status,
                        severity=severity,
                        local_changes=estimate_changes(path, LOCAL_REF) if estimate_local else 0,
                        remote_changes=estimate_changes(path, remote_ref) if estimate_remote else 0,
                    )
                )
        except Exception as exc:
            self.logger.error(
                "Error during conflict detection",
                CONTEXT,
                AppError(
                    code=ErrorCode.CONFLICT_DETECTION_ERROR,
                    message="Failed to detect conflicts",
                    details=exc,
                ),
            )
        return conflicts

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def summarize(self, inbound: Dict[str, str], conflicts: List[ConflictFile]) -> ChangesSummary:
        try:
            counts = SeverityCounts(
                high=sum(1 for c in conflicts if c.severity == "high"),
                medium=sum(1 for c in conflicts if c.severity == "medium"),
                low=sum(1 for c in conflicts if c.severity == "low"),
            )

            file_types: Dict[str, int] = {}
            for path in inbound:
                key = file_type(path) or NO_EXTENSION
                file_types[key] = file_types.get(key, 0) + 1

            total = len(inbound)
            changes = f"{total} inbound change{'s' if total != 1 else ''}"
            if conflicts:
                plural = "s" if len(conflicts) != 1 else ""
                description = f"{len(conflicts)} potential conflict{plural} in {changes}"
            else:
                description = f"0 conflicts in {changes}"

            return ChangesSummary(
                description=description,
                conflicts=counts,
                file_types=file_types,
                recommendations=self.recommendations(conflicts),
            )
        except Exception as exc:
            self.logger.error(
                "Error during summary generation",
                CONTEXT,
                AppError(
                    code=ErrorCode.INBOUND_ANALYSIS_ERROR,
                    message="Failed to summarize changes",
                    details=exc,
                ),
            )
            return ChangesSummary(
                description="Unable to summarize changes",
                recommendations=["⚠️ Summary generation failed"],
            )

    def recommendations(self, conflicts: List[ConflictFile]) -> List[str]:
        recs: List[str] = []

        high = [c for c in conflicts if c.severity == "high"]
        if high:
            recs.append(f"⚠️  Review {len(high)} high-severity conflict{'s' if len(high) != 1 else ''}")
            for conflict in high[: self.max_listed_conflicts]:
                action = LOCAL_ACTIONS.get(conflict.local_status, "modified")
                recs.append(f"  • You {action} {conflict.path}, remote changed it")
            hidden = len(high) - self.max_listed_conflicts
            if hidden > 0:
                recs.append(f"  • ... and {hidden} more")

        medium = [c for c in conflicts if c.severity == "medium"]
        if medium:
            recs.append(f"📋 Both sides added {len(medium)} file{'s' if len(medium) != 1 else ''}")

        if not conflicts:
            recs.append("✅ No conflicts detected. Safe to pull.")
        return recs

    def _diff_link(self, branch: str) -> str:
        try:
            remote_url = self.provider.get_remote_url(self.remote)
            if remote_url.ok and remote_url.value:
                return build_diff_link(remote_url.value, branch, self.remote)
        except Exception as exc:
            self.logger.warn("Failed to generate diff link; using fallback", CONTEXT, exc)
            return fallback_diff_link(branch, self.remote)
        self.logger.debug("No remote URL available; using git diff hint", CONTEXT)
        return fallback_diff_link(branch, self.remote)
