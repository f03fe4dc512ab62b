"""
Git provider implementation for vc_change_engine.

This module wraps the Git operations required by the change engine. All
subprocess calls go through :meth:`GitClient._run`, which raises
:class:`GitError` on failure so unit tests can mock a single seam. The
public provider methods translate that exception into an ``Err`` result
so nothing raises across the provider boundary.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Dict, List, Optional

from vc_change_engine.result import ErrorCode, Result, failure, success
from vc_change_engine.vcs.provider import GitFileChange, GitProvider, GitStatus


logger = logging.getLogger(__name__)
# Attach a null handler to avoid logging errors when the root logger is not
# configured. Logs will propagate to the root when configured by the CLI.
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

DEFAULT_TIMEOUT = 30.0
RESET_MODES = ("soft", "mixed", "hard")


class GitError(Exception):
    """Raised when a Git command fails."""

    pass


def _resolve_rename_path(path: str) -> str:
    """Return the destination path of a numstat rename entry.

    ``git diff --numstat`` reports renames either as ``old => new`` or,
    when the paths share a prefix/suffix, as ``dir/{old => new}/file``.
    """
    if " => " not in path:
        return path
    if "{" in path and "}" in path:
        start = path.index("{")
        end = path.index("}", start)
        inner = path[start + 1:end]
        new_part = inner.split(" => ", 1)[1]
        resolved = path[:start] + new_part + path[end + 1:]
        return resolved.replace("//", "/")
    return path.split(" => ", 1)[1]


class GitClient(GitProvider):
    """Client for interacting with a Git repository."""

    def __init__(self, repo_root: Path, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.repo_root = repo_root
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Static helpers
    # ------------------------------------------------------------------
    @staticmethod
    def find_repo_root(start: Path) -> Optional[Path]:
        """Find the root of the Git repository starting from ``start``.

        Walk upwards until a ``.git`` entry is found or the filesystem
        root is reached.
        """
        current = start.resolve()
        while True:
            if (current / ".git").exists():
                return current
            if current.parent == current:
                return None
            current = current.parent

    # ------------------------------------------------------------------
    # Subprocess plumbing
    # ------------------------------------------------------------------
    def _run(self, args: List[str], check: bool = True) -> subprocess.CompletedProcess:
        """Run a Git command in the repository root.

        Raises
        ------
        GitError
            If the command cannot be run, times out, or exits with a
            non-zero status when ``check`` is True.
        """
        full_cmd = ["git"] + args
        logger.debug("Executing Git command: %s", " ".join(full_cmd))
        try:
            result = subprocess.run(
                full_cmd,
                cwd=self.repo_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            logger.error("Git command timed out after %ss: %s", self.timeout, " ".join(full_cmd))
            raise GitError(f"timed out after {self.timeout}s") from exc
        except OSError as exc:
            logger.error("Could not execute git: %s", exc)
            raise GitError(str(exc)) from exc

        if check and result.returncode != 0:
            logger.error(
                "Git command failed: %s\nSTDOUT: %s\nSTDERR: %s",
                " ".join(full_cmd),
                result.stdout,
                result.stderr,
            )
            raise GitError(result.stderr.strip() or result.stdout.strip())
        return result

    def _git(self, args: List[str]) -> Result[str]:
        """Run a Git command and return its trimmed stdout as a result."""
        try:
            proc = self._run(args, check=True)
        except GitError as exc:
            return failure(
                ErrorCode.GIT_OPERATION_FAILED,
                f"git {args[0] if args else 'unknown'} failed: {exc}",
                details=exc,
                context="GitClient",
            )
        return success(proc.stdout.rstrip())

    # ------------------------------------------------------------------
    # Status and change detection
    # ------------------------------------------------------------------
    def status(self) -> Result[GitStatus]:
        branch = self.get_current_branch()
        if not branch.ok:
            return branch
        porcelain = self._git(["status", "--porcelain=v1"])
        if not porcelain.ok:
            return porcelain

        lines = [line for line in porcelain.value.splitlines() if line]
        staged = unstaged = untracked = 0
        for line in lines:
            x = line[0] if len(line) > 0 else " "
            y = line[1] if len(line) > 1 else " "
            if x == "?":
                untracked += 1
                continue
            if x != " ":
                staged += 1
            if y not in (" ", "?"):
                unstaged += 1

        return success(
            GitStatus(
                branch=branch.value,
                is_dirty=bool(lines),
                staged=staged,
                unstaged=unstaged,
                untracked=untracked,
            )
        )

    def _status_letters(self) -> Result[Dict[str, str]]:
        """Map each changed path to a single status letter from porcelain output.

        ``-z`` keeps paths unquoted so they match the numstat paths, and
        puts the source path of a rename or copy in its own entry.
        """
        porcelain = self._git(["status", "--porcelain=v1", "-z"])
        if not porcelain.ok:
            return porcelain
        letters: Dict[str, str] = {}
        entries = iter(porcelain.value.split("\0"))
        for entry in entries:
            # XY<space>path
            if len(entry) < 4 or entry.startswith("??"):
                continue
            x, y = entry[0], entry[1]
            if x in ("R", "C") or y in ("R", "C"):
                next(entries, None)
            code = x if x != " " else y
            letters[entry[3:]] = code if code in ("A", "D", "R") else "M"
        return success(letters)

    def get_all_changes(self) -> Result[List[GitFileChange]]:
        staged = self._git(["diff", "--cached", "--numstat"])
        if not staged.ok:
            return staged
        unstaged = self._git(["diff", "--numstat"])
        if not unstaged.ok:
            return unstaged
        letters = self._status_letters()
        if not letters.ok:
            return letters

        # Insertion ordered so the grouping downstream stays deterministic.
        totals: Dict[str, List[int]] = {}
        for raw in (staged.value, unstaged.value):
            for line in raw.splitlines():
                parts = line.split("\t")
                if len(parts) < 3:
                    continue
                path = _resolve_rename_path(parts[2].strip())
                if not path:
                    continue
                # Binary files report '-' for both counts.
                additions = int(parts[0]) if parts[0].isdigit() else 0
                deletions = int(parts[1]) if parts[1].isdigit() else 0
                entry = totals.setdefault(path, [0, 0])
                entry[0] += additions
                entry[1] += deletions

        changes = [
            GitFileChange(
                path=path,
                status=letters.value.get(path, "M"),
                additions=counts[0],
                deletions=counts[1],
            )
            for path, counts in totals.items()
        ]
        return success(changes)

    def get_current_branch(self) -> Result[str]:
        return self._git(["rev-parse", "--abbrev-ref", "HEAD"])

    # ------------------------------------------------------------------
    # Staging, committing, resetting
    # ------------------------------------------------------------------
    def stage(self, paths: List[str]) -> Result[None]:
        """Make the index hold exactly the changes to ``paths``.

        The index is first reset to ``HEAD`` so that changes staged for
        other paths stay out of the next commit. ``git add -A`` then
        records additions, modifications and deletions alike, including
        deletions that had already been staged before the reset.
        """
        if not paths:
            return success(None)
        reset = self._git(["reset", "-q"])
        if not reset.ok:
            return reset
        added = self._git(["add", "-A", "--"] + list(paths))
        if not added.ok:
            return added
        return success(None)

    def commit(self, message: str) -> Result[str]:
        committed = self._git(["commit", "-m", message])
        if not committed.ok:
            return committed
        return self._git(["rev-parse", "HEAD"])

    def reset(self, ref: str, mode: str = "soft") -> Result[None]:
        if mode not in RESET_MODES:
            return failure(
                ErrorCode.INVALID_PARAMS,
                f"Unsupported reset mode '{mode}'",
                context="GitClient.reset",
            )
        result = self._git(["reset", f"--{mode}", ref])
        if not result.ok:
            return result
        return success(None)

    # ------------------------------------------------------------------
    # Remote inspection
    # ------------------------------------------------------------------
    def fetch(self, remote: str = "origin") -> Result[None]:
        result = self._git(["fetch", remote])
        if not result.ok:
            return result
        return success(None)

    def get_remote_url(self, remote: str = "origin") -> Result[str]:
        return self._git(["remote", "get-url", remote])

    def diff(self, revision: str) -> Result[str]:
        return self._git(["diff", "--name-status", revision])

    def get_diff(self) -> Result[str]:
        return self._git(["diff", "--cached", "--name-status"])
