from typing import Dict, List, Optional
from unittest.mock import Mock

import pytest

from vc_change_engine.log import Logger
from vc_change_engine.result import Result, failure, success
from vc_change_engine.vcs.provider import GitFileChange, GitProvider, GitStatus


class FakeGitProvider(GitProvider):
    """In-memory provider recording every call.

    ``results`` maps a method name to either a single result returned on
    every call or a list consumed one item per call.
    """

    def __init__(self, **results) -> None:
        self.calls: List[tuple] = []
        self.results: Dict[str, object] = {
            "status": success(GitStatus("main", False, 0, 0, 0)),
            "get_all_changes": success([]),
            "stage": success(None),
            "commit": success("deadbeef"),
            "reset": success(None),
            "fetch": success(None),
            "get_remote_url": success("https://github.com/acme/widgets.git"),
            "get_current_branch": success("main"),
            "diff": success(""),
            "get_diff": success(""),
        }
        self.results.update(results)

    def _answer(self, name: str, *args) -> Result:
        self.calls.append((name,) + args)
        value = self.results[name]
        if isinstance(value, list):
            value = value.pop(0)
        if isinstance(value, Exception):
            raise value
        return value

    def calls_to(self, name: str) -> List[tuple]:
        return [call[1:] for call in self.calls if call[0] == name]

    def status(self):
        return self._answer("status")

    def get_all_changes(self):
        return self._answer("get_all_changes")

    def stage(self, paths):
        return self._answer("stage", list(paths))

    def commit(self, message):
        return self._answer("commit", message)

    def reset(self, ref, mode="soft"):
        return self._answer("reset", ref, mode)

    def fetch(self, remote="origin"):
        return self._answer("fetch", remote)

    def get_remote_url(self, remote="origin"):
        return self._answer("get_remote_url", remote)

    def get_current_branch(self):
        return self._answer("get_current_branch")

    def diff(self, revision):
        return self._answer("diff", revision)

    def get_diff(self):
        return self._answer("get_diff")


@pytest.fixture
def provider():
    return FakeGitProvider()


@pytest.fixture
def make_provider():
    return FakeGitProvider


@pytest.fixture
def logger():
    return Mock(spec=Logger)


@pytest.fixture
def git_failure():
    def _make(op: str = "commit", message: Optional[str] = None):
        return failure("GIT_OPERATION_FAILED", message or f"git {op} failed: boom", context="GitClient")

    return _make
