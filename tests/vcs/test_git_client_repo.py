"""Exercise GitClient and ChangeEngine against a throwaway git repository."""

import shutil
import subprocess
import tempfile
import unittest
from pathlib import Path

from vc_change_engine.log import StdLogger
from vc_change_engine.service import ChangeEngine
from vc_change_engine.vcs.git_client import GitClient


def git(root: Path, *args: str) -> str:
    return subprocess.run(
        ["git", *args], cwd=root, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True
    ).stdout


@unittest.skipUnless(shutil.which("git"), "git executable not available")
class TestGitClientRepository(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        git(self.root, "init", "-q")
        git(self.root, "config", "user.email", "dev@example.com")
        git(self.root, "config", "user.name", "Dev")
        git(self.root, "config", "commit.gpgsign", "false")
        self.write("docs/a.md", "intro\n")
        self.write("lib/b.py", "b = 1\n")
        self.write("lib/c.py", "c = 1\n")
        git(self.root, "add", "-A")
        git(self.root, "commit", "-q", "-m", "initial")
        self.client = GitClient(self.root)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def write(self, path: str, content: str) -> None:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    def committed_paths(self, rev: str):
        out = git(self.root, "show", "--name-only", "--format=", rev)
        return sorted(line for line in out.splitlines() if line)

    def smart_commit(self):
        return ChangeEngine(self.client, StdLogger()).smart_commit(auto_approve=True)

    def test_already_staged_deletion_is_committed(self) -> None:
        git(self.root, "rm", "-q", "lib/b.py")

        result = self.smart_commit()

        self.assertTrue(result.ok, result)
        self.assertEqual(len(result.value.commits), 1)
        self.assertEqual(self.committed_paths("HEAD"), ["lib/b.py"])
        self.assertEqual(git(self.root, "status", "--porcelain"), "")

    def test_unstaged_deletion_is_committed(self) -> None:
        (self.root / "lib/b.py").unlink()

        result = self.smart_commit()

        self.assertTrue(result.ok, result)
        self.assertEqual(self.committed_paths("HEAD"), ["lib/b.py"])

    def test_prestaged_files_stay_in_their_own_groups(self) -> None:
        self.write("docs/a.md", "intro\nmore\n")
        self.write("lib/c.py", "c = 2\n")
        git(self.root, "add", "docs/a.md", "lib/c.py")

        result = self.smart_commit()

        self.assertTrue(result.ok, result)
        self.assertEqual([c.files for c in result.value.commits], [["docs/a.md"], ["lib/c.py"]])
        self.assertEqual(self.committed_paths("HEAD~1"), ["docs/a.md"])
        self.assertEqual(self.committed_paths("HEAD"), ["lib/c.py"])

    def test_added_path_with_space_keeps_added_status(self) -> None:
        self.write("lib/my file.py", "x = 1\n")
        git(self.root, "add", "lib/my file.py")

        changes = self.client.get_all_changes()

        self.assertTrue(changes.ok, changes)
        by_path = {change.path: change.status for change in changes.value}
        self.assertEqual(by_path, {"lib/my file.py": "A"})

        planned = ChangeEngine(self.client, StdLogger()).plan_commit()
        self.assertEqual(planned.value[0].suggested_message.type, "feat")


if __name__ == "__main__":
    unittest.main()
