import unittest

from vc_change_engine.grouping.extraction import extract_domain, file_type, to_file_changes
from vc_change_engine.grouping.group_model import FileChange
from vc_change_engine.vcs.provider import GitFileChange


class TestExtractDomain(unittest.TestCase):
    def test_domains_directory_uses_third_segment(self) -> None:
        self.assertEqual(extract_domain("src/domains/git/service.ts"), "git")
        self.assertEqual(extract_domain("src/domains/auth/login/form.py"), "auth")

    def test_infrastructure_directory(self) -> None:
        self.assertEqual(extract_domain("src/infrastructure/logger.ts"), "infrastructure")

    def test_other_paths_use_first_segment(self) -> None:
        self.assertEqual(extract_domain("docs/guide.md"), "docs")
        self.assertEqual(extract_domain("src/cli.py"), "src")
        self.assertEqual(extract_domain("README.md"), "README.md")

    def test_domains_without_name_falls_back(self) -> None:
        self.assertEqual(extract_domain("src/domains"), "src")

    def test_empty_path_is_root(self) -> None:
        self.assertEqual(extract_domain(""), "root")
        self.assertEqual(extract_domain("/abs/path"), "root")


class TestFileType(unittest.TestCase):
    def test_lowercase_extension_with_dot(self) -> None:
        self.assertEqual(file_type("src/app/Main.PY"), ".py")
        self.assertEqual(file_type("docs/guide.md"), ".md")

    def test_last_extension_only(self) -> None:
        self.assertEqual(file_type("dist/bundle.min.js"), ".js")

    def test_no_extension(self) -> None:
        self.assertEqual(file_type("Makefile"), "")
        self.assertEqual(file_type("some.dir/Makefile"), "")
        self.assertEqual(file_type("trailing."), "")


def test_to_file_changes_annotates_each_record():
    records = [
        GitFileChange(path="src/domains/auth/token.ts", status="A", additions=10, deletions=0),
        GitFileChange(path="README.md", status="M", additions=2, deletions=1),
    ]

    changes = to_file_changes(records)

    assert changes == [
        FileChange(path="src/domains/auth/token.ts", status="A", domain="auth", file_type=".ts", additions=10),
        FileChange(path="README.md", status="M", domain="README.md", file_type=".md", additions=2, deletions=1),
    ]


def test_to_file_changes_empty():
    assert to_file_changes([]) == []
