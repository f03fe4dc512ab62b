import itertools
from collections import Counter

import pytest

from vc_change_engine.grouping.change_grouper import SIMILARITY_THRESHOLD, ChangeGrouper, similarity_score
from vc_change_engine.grouping.group_model import FileChange


def change(path, status="M", domain="core", file_type=".py"):
    return FileChange(path=path, status=status, domain=domain, file_type=file_type)


def sequential_ids():
    counter = itertools.count(1)
    return lambda: f"g{next(counter)}"


def test_identical_changes_score_one():
    assert similarity_score(change("a.py"), change("b.py")) == pytest.approx(1.0)


def test_fully_mismatched_changes_score_below_threshold():
    a = change("a.py", status="A", domain="auth", file_type=".py")
    b = change("b.md", status="D", domain="docs", file_type=".md")
    score = similarity_score(a, b)
    assert score == pytest.approx(0.7 / 3)
    assert score < SIMILARITY_THRESHOLD


def test_empty_input_gives_no_groups():
    assert ChangeGrouper().group([]) == []


def test_single_change_is_singleton_with_full_similarity():
    groups = ChangeGrouper().group([change("a.py")])
    assert len(groups) == 1
    assert groups[0].similarity == 1.0
    assert [c.path for c in groups[0].files] == ["a.py"]


def test_similar_changes_land_together_and_dissimilar_apart():
    a = change("src/a.py")
    b = change("src/b.py")
    c = change("docs/c.md", status="A", domain="docs", file_type=".md")

    groups = ChangeGrouper().group([a, b, c])

    assert [[f.path for f in g.files] for g in groups] == [["src/a.py", "src/b.py"], ["docs/c.md"]]
    assert groups[0].similarity == pytest.approx(1.0)


def test_same_domain_different_status_joins_seed():
    # (0.5 + 1.0 + 0.5) / 3 = 0.667 > 0.4
    seed = change("core/a.py", status="A")
    other = change("core/b.py", status="D")
    groups = ChangeGrouper().group([seed, other])
    assert len(groups) == 1
    assert groups[0].similarity == pytest.approx(2.0 / 3)


def test_different_domain_same_status_and_type_stays_apart():
    # (1.0 + 0.0 + 0.5) / 3 = 0.5 > 0.4 joins; (0.5 + 0.0 + 0.5) / 3 = 0.333 does not
    seed = change("a/x.py", domain="a")
    same_kind = change("b/y.py", domain="b")
    other_status = change("c/z.py", status="A", domain="c")
    groups = ChangeGrouper().group([seed, same_kind, other_status])
    assert [[f.path for f in g.files] for g in groups] == [["a/x.py", "b/y.py"], ["c/z.py"]]


def test_members_are_only_compared_with_the_seed():
    seed = change("core/a.py", status="M", domain="core", file_type=".py")
    # Joins the seed via domain, but is unlike the third change.
    bridge = change("core/b.md", status="A", domain="core", file_type=".md")
    third = change("core/c.py", status="M", domain="core", file_type=".py")
    groups = ChangeGrouper().group([seed, bridge, third])
    assert len(groups) == 1
    expected = (similarity_score(seed, bridge) + similarity_score(seed, third)) / 2
    assert groups[0].similarity == pytest.approx(expected)


def test_partition_keeps_every_change_exactly_once():
    changes = [
        change("src/a.py"),
        change("docs/b.md", status="A", domain="docs", file_type=".md"),
        change("src/a.py"),  # duplicate record must survive
        change("lib/c.js", status="D", domain="lib", file_type=".js"),
        change("docs/d.md", status="A", domain="docs", file_type=".md"),
        change("lib/e.ts", status="R", domain="lib", file_type=".ts"),
    ]

    groups = ChangeGrouper().group(changes)

    grouped = [f for g in groups for f in g.files]
    assert Counter(grouped) == Counter(changes)
    assert all(g.files for g in groups)


def test_grouping_is_deterministic_for_same_order():
    changes = [
        change("src/a.py"),
        change("docs/b.md", status="A", domain="docs", file_type=".md"),
        change("lib/c.js", status="D", domain="lib", file_type=".js"),
        change("src/d.py", status="A"),
    ]
    first = ChangeGrouper(id_factory=sequential_ids()).group(changes)
    second = ChangeGrouper(id_factory=sequential_ids()).group(changes)
    assert first == second


def test_group_ids_are_unique():
    changes = [change("a/x.py", domain="a", status="A", file_type=".md"),
               change("b/x.py", domain="b", status="D", file_type=".py")]
    groups = ChangeGrouper().group(changes)
    assert len({g.id for g in groups}) == len(groups) == 2


def test_all_identical_changes_form_one_group():
    changes = [change(f"core/{n}.py") for n in range(5)]
    groups = ChangeGrouper().group(changes)
    assert len(groups) == 1
    assert [f.path for f in groups[0].files] == [c.path for c in changes]


def test_custom_threshold():
    a = change("a/x.py", domain="a")
    b = change("b/y.py", domain="b")  # scores 0.5
    assert len(ChangeGrouper(threshold=0.5).group([a, b])) == 2
    assert len(ChangeGrouper(threshold=0.4).group([a, b])) == 1
