"""Tests for gitlane.branches.tree module."""

from datetime import datetime, timedelta, timezone

from gitlane.branches import (
    BranchGroup,
    BranchLeaf,
    build_branch_tree,
    guess_best_parent,
    iter_branch_names,
)
from gitlane.parsing.models import BranchInfo


BASE_DATE = datetime(2024, 6, 1, tzinfo=timezone.utc)


def branch(name, age_days=0, upstream="", remote=False, head="1234567890abcdef"):
    full_ref = f"refs/remotes/{name}" if remote else f"refs/heads/{name}"
    return BranchInfo(
        name=name,
        full_ref=full_ref,
        head=head,
        upstream=upstream,
        committer_date=BASE_DATE - timedelta(days=age_days),
        is_remote=remote,
    )


class TestGuessBestParent:
    """Tests for guess_best_parent function."""

    def test_feature_prefers_develop(self):
        assert guess_best_parent("feature/login", ["main", "develop"]) == "develop"

    def test_feature_falls_back_to_main(self):
        assert guess_best_parent("bugfix/crash", ["master"]) == "master"

    def test_release_prefers_main(self):
        assert guess_best_parent("hotfix/urgent", ["main", "develop"]) == "main"
        assert guess_best_parent("release/2.0", ["develop"]) == "develop"

    def test_other_branches(self):
        assert guess_best_parent("experiment", ["main", "develop"]) == "main"
        assert guess_best_parent("experiment", ["trunk"]) == "trunk"

    def test_no_trunk(self):
        assert guess_best_parent("feature/x", []) is None
        assert guess_best_parent("  ", ["main"]) is None


class TestBuildBranchTree:
    """Tests for build_branch_tree function."""

    def setup_method(self):
        self.branches = [
            branch("main", age_days=3),
            branch("develop", age_days=1),
            branch("feature/login", age_days=0),
            branch("origin/main", age_days=3, remote=True),
            branch("origin/feature/login", age_days=0, remote=True),
            branch("upstream/main", age_days=5, remote=True),
        ]

    def test_infers_parent_and_nests(self):
        """Test that feature/login nests under develop."""
        local_group, _ = build_branch_tree(self.branches)

        assert isinstance(local_group, BranchGroup)
        assert local_group.id == "group:locals"
        assert local_group.title == "Local branches"
        assert [node.title for node in local_group.children] == ["develop", "main"]

        develop = local_group.children[0]
        assert isinstance(develop, BranchLeaf)
        assert develop.id == "local:develop"
        assert [child.branch_name for child in develop.children] == ["feature/login"]
        assert develop.children[0].subtitle == "from: develop | HEAD 12345678"

    def test_quick_inference_subtitle(self):
        local_group, _ = build_branch_tree(self.branches)
        assert local_group.subtitle == "3 (quick inference)"

    def test_fork_hint_from_merge_base(self):
        calls = []

        def merge_base(lhs, rhs):
            calls.append((lhs, rhs))
            return "abcdef0123456789"

        local_group, _ = build_branch_tree(self.branches, merge_base=merge_base)

        assert local_group.subtitle == "3"
        assert calls == [("feature/login", "develop")]
        leaf = local_group.children[0].children[0]
        assert leaf.subtitle == "from: develop | fork: abcdef01 | HEAD 12345678"

    def test_without_inference(self):
        local_group, _ = build_branch_tree(self.branches, infer_origins=False)

        assert local_group.subtitle == "3"
        assert [node.branch_name for node in local_group.children] == [
            "feature/login",
            "develop",
            "main",
        ]
        assert all(node.children == () for node in local_group.children)

    def test_upstream_takes_precedence(self):
        branches = [
            branch("main"),
            branch("feature/pay", upstream="origin/feature/pay"),
        ]

        local_group, _ = build_branch_tree(branches)

        leaf = next(n for n in local_group.children if n.branch_name == "feature/pay")
        assert leaf.subtitle == "from: origin/feature/pay | upstream: origin/feature/pay"

    def test_remote_groups(self):
        _, remote_group = build_branch_tree(self.branches)

        assert remote_group.id == "group:remotes"
        assert remote_group.subtitle == "3"
        assert [group.title for group in remote_group.children] == ["origin", "upstream"]

        origin = remote_group.children[0]
        assert origin.id == "group:remote:origin"
        assert origin.subtitle == "2"
        assert [leaf.title for leaf in origin.children] == ["feature/login", "main"]
        assert origin.children[0].id == "remote:origin/feature/login"

    def test_many_roots_grouped_by_namespace(self):
        branches = [branch(f"team/topic-{i}", age_days=i) for i in range(21)]
        branches.append(branch("solo"))

        local_group, _ = build_branch_tree(branches, infer_origins=False)

        assert [group.title for group in local_group.children] == ["misc", "team"]
        misc, team = local_group.children
        assert misc.id == "local-namespace:misc"
        assert misc.children[0].title == "solo"
        assert team.subtitle == "21"
        assert team.children[0].title == "topic-0"
        assert team.children[0].id == "local-grouped:team/topic-0"

    def test_iter_branch_names(self):
        names = iter_branch_names(build_branch_tree(self.branches))

        assert names == [
            "develop",
            "feature/login",
            "main",
            "origin/feature/login",
            "origin/main",
            "upstream/main",
        ]

    def test_empty(self):
        local_group, remote_group = build_branch_tree([])
        assert local_group.children == ()
        assert remote_group.children == ()
        assert remote_group.subtitle == "0"
