"""Tests for gitlane.snapshot.builder module."""

import pytest

from gitlane.git.exceptions import GitCommandError, RepositoryNotSelectedError
from gitlane.git.runner import CommandResult
from gitlane.parsing.models import SubmoduleStatus
from gitlane.snapshot import MIN_COMMIT_LIMIT, RepositorySnapshot, RepositorySnapshotBuilder


HASH_M = "1" * 40
HASH_F = "2" * 40
HASH_P = "3" * 40


@pytest.fixture
def log_output(record):
    return (
        record(HASH_M, f"{HASH_P} {HASH_F}", "Ada", "2024-03-03T10:00:00Z", "Merge feature", "HEAD -> main, origin/main")
        + record(HASH_F, HASH_P, "Grace", "2024-03-02T10:00:00Z", "Add feature", "feature/login")
        + record(HASH_P, "", "Ada", "2024-03-01T10:00:00Z", "Initial commit", "tag: v1.0")
    )


@pytest.fixture
def responses(record, log_output):
    """Responses of a healthy repository with a merged feature branch."""
    return {
        ("rev-parse", "--is-inside-work-tree"): "true\n",
        ("rev-parse", "--short", "HEAD"): "1111111\n",
        ("rev-parse", "--git-dir"): ".git\n",
        ("branch", "--show-current"): "main\n",
        ("for-each-ref",): (
            record("refs/heads/main", "main", HASH_M, "origin/main", "2024-03-03T10:00:00Z")
            + record("refs/heads/feature/login", "feature/login", HASH_F, "", "2024-03-02T10:00:00Z")
            + record("refs/remotes/origin/HEAD", "origin/HEAD", HASH_M, "", "2024-03-03T10:00:00Z")
            + record("refs/remotes/origin/main", "origin/main", HASH_M, "", "2024-03-03T10:00:00Z")
        ),
        ("merge-base",): HASH_P + "\n",
        ("tag", "--list", "--sort=-creatordate"): "v1.0\nv1.1\n",
        ("stash", "list"): "stash@{0}: WIP on main: 1111111 Merge feature\nstash@{1}: On main: spike\n",
        ("worktree", "list", "--porcelain"): "",
        ("remote", "-v"): "origin\tgit@example.com:team/repo.git (fetch)\norigin\tgit@example.com:team/repo.git (push)\n",
        ("log",): log_output,
        ("ls-files", "--unmerged"): "",
        ("status", "--porcelain"): " M README.md\n?? notes.txt\n",
    }


@pytest.fixture
def builder(runner_factory, responses):
    return RepositorySnapshotBuilder(runner_factory(responses))


class TestIsGitRepository:
    """Tests for RepositorySnapshotBuilder.is_git_repository."""

    def test_inside_work_tree(self, builder, mock_repo_root):
        assert builder.is_git_repository(mock_repo_root)

    def test_outside_work_tree(self, runner_factory, temp_dir):
        builder = RepositorySnapshotBuilder(runner_factory())
        assert not builder.is_git_repository(temp_dir)


class TestLoadRepository:
    """Tests for RepositorySnapshotBuilder.load_repository."""

    def test_full_snapshot(self, builder, mock_repo_root):
        snapshot = builder.load_repository(mock_repo_root)

        assert snapshot.is_git_repository
        assert snapshot.current_branch == "main"
        assert snapshot.head_short_hash == "1111111"
        assert snapshot.branches == ("main", "feature/login", "origin/main")
        assert snapshot.tags == ("v1.1", "v1.0")
        assert snapshot.selected_stash.startswith("stash@{0}")
        assert [r.name for r in snapshot.remotes] == ["origin"]
        assert snapshot.uncommitted_changes == (" M README.md", "?? notes.txt")
        assert snapshot.uncommitted_count == 2
        assert not snapshot.has_conflicts
        assert not snapshot.is_merging
        assert not snapshot.has_more_commits

    def test_commits_carry_layout(self, builder, mock_repo_root):
        snapshot = builder.load_repository(mock_repo_root)

        assert [c.id for c in snapshot.commits] == [HASH_M, HASH_F, HASH_P]
        assert [c.lane for c in snapshot.commits] == [0, 1, 0]
        assert snapshot.commits[0].node_color_key == 0
        assert snapshot.selected_commit_id == HASH_M

    def test_log_arguments(self, builder, mock_repo_root):
        builder.load_repository(mock_repo_root, limit=10)

        log_call = next(call for call in builder.runner.calls if call[0] == "log")
        assert log_call[1] == "--all"
        assert "--topo-order" in log_call
        assert f"--max-count={MIN_COMMIT_LIMIT + 1}" in log_call
        assert "--date=iso-strict" in log_call

    def test_branch_tree_uses_merge_base(self, builder, mock_repo_root):
        snapshot = builder.load_repository(mock_repo_root)

        local_group = snapshot.branch_tree[0]
        main_leaf = local_group.children[0]
        assert main_leaf.branch_name == "main"
        assert main_leaf.children[0].branch_name == "feature/login"
        assert "fork: 33333333" in main_leaf.children[0].subtitle
        assert ["merge-base", "feature/login", "main"] in builder.runner.calls

    def test_quick_inference_skips_merge_base(self, builder, mock_repo_root):
        builder.load_repository(mock_repo_root, infer_origins=False)

        assert not any(call[0] == "merge-base" for call in builder.runner.calls)

    def test_focused_branch(self, builder, mock_repo_root):
        snapshot = builder.load_repository(mock_repo_root, focused_branch="feature/login")

        assert snapshot.focused_branch == "feature/login"
        log_call = next(call for call in builder.runner.calls if call[0] == "log")
        assert log_call[1] == "feature/login"

    def test_missing_focused_branch_falls_back_to_all(self, builder, mock_repo_root):
        snapshot = builder.load_repository(mock_repo_root, focused_branch="deleted/branch")

        assert snapshot.focused_branch is None
        log_call = next(call for call in builder.runner.calls if call[0] == "log")
        assert log_call[1] == "--all"

    def test_selection_kept_when_loaded(self, builder, mock_repo_root):
        snapshot = builder.load_repository(
            mock_repo_root,
            selected_commit_id=HASH_F,
            selected_stash="stash@{1}: On main: spike",
        )

        assert snapshot.selected_commit_id == HASH_F
        assert snapshot.selected_stash == "stash@{1}: On main: spike"

    def test_unknown_selection_falls_back(self, builder, mock_repo_root):
        snapshot = builder.load_repository(mock_repo_root, selected_commit_id="f" * 40)
        assert snapshot.selected_commit_id == HASH_M

    def test_operation_state(self, builder, mock_repo_root):
        (mock_repo_root / ".git" / "MERGE_HEAD").write_text(HASH_F)
        (mock_repo_root / ".git" / "rebase-merge").mkdir()

        snapshot = builder.load_repository(mock_repo_root)

        assert snapshot.is_merging
        assert snapshot.is_rebasing
        assert not snapshot.is_cherry_picking

    def test_conflicts(self, runner_factory, responses, mock_repo_root):
        responses[("ls-files", "--unmerged")] = f"100644 {HASH_F} 2\tREADME.md\n"
        builder = RepositorySnapshotBuilder(runner_factory(responses))

        assert builder.load_repository(mock_repo_root).has_conflicts

    def test_detached_at_tag(self, runner_factory, responses, mock_repo_root):
        responses[("branch", "--show-current")] = "\n"
        responses[("describe", "--tags", "--exact-match")] = "v1.0\n"
        builder = RepositorySnapshotBuilder(runner_factory(responses))

        assert builder.load_repository(mock_repo_root).current_branch == "detached (tag: v1.0)"

    def test_detached_at_commit(self, runner_factory, responses, mock_repo_root):
        responses[("branch", "--show-current")] = ""
        builder = RepositorySnapshotBuilder(runner_factory(responses))

        assert builder.load_repository(mock_repo_root).current_branch == "detached (1111111)"

    def test_repository_without_commits(self, runner_factory, responses, mock_repo_root):
        del responses[("log",)]
        del responses[("rev-parse", "--short", "HEAD")]
        builder = RepositorySnapshotBuilder(runner_factory(responses))

        snapshot = builder.load_repository(mock_repo_root)

        assert snapshot.commits == ()
        assert snapshot.selected_commit_id is None
        assert snapshot.head_short_hash == "-"

    def test_not_a_repository(self, runner_factory, temp_dir):
        snapshot = RepositorySnapshotBuilder(runner_factory()).load_repository(temp_dir)

        assert snapshot == RepositorySnapshot.not_a_repository()
        assert not snapshot.is_git_repository
        assert snapshot.uncommitted_count == 0

    def test_failing_required_command_raises(self, runner_factory, responses, mock_repo_root):
        responses[("tag", "--list", "--sort=-creatordate")] = CommandResult("", "fatal: broken", 128)
        builder = RepositorySnapshotBuilder(runner_factory(responses))

        with pytest.raises(GitCommandError) as exc_info:
            builder.load_repository(mock_repo_root)

        assert "git tag --list" in exc_info.value.command

    def test_empty_path_raises(self, builder):
        with pytest.raises(RepositoryNotSelectedError):
            builder.load_repository("")


class TestLoadCommits:
    """Tests for RepositorySnapshotBuilder.load_commits."""

    def test_has_more(self, runner_factory, record, mock_repo_root):
        hashes = [f"{i:040x}" for i in range(MIN_COMMIT_LIMIT + 2)]
        output = ""
        for index, commit_hash in enumerate(hashes[: MIN_COMMIT_LIMIT + 1]):
            parent = hashes[index + 1]
            output += record(commit_hash, parent, "Ada", "2024-01-01T00:00:00Z", f"commit {index}", "")
        builder = RepositorySnapshotBuilder(runner_factory({("log",): output}))

        page = builder.load_commits(mock_repo_root, limit=10)

        assert page.has_more
        assert len(page.commits) == MIN_COMMIT_LIMIT
        assert page.selected_commit_id == hashes[0]
        assert len({c.lane for c in page.commits}) == 1

    def test_reference(self, builder, mock_repo_root):
        page = builder.load_commits(mock_repo_root, reference=" main ", selected_commit_id=HASH_P)

        assert page.selected_commit_id == HASH_P
        assert not page.has_more
        assert builder.runner.calls[0][:2] == ["log", "main"]


class TestDetails:
    """Tests for the detail loaders."""

    def test_commit_details(self, runner_factory, mock_repo_root):
        runner = runner_factory({("show", "--no-color", "--name-status"): "commit 111\nM\tREADME.md\n"})
        builder = RepositorySnapshotBuilder(runner)

        assert builder.load_commit_details(mock_repo_root, HASH_M) == "commit 111\nM\tREADME.md\n"
        assert runner.calls[0][-1] == HASH_M
        assert "--pretty=fuller" in runner.calls[0]

    def test_commit_diff(self, runner_factory, mock_repo_root, sample_multi_file_diff):
        builder = RepositorySnapshotBuilder(runner_factory({("show",): sample_multi_file_diff}))

        files = builder.load_commit_diff(mock_repo_root, HASH_M)

        assert [f.path for f in files] == ["new_name.py", "created.txt", "logo.png"]

    def test_reflog(self, runner_factory, record, mock_repo_root):
        output = record(HASH_M, "HEAD@{0}", "commit: Merge feature", "2024-03-03T10:00:00Z", "1 day ago")
        builder = RepositorySnapshotBuilder(runner_factory({("reflog",): output}))

        entries = builder.load_reflog(mock_repo_root, limit=5)

        assert entries[0].action == "commit"
        assert builder.runner.calls[0][1] == "--max-count=5"

    def test_reflog_unavailable(self, runner_factory, mock_repo_root):
        assert RepositorySnapshotBuilder(runner_factory()).load_reflog(mock_repo_root) == []

    def test_blame(self, runner_factory, mock_repo_root):
        output = f"{HASH_M} 1 1 1\nauthor Ada\nauthor-time 0\nsummary init\n\thello\n"
        builder = RepositorySnapshotBuilder(runner_factory({("blame",): output}))

        entries = builder.load_blame(mock_repo_root, "README.md", revision="HEAD~1")

        assert entries[0].content == "hello"
        assert builder.runner.calls[0] == ["blame", "--porcelain", "HEAD~1", "--", "README.md"]

    def test_submodules(self, runner_factory, mock_repo_root):
        builder = RepositorySnapshotBuilder(
            runner_factory(
                {
                    ("submodule", "status"): f"+{HASH_F} libs/core (v2)\n",
                    ("config", "--file", ".gitmodules"): "submodule.core.path libs/core\nsubmodule.core.url https://example.com/core.git\n",
                }
            )
        )

        submodules = builder.load_submodules(mock_repo_root)

        assert len(submodules) == 1
        assert submodules[0].name == "core"
        assert submodules[0].status is SubmoduleStatus.MODIFIED

    def test_no_submodules(self, runner_factory, mock_repo_root):
        builder = RepositorySnapshotBuilder(runner_factory({("submodule", "status"): ""}))
        assert builder.load_submodules(mock_repo_root) == []

    def test_merge_base(self, builder, mock_repo_root):
        assert builder.merge_base(mock_repo_root, "feature/login", "main") == HASH_P
        assert builder.merge_base(mock_repo_root, "", "main") is None

    def test_run_action_prefers_stdout(self, runner_factory, mock_repo_root):
        builder = RepositorySnapshotBuilder(
            runner_factory({("checkout",): CommandResult("", "Switched to branch 'dev'\n", 0)})
        )
        assert builder.run_action(mock_repo_root, ["checkout", "dev"]) == "Switched to branch 'dev'"
