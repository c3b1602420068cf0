"""Repository snapshot builder.

Contains:
- MIN_COMMIT_LIMIT: Smallest number of commits loaded per refresh
- OperationState: Merge/rebase/cherry-pick flags read from the git directory
- RepositorySnapshotBuilder: Run git, parse its output and assemble snapshots
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import structlog

from gitlane.branches.tree import build_branch_tree
from gitlane.diff.models import FileDiff
from gitlane.diff.parser import parse_file_diffs
from gitlane.git.exceptions import GitCommandError, GitError, RepositoryNotSelectedError
from gitlane.git.runner import GitRunner
from gitlane.graph.layout import attach_layout, main_first_parent_chain
from gitlane.graph.models import Commit
from gitlane.parsing.blame import parse_blame
from gitlane.parsing.commits import COMMIT_LOG_FORMAT, parse_commits
from gitlane.parsing.models import (
    BlameEntry,
    BranchInfo,
    ReflogEntry,
    RemoteInfo,
    SubmoduleInfo,
    WorktreeItem,
)
from gitlane.parsing.reflog import REFLOG_FORMAT, parse_reflog
from gitlane.parsing.refs import (
    BRANCH_REF_FORMAT,
    parse_branch_infos,
    parse_remotes,
    parse_stashes,
    parse_tags,
)
from gitlane.parsing.status import parse_status_lines
from gitlane.parsing.submodules import parse_gitmodules_config, parse_submodule_status
from gitlane.parsing.worktrees import parse_worktrees
from gitlane.snapshot.models import CommitPage, RepositorySnapshot


logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]

MIN_COMMIT_LIMIT = 150


@dataclass(frozen=True)
class OperationState:
    """In-progress operations detected from files in the git directory."""

    is_merging: bool = False
    is_rebasing: bool = False
    is_cherry_picking: bool = False


class RepositorySnapshotBuilder:
    """Build repository snapshots from git output.

    Every public method runs synchronously and returns new immutable
    records; nothing is cached between calls.
    """

    def __init__(self, runner: Optional[GitRunner] = None):
        self.runner = runner or GitRunner()

    def is_git_repository(self, repo_path: PathLike) -> bool:
        """Check whether `repo_path` is inside a git work tree."""
        try:
            result = self.runner.run_allowing_failure(["rev-parse", "--is-inside-work-tree"], repo_path)
        except (GitError, OSError):
            return False
        return result.ok

    def load_repository(
        self,
        repo_path: PathLike,
        focused_branch: Optional[str] = None,
        selected_commit_id: Optional[str] = None,
        selected_stash: str = "",
        infer_origins: bool = True,
        limit: int = 300,
    ) -> RepositorySnapshot:
        """Build a complete snapshot of the repository.

        Args:
            repo_path: Repository working directory.
            focused_branch: Show only this branch's history (ignored when the
                branch no longer exists).
            selected_commit_id: Kept when still loaded, else the first commit.
            selected_stash: Kept when still present, else the first stash.
            infer_origins: Guess branch parents from naming conventions.
            limit: Number of commits to load (at least MIN_COMMIT_LIMIT).

        Returns:
            RepositorySnapshot; not_a_repository() outside a work tree.

        Raises:
            GitCommandError: If a required git command fails.
            RepositoryNotSelectedError: If `repo_path` is empty.
        """
        _require_repository(repo_path)
        if not self.is_git_repository(repo_path):
            return RepositorySnapshot.not_a_repository()

        branch = self.current_branch_name(repo_path)
        try:
            head = self.current_head_hash(repo_path)
        except GitCommandError:
            head = "-"

        infos = self.branch_infos(repo_path)
        names = tuple(info.name for info in infos)
        resolved_focus = focused_branch if focused_branch in names else None
        tree = build_branch_tree(
            infos,
            infer_origins=infer_origins,
            merge_base=lambda lhs, rhs: self.merge_base(repo_path, lhs, rhs),
        )
        tags = self.tags(repo_path)
        stashes = self.stashes(repo_path)
        stash_selection = selected_stash if selected_stash in stashes else (stashes[0] if stashes else "")
        worktrees = self.worktrees(repo_path)
        remotes = self.remotes(repo_path)
        commits, has_more = self.commit_list(repo_path, resolved_focus, limit)
        selected = _resolve_selection(commits, selected_commit_id)

        conflicts = self.runner.run_allowing_failure(["ls-files", "--unmerged"], repo_path)
        has_conflicts = conflicts.ok and bool(conflicts.stdout.strip())
        operations = self.operation_state(repo_path)
        status = self.runner.run_allowing_failure(["status", "--porcelain"], repo_path)
        uncommitted = parse_status_lines(status.stdout) if status.ok else []

        logger.info(
            "snapshot_built",
            repo=str(repo_path),
            branch=branch,
            commits=len(commits),
            branches=len(infos),
        )

        return RepositorySnapshot(
            current_branch=branch,
            head_short_hash=head,
            branch_infos=tuple(infos),
            branches=names,
            focused_branch=resolved_focus,
            branch_tree=tuple(tree),
            tags=tuple(tags),
            stashes=tuple(stashes),
            selected_stash=stash_selection,
            worktrees=tuple(worktrees),
            remotes=tuple(remotes),
            commits=tuple(commits),
            has_more_commits=has_more,
            selected_commit_id=selected,
            has_conflicts=has_conflicts,
            is_merging=operations.is_merging,
            is_rebasing=operations.is_rebasing,
            is_cherry_picking=operations.is_cherry_picking,
            is_git_repository=True,
            uncommitted_changes=tuple(uncommitted),
        )

    def load_commits(
        self,
        repo_path: PathLike,
        reference: Optional[str] = None,
        selected_commit_id: Optional[str] = None,
        limit: int = 300,
    ) -> CommitPage:
        """Reload only the commit list."""
        _require_repository(repo_path)
        commits, has_more = self.commit_list(repo_path, reference, limit)
        return CommitPage(
            commits=tuple(commits),
            has_more=has_more,
            selected_commit_id=_resolve_selection(commits, selected_commit_id),
        )

    def load_commit_details(self, repo_path: PathLike, commit_id: str) -> str:
        """Full header and changed-file list of one commit."""
        return self.runner.run(
            ["show", "--no-color", "--name-status", "--pretty=fuller", commit_id],
            repo_path,
        ).stdout

    def load_commit_diff(self, repo_path: PathLike, commit_id: str) -> list[FileDiff]:
        """Per-file diffs introduced by one commit (first parent for merges)."""
        output = self.runner.run(
            ["show", "--no-color", "--no-ext-diff", "--first-parent", "--pretty=format:", "--patch", commit_id],
            repo_path,
        ).stdout
        file_diffs, warnings = parse_file_diffs(output)
        for warning in warnings:
            logger.debug("commit_diff_warning", commit=commit_id, warning=warning)
        return file_diffs

    def load_reflog(self, repo_path: PathLike, limit: int = 100) -> list[ReflogEntry]:
        result = self.runner.run_allowing_failure(
            ["reflog", f"--max-count={limit}", f"--format={REFLOG_FORMAT}"],
            repo_path,
        )
        return parse_reflog(result.stdout) if result.ok else []

    def load_blame(self, repo_path: PathLike, path: str, revision: Optional[str] = None) -> list[BlameEntry]:
        args = ["blame", "--porcelain"]
        if revision:
            args.append(revision)
        args.extend(["--", path])
        return parse_blame(self.runner.run(args, repo_path).stdout)

    def load_submodules(self, repo_path: PathLike) -> list[SubmoduleInfo]:
        status = self.runner.run_allowing_failure(["submodule", "status"], repo_path)
        if not status.ok or not status.stdout.strip():
            return []
        config = self.runner.run_allowing_failure(
            ["config", "--file", ".gitmodules", "--get-regexp", r"^submodule\..*\.(path|url)$"],
            repo_path,
        )
        modules = parse_gitmodules_config(config.stdout) if config.ok else {}
        return parse_submodule_status(status.stdout, modules)

    def run_action(self, repo_path: PathLike, args: list[str]) -> str:
        """Run a git command and return its stdout, or stderr when stdout is empty."""
        result = self.runner.run(args, repo_path)
        output = result.stdout.strip()
        return output if output else result.stderr.strip()

    def current_branch_name(self, repo_path: PathLike) -> str:
        branch = self.runner.run_allowing_failure(["branch", "--show-current"], repo_path).stdout.strip()
        if branch:
            return branch

        # Detached HEAD: name the tag or the commit
        describe = self.runner.run_allowing_failure(["describe", "--tags", "--exact-match"], repo_path)
        tag = describe.stdout.strip() if describe.ok else ""
        if tag:
            return f"detached (tag: {tag})"
        try:
            return f"detached ({self.current_head_hash(repo_path)})"
        except GitCommandError:
            return "detached (unknown)"

    def current_head_hash(self, repo_path: PathLike) -> str:
        return self.runner.run(["rev-parse", "--short", "HEAD"], repo_path).stdout.strip()

    def branch_infos(self, repo_path: PathLike) -> list[BranchInfo]:
        output = self.runner.run(
            [
                "for-each-ref",
                "--sort=-committerdate",
                f"--format={BRANCH_REF_FORMAT}",
                "refs/heads",
                "refs/remotes",
            ],
            repo_path,
        ).stdout
        return parse_branch_infos(output)

    def tags(self, repo_path: PathLike) -> list[str]:
        return parse_tags(self.runner.run(["tag", "--list", "--sort=-creatordate"], repo_path).stdout)

    def stashes(self, repo_path: PathLike) -> list[str]:
        return parse_stashes(self.runner.run(["stash", "list"], repo_path).stdout)

    def worktrees(self, repo_path: PathLike) -> list[WorktreeItem]:
        output = self.runner.run(["worktree", "list", "--porcelain"], repo_path).stdout
        return parse_worktrees(output, current_path=str(repo_path))

    def remotes(self, repo_path: PathLike) -> list[RemoteInfo]:
        return parse_remotes(self.runner.run(["remote", "-v"], repo_path).stdout)

    def merge_base(self, repo_path: PathLike, lhs: str, rhs: str) -> Optional[str]:
        if not lhs.strip() or not rhs.strip():
            return None
        result = self.runner.run_allowing_failure(["merge-base", lhs, rhs], repo_path)
        value = result.stdout.strip()
        return value if result.ok and value else None

    def commit_list(
        self, repo_path: PathLike, reference: Optional[str], limit: int
    ) -> tuple[list[Commit], bool]:
        """Load up to `limit` commits in topological order and lay them out.

        One extra commit is requested to tell whether more exist. A repository
        without commits yields an empty list.

        Returns:
            Tuple of (commits with layout, has_more).
        """
        effective_limit = max(MIN_COMMIT_LIMIT, limit)
        args = ["log"]
        if reference and reference.strip():
            args.append(reference.strip())
        else:
            args.append("--all")
        args.extend(
            [
                "--topo-order",
                f"--max-count={effective_limit + 1}",
                "--date=iso-strict",
                f"--pretty=format:{COMMIT_LOG_FORMAT}",
            ]
        )

        try:
            output = self.runner.run(args, repo_path).stdout
        except GitCommandError as e:
            logger.debug("commit_list_unavailable", repo=str(repo_path), error=e.message)
            return [], False

        parsed = parse_commits(output)
        has_more = len(parsed) > effective_limit
        visible = parsed[:effective_limit]
        return attach_layout(visible, main_first_parent_chain(visible)), has_more

    def operation_state(self, repo_path: PathLike) -> OperationState:
        result = self.runner.run_allowing_failure(["rev-parse", "--git-dir"], repo_path)
        if not result.ok or not result.stdout.strip():
            return OperationState()

        git_dir = Path(result.stdout.strip())
        if not git_dir.is_absolute():
            git_dir = Path(repo_path) / git_dir

        return OperationState(
            is_merging=(git_dir / "MERGE_HEAD").exists(),
            is_rebasing=(git_dir / "rebase-apply").exists() or (git_dir / "rebase-merge").exists(),
            is_cherry_picking=(git_dir / "CHERRY_PICK_HEAD").exists(),
        )


def _resolve_selection(commits: list[Commit], selected_commit_id: Optional[str]) -> Optional[str]:
    if selected_commit_id and any(c.id == selected_commit_id for c in commits):
        return selected_commit_id
    return commits[0].id if commits else None


def _require_repository(repo_path: PathLike) -> None:
    if not str(repo_path).strip():
        raise RepositoryNotSelectedError("No repository selected.")
