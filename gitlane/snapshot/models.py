"""Snapshot data models.

Contains:
- RepositorySnapshot: Complete repository state produced by one refresh
- CommitPage: Result of a commit-only refresh
"""

from dataclasses import dataclass
from typing import Optional

from gitlane.branches.tree import BranchTreeNode
from gitlane.graph.models import Commit
from gitlane.parsing.models import BranchInfo, RemoteInfo, WorktreeItem


@dataclass(frozen=True)
class CommitPage:
    """Commits with layout, and whether more exist beyond the limit."""

    commits: tuple[Commit, ...]
    has_more: bool
    selected_commit_id: Optional[str]


@dataclass(frozen=True)
class RepositorySnapshot:
    """Repository state at one refresh. Replaced wholesale, never updated."""

    current_branch: str
    head_short_hash: str
    branch_infos: tuple[BranchInfo, ...]
    branches: tuple[str, ...]
    focused_branch: Optional[str]
    branch_tree: tuple[BranchTreeNode, ...]
    tags: tuple[str, ...]
    stashes: tuple[str, ...]
    selected_stash: str
    worktrees: tuple[WorktreeItem, ...]
    remotes: tuple[RemoteInfo, ...]
    commits: tuple[Commit, ...]
    has_more_commits: bool
    selected_commit_id: Optional[str]
    has_conflicts: bool
    is_merging: bool
    is_rebasing: bool
    is_cherry_picking: bool
    is_git_repository: bool
    uncommitted_changes: tuple[str, ...]

    @property
    def uncommitted_count(self) -> int:
        return len(self.uncommitted_changes)

    @classmethod
    def not_a_repository(cls) -> "RepositorySnapshot":
        """Snapshot returned for a directory that is not inside a git work tree."""
        return cls(
            current_branch="-",
            head_short_hash="-",
            branch_infos=(),
            branches=(),
            focused_branch=None,
            branch_tree=(),
            tags=(),
            stashes=(),
            selected_stash="",
            worktrees=(),
            remotes=(),
            commits=(),
            has_more_commits=False,
            selected_commit_id=None,
            has_conflicts=False,
            is_merging=False,
            is_rebasing=False,
            is_cherry_picking=False,
            is_git_repository=False,
            uncommitted_changes=(),
        )
