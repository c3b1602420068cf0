"""Data models for records parsed from git output.

Contains:
- ParsedCommit: One commit from the log, before graph layout
- BranchInfo: A local or remote branch ref
- WorktreeItem: One entry of the worktree list
- RemoteInfo: A configured remote
- ReflogEntry: One reflog line
- BlameEntry: One blamed line of a file
- SubmoduleStatus / SubmoduleInfo: A submodule and its checkout state
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class ParsedCommit:
    """A commit as reported by git log."""

    hash: str
    parents: tuple[str, ...]
    author: str
    date: datetime
    subject: str
    decorations: tuple[str, ...] = ()

    @property
    def short_hash(self) -> str:
        return self.hash[:8]


@dataclass(frozen=True)
class BranchInfo:
    """A branch ref. Identity is the (short) name."""

    name: str
    full_ref: str
    head: str
    upstream: str
    committer_date: datetime
    is_remote: bool

    @property
    def short_head(self) -> str:
        return self.head[:8]


@dataclass(frozen=True)
class WorktreeItem:
    """One worktree from `git worktree list --porcelain`."""

    path: str
    head: str  # First 8 chars of the checked-out commit
    branch: str  # Short branch name, or "detached"
    is_detached: bool = False
    is_locked: bool = False
    lock_reason: str = ""
    is_prunable: bool = False
    prune_reason: str = ""
    is_current: bool = False


@dataclass(frozen=True)
class RemoteInfo:
    """A configured remote."""

    name: str
    url: str


@dataclass(frozen=True)
class ReflogEntry:
    """One reflog entry, e.g. HEAD@{0} checkout: moving from main to dev."""

    hash: str
    ref_name: str
    action: str
    message: str
    date: datetime
    relative_date: str

    @property
    def short_hash(self) -> str:
        return self.hash[:8]


@dataclass(frozen=True)
class BlameEntry:
    """One line of blame output, keyed by commit hash and final line number."""

    commit_hash: str
    author: str
    date: datetime
    summary: str
    line_number: int
    content: str

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:8]


class SubmoduleStatus(str, Enum):
    """Checkout state reported by the first column of `git submodule status`."""

    UP_TO_DATE = "up_to_date"
    MODIFIED = "modified"
    UNINITIALIZED = "uninitialized"
    CONFLICTED = "conflicted"


@dataclass(frozen=True)
class SubmoduleInfo:
    """A submodule, keyed by path."""

    name: str
    path: str
    url: str
    hash: str
    status: SubmoduleStatus
