"""Parsers for git command output.

This package provides:
- models: ParsedCommit, BranchInfo, WorktreeItem, RemoteInfo, ReflogEntry,
          BlameEntry, SubmoduleInfo, SubmoduleStatus
- records: FIELD_SEPARATOR, RECORD_SEPARATOR, EPOCH, split_records,
           parse_iso_date, parse_epoch_date
- commits: COMMIT_LOG_FORMAT, parse_commits
- refs: BRANCH_REF_FORMAT, parse_branch_infos, parse_tags,
        sort_tags_descending, parse_stashes, parse_remotes
- worktrees: parse_worktrees
- reflog: REFLOG_FORMAT, parse_reflog
- blame: parse_blame
- submodules: parse_gitmodules_config, parse_submodule_status
- status: parse_status_lines
"""

# Models
from gitlane.parsing.models import (
    BlameEntry,
    BranchInfo,
    ParsedCommit,
    ReflogEntry,
    RemoteInfo,
    SubmoduleInfo,
    SubmoduleStatus,
    WorktreeItem,
)

# Records
from gitlane.parsing.records import (
    EPOCH,
    FIELD_SEPARATOR,
    RECORD_SEPARATOR,
    parse_epoch_date,
    parse_iso_date,
    split_records,
)

# Parsers
from gitlane.parsing.commits import COMMIT_LOG_FORMAT, parse_commits
from gitlane.parsing.refs import (
    BRANCH_REF_FORMAT,
    parse_branch_infos,
    parse_remotes,
    parse_stashes,
    parse_tags,
    sort_tags_descending,
)
from gitlane.parsing.worktrees import parse_worktrees
from gitlane.parsing.reflog import REFLOG_FORMAT, parse_reflog
from gitlane.parsing.blame import parse_blame
from gitlane.parsing.submodules import parse_gitmodules_config, parse_submodule_status
from gitlane.parsing.status import parse_status_lines


__all__ = [
    # Models
    "ParsedCommit",
    "BranchInfo",
    "WorktreeItem",
    "RemoteInfo",
    "ReflogEntry",
    "BlameEntry",
    "SubmoduleInfo",
    "SubmoduleStatus",
    # Records
    "FIELD_SEPARATOR",
    "RECORD_SEPARATOR",
    "EPOCH",
    "split_records",
    "parse_iso_date",
    "parse_epoch_date",
    # Parsers
    "COMMIT_LOG_FORMAT",
    "parse_commits",
    "BRANCH_REF_FORMAT",
    "parse_branch_infos",
    "parse_tags",
    "sort_tags_descending",
    "parse_stashes",
    "parse_remotes",
    "parse_worktrees",
    "REFLOG_FORMAT",
    "parse_reflog",
    "parse_blame",
    "parse_gitmodules_config",
    "parse_submodule_status",
    "parse_status_lines",
]
