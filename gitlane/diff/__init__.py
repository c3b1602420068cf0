"""Diff parsing and patch construction for gitlane.

This package provides:
- models: LineType, DiffLine, DiffHunk, FileDiff, NO_NEWLINE_MARKER
- parser: parse_diff_hunks, parse_hunk_header, format_hunk_header,
          parse_file_diffs
- patch: build_patch, build_partial_patch, select_lines
- staging: load_file_hunks, apply_patch, stage_hunk, unstage_hunk,
           stage_lines, unstage_lines, discard_lines
"""

# Models
from gitlane.diff.models import (
    NO_NEWLINE_MARKER,
    DiffHunk,
    DiffLine,
    FileDiff,
    LineType,
)

# Parser
from gitlane.diff.parser import (
    HunkRange,
    format_hunk_header,
    parse_diff_hunks,
    parse_file_diffs,
    parse_hunk_header,
)

# Patch builder
from gitlane.diff.patch import (
    build_partial_patch,
    build_patch,
    select_lines,
)

# Staging
from gitlane.diff.staging import (
    apply_patch,
    discard_lines,
    load_file_hunks,
    stage_hunk,
    stage_lines,
    unstage_hunk,
    unstage_lines,
)


__all__ = [
    # Models
    "LineType",
    "DiffLine",
    "DiffHunk",
    "FileDiff",
    "NO_NEWLINE_MARKER",
    # Parser
    "HunkRange",
    "parse_diff_hunks",
    "parse_hunk_header",
    "format_hunk_header",
    "parse_file_diffs",
    # Patch
    "build_patch",
    "build_partial_patch",
    "select_lines",
    # Staging
    "load_file_hunks",
    "apply_patch",
    "stage_hunk",
    "unstage_hunk",
    "stage_lines",
    "unstage_lines",
    "discard_lines",
]
