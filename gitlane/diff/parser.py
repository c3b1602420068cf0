"""Unified diff parser.

Contains functions for parsing unified diff output:
- parse_diff_hunks: Parse the hunks of a single file's diff into typed lines
- parse_hunk_header: Parse an @@ header into its ranges and section text
- format_hunk_header: Render an @@ header
- parse_file_diffs: Split a multi-file `git diff` into FileDiff records
"""

import re
from dataclasses import replace
from typing import NamedTuple, Optional

import structlog

from gitlane.diff.models import DiffHunk, DiffLine, FileDiff, LineType


logger = structlog.get_logger(__name__)

# Format: @@ -old_start[,old_count] +new_start[,new_count] @@ optional section
_HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$")
_DIFF_GIT_RE = re.compile(r"^diff --git a/(.*) b/(.*)$")


class HunkRange(NamedTuple):
    """Ranges and trailing section text of a hunk header."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    section: str


def parse_hunk_header(header: str) -> Optional[HunkRange]:
    """Parse an @@ hunk header.

    An omitted count means a one-line range, which is how git writes
    single-line hunks (`@@ -10 +10,2 @@`).

    Returns:
        HunkRange, or None when the header is malformed.
    """
    match = _HUNK_HEADER_RE.match(header)
    if not match:
        return None

    return HunkRange(
        old_start=int(match.group(1)),
        old_count=int(match.group(2)) if match.group(2) is not None else 1,
        new_start=int(match.group(3)),
        new_count=int(match.group(4)) if match.group(4) is not None else 1,
        section=match.group(5),
    )


def format_hunk_header(
    old_start: int, old_count: int, new_start: int, new_count: int, section: str = ""
) -> str:
    """Render an @@ header with explicit counts."""
    return f"@@ -{old_start},{old_count} +{new_start},{new_count} @@{section}"


def parse_diff_hunks(diff_text: str) -> list[DiffHunk]:
    """Parse the hunks of one file's unified diff.

    File-level metadata before the first hunk header is skipped. A malformed
    header is skipped together with its body, and parsing resumes at the next
    valid header.

    Args:
        diff_text: Raw diff output for a single file.

    Returns:
        List of DiffHunk in file order.
    """
    hunks: list[DiffHunk] = []
    current: Optional[HunkRange] = None
    header = ""
    lines: list[DiffLine] = []
    old_line = new_line = 0

    def flush() -> None:
        if current is not None:
            hunks.append(
                DiffHunk(
                    header=header,
                    old_start=current.old_start,
                    old_count=current.old_count,
                    new_start=current.new_start,
                    new_count=current.new_count,
                    lines=tuple(lines),
                )
            )

    raw_lines = diff_text.split("\n")
    last_index = len(raw_lines) - 1
    for index, raw in enumerate(raw_lines):
        if raw.startswith("@@"):
            flush()
            lines = []
            current = parse_hunk_header(raw)
            if current is None:
                logger.debug("hunk_header_skipped", header=raw[:80])
                continue
            header = raw
            old_line = current.old_start
            new_line = current.new_start
            continue

        if current is None:
            continue

        if raw.startswith("\\"):
            if lines:
                lines[-1] = replace(lines[-1], no_newline_at_end=True)
            continue

        if raw == "" and (index == last_index or _ranges_consumed(lines, current)):
            # Trailing newline of the diff text, not a blank context line
            continue

        if raw.startswith("+"):
            lines.append(DiffLine(LineType.ADDITION, raw[1:], None, new_line))
            new_line += 1
        elif raw.startswith("-"):
            lines.append(DiffLine(LineType.DELETION, raw[1:], old_line, None))
            old_line += 1
        else:
            lines.append(DiffLine(LineType.CONTEXT, raw[1:], old_line, new_line))
            old_line += 1
            new_line += 1

    flush()
    return hunks


def _ranges_consumed(lines: list[DiffLine], hunk_range: HunkRange) -> bool:
    old_seen = sum(1 for line in lines if line.type is not LineType.ADDITION)
    new_seen = sum(1 for line in lines if line.type is not LineType.DELETION)
    return old_seen >= hunk_range.old_count and new_seen >= hunk_range.new_count


def parse_file_diffs(diff_output: str) -> tuple[list[FileDiff], list[str]]:
    """Parse multi-file output of `git diff` or `git show`.

    Args:
        diff_output: Raw diff output

    Returns:
        Tuple of (list of FileDiff objects, list of warning messages)
    """
    files: list[FileDiff] = []
    warnings: list[str] = []

    if not diff_output.strip():
        return files, warnings

    # Each file starts with 'diff --git a/... b/...'
    file_blocks = re.split(r"(?=^diff --git )", diff_output, flags=re.MULTILINE)

    for block in file_blocks:
        if not block.startswith("diff --git"):
            continue
        file_diff = _parse_file_block(block, warnings)
        if file_diff:
            files.append(file_diff)

    return files, warnings


def _parse_file_block(block: str, warnings: list[str]) -> Optional[FileDiff]:
    lines = block.split("\n")
    match = _DIFF_GIT_RE.match(lines[0])
    if not match:
        return None

    old_path = match.group(1)
    new_path = match.group(2)

    header_lines: list[str] = []
    is_binary = False
    is_new_file = False
    is_deleted_file = False

    for line in lines:
        if line.startswith("@@"):
            break
        header_lines.append(line)

        if "GIT binary patch" in line or line.startswith("Binary files"):
            is_binary = True
        if line.startswith("new file mode"):
            is_new_file = True
        if line.startswith("deleted file mode"):
            is_deleted_file = True
        if line.startswith("rename from "):
            old_path = line[len("rename from "):]
        if line.startswith("rename to "):
            new_path = line[len("rename to "):]

    if is_binary:
        warnings.append(f"Binary file skipped: {new_path}")

    return FileDiff(
        old_path=old_path,
        new_path=new_path,
        header_lines=tuple(header_lines),
        hunks=() if is_binary else tuple(parse_diff_hunks(block)),
        is_binary=is_binary,
        is_new_file=is_new_file,
        is_deleted_file=is_deleted_file,
    )
