"""Patch builder for partial staging.

Contains:
- build_patch: Build a patch from whole hunks of one file
- build_partial_patch: Build a patch from selected lines of one hunk
- select_lines: Rewrite a hunk so only the selected changes remain
"""

from typing import Iterable, Optional

from gitlane.diff.models import DiffHunk, DiffLine, LineType
from gitlane.diff.parser import format_hunk_header, parse_hunk_header


def _file_header(path: str) -> list[str]:
    return [f"--- a/{path}", f"+++ b/{path}"]


def build_patch(path: str, hunks: Iterable[DiffHunk]) -> str:
    """Build a patch containing whole hunks of one file.

    Each hunk keeps its original header and line markers, so an unmodified
    hunk is reproduced byte for byte.

    Args:
        path: File path relative to the repository root.
        hunks: Hunks to include, in file order.

    Returns:
        Patch content as string.
    """
    patch_lines = _file_header(path)
    for hunk in hunks:
        patch_lines.extend(hunk.serialize())

    # git apply requires the patch to end with a newline
    return "\n".join(patch_lines) + "\n"


def _as_context(line: DiffLine) -> DiffLine:
    return DiffLine(
        LineType.CONTEXT,
        line.content,
        no_newline_at_end=line.no_newline_at_end,
    )


def select_lines(
    hunk: DiffHunk, selected: Iterable[int], reverse: bool = False
) -> Optional[DiffHunk]:
    """Rewrite a hunk so only the selected changes remain.

    Forward (staging): an unselected addition is dropped and an unselected
    deletion becomes context, since the index still holds the old line.
    Reverse (unstaging, applied with --reverse): an unselected addition
    becomes context and an unselected deletion is dropped.

    Args:
        hunk: The hunk to rewrite.
        selected: Indices into `hunk.lines`; context indices are ignored.
        reverse: Build the hunk for reverse application.

    Returns:
        The rewritten hunk with recomputed header counts and line numbers, or
        None when no change line is selected.
    """
    chosen = set(selected) & set(hunk.change_line_indices())
    if not chosen:
        return None

    kept: list[DiffLine] = []
    for index, line in enumerate(hunk.lines):
        if line.type is LineType.CONTEXT or index in chosen:
            kept.append(line)
        elif line.type is LineType.ADDITION:
            if reverse:
                kept.append(_as_context(line))
        elif not reverse:
            kept.append(_as_context(line))

    old_line = hunk.old_start
    new_line = hunk.new_start
    numbered: list[DiffLine] = []
    for line in kept:
        if line.type is LineType.ADDITION:
            numbered.append(DiffLine(line.type, line.content, None, new_line, line.no_newline_at_end))
            new_line += 1
        elif line.type is LineType.DELETION:
            numbered.append(DiffLine(line.type, line.content, old_line, None, line.no_newline_at_end))
            old_line += 1
        else:
            numbered.append(DiffLine(line.type, line.content, old_line, new_line, line.no_newline_at_end))
            old_line += 1
            new_line += 1

    old_count = old_line - hunk.old_start
    new_count = new_line - hunk.new_start
    parsed = parse_hunk_header(hunk.header)
    section = parsed.section if parsed else ""

    return DiffHunk(
        header=format_hunk_header(hunk.old_start, old_count, hunk.new_start, new_count, section),
        old_start=hunk.old_start,
        old_count=old_count,
        new_start=hunk.new_start,
        new_count=new_count,
        lines=tuple(numbered),
    )


def build_partial_patch(
    path: str, hunk: DiffHunk, selected: Iterable[int], reverse: bool = False
) -> Optional[str]:
    """Build a patch from a selection of lines within one hunk.

    Args:
        path: File path relative to the repository root.
        hunk: The hunk the lines belong to.
        selected: Indices into `hunk.lines` chosen by the user.
        reverse: Build the patch for reverse application (unstage/discard).

    Returns:
        Patch content, or None when the selection holds no change and there is
        nothing to apply. Selecting every change line yields the same patch as
        build_patch(path, [hunk]).
    """
    selected = set(selected)
    change_indices = set(hunk.change_line_indices())
    if not selected & change_indices:
        return None
    if change_indices <= selected:
        return build_patch(path, [hunk])

    rewritten = select_lines(hunk, selected, reverse=reverse)
    if rewritten is None:
        return None
    return build_patch(path, [rewritten])
