"""Stage, unstage and discard hunks or single lines through `git apply`.

Contains:
- load_file_hunks: Load and parse the diff of one file
- apply_patch: Feed a patch to git apply
- stage_hunk / unstage_hunk: Whole-hunk staging
- stage_lines / unstage_lines / discard_lines: Line-level staging
"""

from pathlib import Path
from typing import Iterable, Optional, Union

import structlog

from gitlane.diff.models import DiffHunk
from gitlane.diff.parser import parse_diff_hunks
from gitlane.diff.patch import build_partial_patch, build_patch
from gitlane.git.runner import GitRunner


logger = structlog.get_logger(__name__)

PathLike = Union[str, Path]


def load_file_hunks(
    runner: GitRunner, repo_path: PathLike, path: str, staged: bool = False
) -> list[DiffHunk]:
    """Load the unstaged (or staged) diff of one file and parse its hunks.

    Raises:
        GitCommandError: If git diff fails.
    """
    args = ["diff", "--no-color", "--no-ext-diff"]
    if staged:
        args.append("--cached")
    args.extend(["--", path])
    output = runner.run(args, repo_path).stdout
    return parse_diff_hunks(output)


def _needs_unidiff_zero(patch: str) -> bool:
    return any(not hunk.has_context for hunk in parse_diff_hunks(patch))


def apply_patch(
    runner: GitRunner,
    repo_path: PathLike,
    patch: Optional[str],
    path: str,
    cached: bool = True,
    reverse: bool = False,
) -> bool:
    """Apply a patch restricted to `path`.

    Hunks without any context line are applied with --unidiff-zero.

    Args:
        patch: Patch text; None means nothing to apply.
        cached: Apply to the index instead of the working tree.
        reverse: Apply the patch in reverse.

    Returns:
        True if git apply ran, False when there was nothing to apply.

    Raises:
        GitCommandError: If git apply rejects the patch.
    """
    if not patch:
        logger.debug("patch_empty", path=path)
        return False

    args = ["apply", "--whitespace=nowarn", f"--include={path}"]
    if cached:
        args.append("--cached")
    if reverse:
        args.append("--reverse")
    if _needs_unidiff_zero(patch):
        args.append("--unidiff-zero")
    args.append("-")

    runner.run_with_stdin(args, patch, repo_path)
    logger.debug("patch_applied", path=path, cached=cached, reverse=reverse)
    return True


def stage_hunk(runner: GitRunner, repo_path: PathLike, path: str, hunk: DiffHunk) -> bool:
    """Stage one hunk of the unstaged diff."""
    return apply_patch(runner, repo_path, build_patch(path, [hunk]), path)


def unstage_hunk(runner: GitRunner, repo_path: PathLike, path: str, hunk: DiffHunk) -> bool:
    """Unstage one hunk of the staged diff."""
    return apply_patch(runner, repo_path, build_patch(path, [hunk]), path, reverse=True)


def stage_lines(
    runner: GitRunner, repo_path: PathLike, path: str, hunk: DiffHunk, selected: Iterable[int]
) -> bool:
    """Stage the selected lines of a hunk from the unstaged diff."""
    patch = build_partial_patch(path, hunk, selected)
    return apply_patch(runner, repo_path, patch, path)


def unstage_lines(
    runner: GitRunner, repo_path: PathLike, path: str, hunk: DiffHunk, selected: Iterable[int]
) -> bool:
    """Unstage the selected lines of a hunk from the staged diff."""
    patch = build_partial_patch(path, hunk, selected, reverse=True)
    return apply_patch(runner, repo_path, patch, path, reverse=True)


def discard_lines(
    runner: GitRunner, repo_path: PathLike, path: str, hunk: DiffHunk, selected: Iterable[int]
) -> bool:
    """Revert the selected lines of an unstaged hunk in the working tree."""
    patch = build_partial_patch(path, hunk, selected, reverse=True)
    return apply_patch(runner, repo_path, patch, path, cached=False, reverse=True)
