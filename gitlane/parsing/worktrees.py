"""Worktree list parsing.

Contains:
- parse_worktrees: Parse `git worktree list --porcelain` output
"""

import os
from typing import Optional

from gitlane.parsing.models import WorktreeItem


def _normalize_path(path: str) -> str:
    return os.path.normpath(os.path.abspath(path))


def _short_branch(ref: str) -> str:
    for prefix in ("refs/heads/", "refs/remotes/"):
        if ref.startswith(prefix):
            return ref[len(prefix):]
    return ref


def parse_worktrees(output: str, current_path: Optional[str] = None) -> list[WorktreeItem]:
    """Parse porcelain worktree output.

    Blocks are separated by blank lines. Each block starts with
    `worktree <path>` and may contain `HEAD <hash>`, `branch <ref>`,
    `locked [reason]`, `prunable [reason]` and `detached`. Blocks without a
    worktree line are dropped.

    Args:
        output: Raw stdout of git worktree list --porcelain.
        current_path: Path of the repository being inspected, used to mark
            the current worktree.

    Returns:
        List of WorktreeItem in output order.
    """
    items: list[WorktreeItem] = []
    current = _normalize_path(current_path) if current_path else None
    block: dict = {}

    def flush() -> None:
        path = block.get("path", "")
        if path:
            branch = _short_branch(block.get("branch", ""))
            items.append(
                WorktreeItem(
                    path=path,
                    head=block.get("head", "")[:8],
                    branch=branch or "detached",
                    is_detached=block.get("detached", False),
                    is_locked=block.get("locked", False),
                    lock_reason=block.get("lock_reason", ""),
                    is_prunable=block.get("prunable", False),
                    prune_reason=block.get("prune_reason", ""),
                    is_current=current is not None and _normalize_path(path) == current,
                )
            )
        block.clear()

    for line in output.splitlines() + [""]:
        if not line.strip():
            flush()
            continue

        if line.startswith("worktree "):
            block["path"] = line[len("worktree "):]
        elif line.startswith("HEAD "):
            block["head"] = line[len("HEAD "):]
        elif line.startswith("branch "):
            block["branch"] = line[len("branch "):]
        elif line.startswith("locked"):
            block["locked"] = True
            block["lock_reason"] = line[len("locked"):].strip()
        elif line.startswith("prunable"):
            block["prunable"] = True
            block["prune_reason"] = line[len("prunable"):].strip()
        elif line == "detached":
            block["detached"] = True

    return items
