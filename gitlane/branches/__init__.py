"""Branch tree grouping for gitlane."""

from gitlane.branches.tree import (
    MERGE_BASE_BRANCH_LIMIT,
    ROOT_GROUPING_THRESHOLD,
    TRUNK_BRANCH_NAMES,
    BranchGroup,
    BranchLeaf,
    BranchTreeNode,
    build_branch_tree,
    guess_best_parent,
    iter_branch_names,
)


__all__ = [
    "BranchLeaf",
    "BranchGroup",
    "BranchTreeNode",
    "TRUNK_BRANCH_NAMES",
    "MERGE_BASE_BRANCH_LIMIT",
    "ROOT_GROUPING_THRESHOLD",
    "guess_best_parent",
    "build_branch_tree",
    "iter_branch_names",
]
