"""Branch tree construction.

Contains:
- BranchLeaf / BranchGroup: The two kinds of tree node
- TRUNK_BRANCH_NAMES: Conventional long-lived branch names
- guess_best_parent: Infer the branch a local branch was forked from
- build_branch_tree: Build the "Local branches" and "Remote branches" groups
"""

from dataclasses import dataclass
from typing import Callable, Optional, Union

from gitlane.parsing.models import BranchInfo


TRUNK_BRANCH_NAMES = ("main", "master", "develop", "dev", "trunk", "production")

# Merge-base lookups run one git process per branch; skip them above this count
MERGE_BASE_BRANCH_LIMIT = 48

# Above this many root branches, roots are grouped by their "prefix/" namespace
ROOT_GROUPING_THRESHOLD = 20

_RELEASE_PREFIXES = ("hotfix/", "release/")
_TOPIC_PREFIXES = ("feature/", "bugfix/", "chore/", "test/")

MergeBaseLookup = Callable[[str, str], Optional[str]]


@dataclass(frozen=True)
class BranchLeaf:
    """A node bound to one branch. Local leaves may nest inferred children."""

    id: str
    title: str
    subtitle: str
    branch_name: str
    children: tuple["BranchTreeNode", ...] = ()


@dataclass(frozen=True)
class BranchGroup:
    """A grouping node with no branch of its own."""

    id: str
    title: str
    subtitle: str
    children: tuple["BranchTreeNode", ...] = ()


BranchTreeNode = Union[BranchLeaf, BranchGroup]


def guess_best_parent(branch: str, trunks: list[str]) -> Optional[str]:
    """Guess the branch `branch` was created from, by naming convention.

    hotfix/* and release/* come from main/master; feature/*, bugfix/*,
    chore/* and test/* come from develop/dev, falling back to main/master.

    Args:
        branch: Local branch name.
        trunks: Trunk names that exist locally, in TRUNK_BRANCH_NAMES order.

    Returns:
        The guessed parent, or None when no trunk exists.
    """
    if not branch.strip():
        return None

    def first_of(*names: str) -> Optional[str]:
        return next((trunk for trunk in trunks if trunk in names), None)

    fallback = trunks[0] if trunks else None
    if branch.startswith(_RELEASE_PREFIXES):
        return first_of("main", "master") or fallback
    if branch.startswith(_TOPIC_PREFIXES):
        return first_of("develop", "dev") or first_of("main", "master") or fallback
    return first_of("main", "master") or fallback


def _by_date_desc(branches: list[BranchInfo]) -> list[BranchInfo]:
    return sorted(branches, key=lambda b: b.committer_date, reverse=True)


def build_branch_tree(
    branches: list[BranchInfo],
    infer_origins: bool = True,
    merge_base: Optional[MergeBaseLookup] = None,
) -> list[BranchTreeNode]:
    """Group branches for display.

    Local branches nest under the branch they are believed to come from: the
    upstream when set, otherwise (with `infer_origins`) guess_best_parent.
    Remote branches are grouped by remote name.

    Args:
        branches: All local and remote branches.
        infer_origins: Guess parents from naming conventions.
        merge_base: Callable returning the merge-base hash of two branches,
            used only for the fork hint in subtitles.

    Returns:
        Two groups: local branches, then remote branches.
    """
    locals_ = _by_date_desc([b for b in branches if not b.is_remote])
    remotes = sorted((b for b in branches if b.is_remote), key=lambda b: b.name)

    local_names = {b.name for b in locals_}
    trunks = [name for name in TRUNK_BRANCH_NAMES if name in local_names]
    compute_fork = infer_origins and merge_base is not None and len(locals_) <= MERGE_BASE_BRANCH_LIMIT

    parent_by_child: dict[str, str] = {}
    fork_by_child: dict[str, str] = {}

    for branch in locals_:
        if branch.name in trunks:
            continue

        parent_ref: Optional[str] = None
        if branch.upstream:
            parent_ref = branch.upstream
        elif infer_origins:
            parent_ref = guess_best_parent(branch.name, trunks)

        if not parent_ref or parent_ref == branch.name:
            continue
        parent_by_child[branch.name] = parent_ref

        if compute_fork and parent_ref in local_names:
            fork = merge_base(branch.name, parent_ref)
            if fork:
                fork_by_child[branch.name] = fork[:8]

    children_by_parent: dict[str, list[BranchInfo]] = {}
    roots: list[BranchInfo] = []
    for branch in locals_:
        parent = parent_by_child.get(branch.name)
        if parent in local_names:
            children_by_parent.setdefault(parent, []).append(branch)
        else:
            roots.append(branch)

    def subtitle(branch: BranchInfo) -> str:
        parts = []
        if branch.name in parent_by_child:
            parts.append(f"from: {parent_by_child[branch.name]}")
        if branch.name in fork_by_child:
            parts.append(f"fork: {fork_by_child[branch.name]}")
        if branch.upstream:
            parts.append(f"upstream: {branch.upstream}")
        else:
            parts.append(f"HEAD {branch.short_head}")
        return " | ".join(parts)

    def local_node(branch: BranchInfo) -> BranchLeaf:
        children = _by_date_desc(children_by_parent.get(branch.name, []))
        return BranchLeaf(
            id=f"local:{branch.name}",
            title=branch.name,
            subtitle=subtitle(branch),
            branch_name=branch.name,
            children=tuple(local_node(child) for child in children),
        )

    if len(roots) > ROOT_GROUPING_THRESHOLD:
        local_roots = _group_roots_by_namespace(roots, subtitle)
    else:
        local_roots = [local_node(branch) for branch in roots]

    local_subtitle = str(len(locals_))
    if infer_origins and not compute_fork:
        local_subtitle += " (quick inference)"

    local_group = BranchGroup(
        id="group:locals",
        title="Local branches",
        subtitle=local_subtitle,
        children=tuple(local_roots),
    )

    return [local_group, _remote_group(remotes)]


def _group_roots_by_namespace(
    roots: list[BranchInfo], subtitle: Callable[[BranchInfo], str]
) -> list[BranchTreeNode]:
    grouped: dict[str, list[BranchInfo]] = {}
    for branch in roots:
        namespace, sep, rest = branch.name.partition("/")
        key = namespace if sep and namespace and rest else "misc"
        grouped.setdefault(key, []).append(branch)

    groups: list[BranchTreeNode] = []
    for namespace in sorted(grouped):
        members = _by_date_desc(grouped[namespace])
        children = []
        for branch in members:
            title = branch.name
            if namespace != "misc" and branch.name.startswith(f"{namespace}/"):
                title = branch.name[len(namespace) + 1:]
            children.append(
                BranchLeaf(
                    id=f"local-grouped:{branch.name}",
                    title=title,
                    subtitle=subtitle(branch),
                    branch_name=branch.name,
                )
            )
        groups.append(
            BranchGroup(
                id=f"local-namespace:{namespace}",
                title=namespace,
                subtitle=str(len(members)),
                children=tuple(children),
            )
        )
    return groups


def _remote_group(remotes: list[BranchInfo]) -> BranchGroup:
    by_remote: dict[str, list[BranchInfo]] = {}
    for branch in remotes:
        if branch.name.endswith("/HEAD"):
            continue
        remote_name = branch.name.split("/", 1)[0] or "remote"
        by_remote.setdefault(remote_name, []).append(branch)

    remote_groups = []
    for remote_name in sorted(by_remote):
        members = by_remote[remote_name]
        prefix = f"{remote_name}/"
        children = tuple(
            BranchLeaf(
                id=f"remote:{branch.name}",
                title=branch.name[len(prefix):] if branch.name.startswith(prefix) else branch.name,
                subtitle=f"HEAD {branch.short_head}",
                branch_name=branch.name,
            )
            for branch in members
        )
        remote_groups.append(
            BranchGroup(
                id=f"group:remote:{remote_name}",
                title=remote_name,
                subtitle=str(len(members)),
                children=children,
            )
        )

    return BranchGroup(
        id="group:remotes",
        title="Remote branches",
        subtitle=str(sum(len(members) for members in by_remote.values())),
        children=tuple(remote_groups),
    )


def iter_branch_names(nodes: list[BranchTreeNode]) -> list[str]:
    """Branch names of every leaf in the tree, depth first."""
    names: list[str] = []
    for node in nodes:
        if isinstance(node, BranchLeaf):
            names.append(node.branch_name)
        names.extend(iter_branch_names(list(node.children)))
    return names
