"""Lane and color layout for the commit graph.

Contains:
- LaneTable: Lane reservations and color memo for one layout pass
- compute_graph_layout: Assign lanes, colors and edges to a commit list
- main_first_parent_chain: First-parent ancestry of the HEAD commit
- attach_layout: Join parsed commits with their layout rows

The commit list must be topologically ordered (every commit before its
parents), as produced by `git log --topo-order`. A lane is reserved for a
hash when one of its children is laid out, and released when the commit
itself is reached.
"""

from typing import Iterable, Optional

from gitlane.graph.models import Commit, CommitGraphLayout, LaneColor, LaneEdge
from gitlane.parsing.models import ParsedCommit


# Outward search window before falling back to appending a new lane
_LANE_SEARCH_WINDOW = 256

MAIN_CHAIN_COLOR_KEY = 0


class LaneTable:
    """Active lanes and color memo for a single layout computation.

    `hashes[i]` is the commit expected next on lane i (None when free) and
    `color_keys[i]` the color that lane is drawn with. Never share an
    instance between layout runs.
    """

    def __init__(self, main_chain: Optional[set[str]] = None):
        self.hashes: list[Optional[str]] = []
        self.color_keys: list[Optional[int]] = []
        self.color_by_hash: dict[str, int] = {}
        self.next_color_key = 0
        self.main_chain = main_chain or set()

        if self.main_chain:
            for commit_hash in self.main_chain:
                self.color_by_hash[commit_hash] = MAIN_CHAIN_COLOR_KEY
            self.next_color_key = MAIN_CHAIN_COLOR_KEY + 1

    def lane_of(self, commit_hash: str) -> Optional[int]:
        try:
            return self.hashes.index(commit_hash)
        except ValueError:
            return None

    def is_free(self, lane: int) -> bool:
        return lane >= len(self.hashes) or self.hashes[lane] is None

    def ensure_capacity(self, index: int) -> None:
        if index >= len(self.hashes):
            extra = index - len(self.hashes) + 1
            self.hashes.extend([None] * extra)
            self.color_keys.extend([None] * extra)

    def mint_color_key(self, commit_hash: str) -> int:
        assigned = self.next_color_key
        self.next_color_key += 1
        self.color_by_hash[commit_hash] = assigned
        return assigned

    def first_available_lane(self, preferred: int) -> int:
        """Find the free lane closest to `preferred`, scanning +1, -1, +2, -2, ..."""
        preferred = max(0, preferred)
        self.ensure_capacity(preferred)
        if self.hashes[preferred] is None:
            return preferred

        for offset in range(1, _LANE_SEARCH_WINDOW):
            right = preferred + offset
            self.ensure_capacity(right)
            if self.hashes[right] is None:
                return right

            left = preferred - offset
            if left >= 0 and self.hashes[left] is None:
                return left

        self.hashes.append(None)
        self.color_keys.append(None)
        return len(self.hashes) - 1

    def active_lane_colors(self) -> list[LaneColor]:
        """Color of every occupied lane: lane slot, then memo, then a new key."""
        colors: list[LaneColor] = []
        for lane, commit_hash in enumerate(self.hashes):
            if commit_hash is None:
                continue
            color_key = self.color_keys[lane]
            if color_key is None:
                color_key = self.color_by_hash.get(commit_hash)
            if color_key is None:
                color_key = self.mint_color_key(commit_hash)
            colors.append(LaneColor(lane=lane, color_key=color_key))
        return colors

    def lane_for_commit(self, commit_hash: str) -> int:
        existing = self.lane_of(commit_hash)
        if existing is not None:
            return existing
        # Main-chain commits take lane 0; others start at lane 1 to leave it free
        preferred = 0 if commit_hash in self.main_chain else 1
        return self.first_available_lane(preferred)

    def node_color_key(self, commit_hash: str, lane: int) -> int:
        """Color for a commit row: memo, then the lane reserved for it, then a new key."""
        known = self.color_by_hash.get(commit_hash)
        if known is not None:
            return known
        if lane < len(self.hashes) and self.hashes[lane] == commit_hash:
            lane_color = self.color_keys[lane]
            if lane_color is not None:
                self.color_by_hash[commit_hash] = lane_color
                return lane_color
        return self.mint_color_key(commit_hash)

    def consume(self, commit_hash: str, lane: int) -> None:
        """Release the reservation of `lane` if it was held for this commit."""
        if lane < len(self.hashes) and self.hashes[lane] == commit_hash:
            self.hashes[lane] = None
            self.color_keys[lane] = None

    def assigned_color_key(self, commit_hash: str, preferred: Optional[int]) -> int:
        known = self.color_by_hash.get(commit_hash)
        if known is not None:
            return known
        if preferred is not None:
            self.color_by_hash[commit_hash] = preferred
            return preferred
        return self.mint_color_key(commit_hash)

    def reserve(
        self, commit_hash: str, preferred: int, preferred_color: Optional[int]
    ) -> tuple[int, int]:
        """Reserve a lane for a parent commit.

        An existing reservation keeps its lane. Main-chain parents move to
        lane 0 when it is free and stay put otherwise.

        Returns:
            Tuple of (lane, color_key).
        """
        is_main = commit_hash in self.main_chain
        existing = self.lane_of(commit_hash)

        if existing is not None:
            color_key = self.color_by_hash.get(commit_hash)
            if color_key is None:
                color_key = self.color_keys[existing]
            if color_key is None:
                color_key = self.assigned_color_key(commit_hash, preferred_color)

            if is_main and existing != 0 and self.is_free(0):
                self.hashes[existing] = None
                self.color_keys[existing] = None
                return self._occupy(0, commit_hash, color_key), color_key

            self.color_keys[existing] = color_key
            return existing, color_key

        lane = self.first_available_lane(preferred)
        if is_main and lane != 0 and self.is_free(0):
            lane = 0
        color_key = self.assigned_color_key(commit_hash, preferred_color)
        return self._occupy(lane, commit_hash, color_key), color_key

    def trim(self) -> None:
        """Drop free lanes at the end of the table; interior gaps stay."""
        while self.hashes and self.hashes[-1] is None:
            self.hashes.pop()
            self.color_keys.pop()

    def _occupy(self, lane: int, commit_hash: str, color_key: int) -> int:
        self.ensure_capacity(lane)
        self.hashes[lane] = commit_hash
        self.color_keys[lane] = color_key
        return lane


def main_first_parent_chain(commits: Iterable[ParsedCommit]) -> set[str]:
    """Walk first parents from the HEAD commit through the loaded commits.

    The HEAD commit is the first one whose decorations mention HEAD
    (e.g. "HEAD -> main" or a bare "HEAD" when detached).

    Returns:
        Set of hashes on the chain, empty when no commit is decorated with HEAD.
    """
    commits = list(commits)
    head = next(
        (c for c in commits if any("HEAD" in d for d in c.decorations)),
        None,
    )
    if head is None:
        return set()

    parents_by_hash = {c.hash: c.parents for c in commits}
    chain: set[str] = set()
    current = head.hash
    while current not in chain:
        chain.add(current)
        parents = parents_by_hash.get(current)
        if not parents:
            break
        current = parents[0]
    return chain


def compute_graph_layout(
    commits: Iterable[ParsedCommit],
    main_chain: Optional[set[str]] = None,
) -> list[CommitGraphLayout]:
    """Assign a lane, a color and parent edges to every commit.

    Args:
        commits: Commits in topological order, newest first.
        main_chain: Hashes drawn as the trunk (lane 0, color 0); usually
            main_first_parent_chain(commits).

    Returns:
        One CommitGraphLayout per commit, in input order.
    """
    table = LaneTable(main_chain)
    rows: list[CommitGraphLayout] = []

    for commit in commits:
        incoming = table.active_lane_colors()
        lane = table.lane_for_commit(commit.hash)
        node_color = table.node_color_key(commit.hash, lane)
        table.consume(commit.hash, lane)

        edges: list[LaneEdge] = []
        if commit.parents:
            first_lane, first_color = table.reserve(
                commit.parents[0], preferred=lane, preferred_color=node_color
            )
            edges.append(LaneEdge(from_lane=lane, to_lane=first_lane, color_key=first_color))

            for parent in commit.parents[1:]:
                merge_lane, merge_color = table.reserve(
                    parent, preferred=lane + 1, preferred_color=None
                )
                edges.append(LaneEdge(from_lane=lane, to_lane=merge_lane, color_key=merge_color))

        table.trim()
        outgoing = table.active_lane_colors()

        color_by_lane: dict[int, int] = {}
        for item in incoming:
            color_by_lane[item.lane] = item.color_key
        for item in outgoing:
            color_by_lane[item.lane] = item.color_key
        color_by_lane[lane] = node_color
        for edge in edges:
            color_by_lane[edge.from_lane] = node_color
            color_by_lane[edge.to_lane] = edge.color_key

        incoming_lanes = {item.lane for item in incoming}
        started_here = {edge.to_lane for edge in edges if edge.is_diagonal}
        # A lane opened by a diagonal edge on this row starts below the row;
        # a lane that was already active keeps drawing straight through.
        outgoing_lanes = {
            item.lane
            for item in outgoing
            if item.lane not in started_here or item.lane in incoming_lanes
        }

        rows.append(
            CommitGraphLayout(
                id=commit.hash,
                lane=lane,
                node_color_key=node_color,
                incoming_lanes=tuple(sorted(incoming_lanes)),
                outgoing_lanes=tuple(sorted(outgoing_lanes)),
                lane_colors=tuple(
                    LaneColor(lane=index, color_key=color_by_lane[index])
                    for index in sorted(color_by_lane)
                ),
                outgoing_edges=tuple(edges),
            )
        )

    return rows


def attach_layout(
    commits: list[ParsedCommit], main_chain: Optional[set[str]] = None
) -> list[Commit]:
    """Lay out `commits` and return them joined with their rows."""
    layouts = compute_graph_layout(commits, main_chain)
    return [Commit.from_parts(parsed, layout) for parsed, layout in zip(commits, layouts)]
