"""Data models for the commit graph.

Contains:
- LaneEdge: Connector drawn from a commit's lane to one parent's lane
- LaneColor: Color key of one active lane at a row
- CommitGraphLayout: Layout attributes computed for one commit row
- Commit: A parsed commit joined with its layout
"""

from dataclasses import dataclass
from datetime import datetime

from gitlane.parsing.models import ParsedCommit


@dataclass(frozen=True)
class LaneEdge:
    """Connector from a commit's lane to the lane reserved for one parent."""

    from_lane: int
    to_lane: int
    color_key: int

    @property
    def is_diagonal(self) -> bool:
        return self.from_lane != self.to_lane


@dataclass(frozen=True)
class LaneColor:
    """Color key of an active lane."""

    lane: int
    color_key: int


@dataclass(frozen=True)
class CommitGraphLayout:
    """Graph attributes for one commit row."""

    id: str
    lane: int
    node_color_key: int
    incoming_lanes: tuple[int, ...]
    outgoing_lanes: tuple[int, ...]
    lane_colors: tuple[LaneColor, ...]
    outgoing_edges: tuple[LaneEdge, ...]


@dataclass(frozen=True)
class Commit:
    """A commit ready for display: log fields plus graph layout."""

    id: str
    short_hash: str
    parents: tuple[str, ...]
    author: str
    date: datetime
    subject: str
    decorations: tuple[str, ...]
    lane: int
    node_color_key: int
    incoming_lanes: tuple[int, ...]
    outgoing_lanes: tuple[int, ...]
    lane_colors: tuple[LaneColor, ...]
    outgoing_edges: tuple[LaneEdge, ...]

    @classmethod
    def from_parts(cls, parsed: ParsedCommit, layout: CommitGraphLayout) -> "Commit":
        return cls(
            id=parsed.hash,
            short_hash=parsed.short_hash,
            parents=parsed.parents,
            author=parsed.author,
            date=parsed.date,
            subject=parsed.subject,
            decorations=parsed.decorations,
            lane=layout.lane,
            node_color_key=layout.node_color_key,
            incoming_lanes=layout.incoming_lanes,
            outgoing_lanes=layout.outgoing_lanes,
            lane_colors=layout.lane_colors,
            outgoing_edges=layout.outgoing_edges,
        )
