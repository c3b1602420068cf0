"""Commit graph layout for gitlane.

This package provides:
- models: LaneEdge, LaneColor, CommitGraphLayout, Commit
- layout: LaneTable, compute_graph_layout, main_first_parent_chain,
          attach_layout
"""

from gitlane.graph.models import (
    Commit,
    CommitGraphLayout,
    LaneColor,
    LaneEdge,
)
from gitlane.graph.layout import (
    MAIN_CHAIN_COLOR_KEY,
    LaneTable,
    attach_layout,
    compute_graph_layout,
    main_first_parent_chain,
)


__all__ = [
    "LaneEdge",
    "LaneColor",
    "CommitGraphLayout",
    "Commit",
    "MAIN_CHAIN_COLOR_KEY",
    "LaneTable",
    "compute_graph_layout",
    "main_first_parent_chain",
    "attach_layout",
]
