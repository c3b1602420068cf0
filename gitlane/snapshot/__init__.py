"""Repository snapshots.

This package provides:
- models: RepositorySnapshot, CommitPage
- builder: RepositorySnapshotBuilder, OperationState, MIN_COMMIT_LIMIT
- refresh: RefreshCoordinator, RequestTracker
"""

# Models
from gitlane.snapshot.models import CommitPage, RepositorySnapshot

# Builder
from gitlane.snapshot.builder import (
    MIN_COMMIT_LIMIT,
    OperationState,
    RepositorySnapshotBuilder,
)

# Refresh
from gitlane.snapshot.refresh import RefreshCoordinator, RequestTracker

__all__ = [
    # Models
    "CommitPage",
    "RepositorySnapshot",
    # Builder
    "MIN_COMMIT_LIMIT",
    "OperationState",
    "RepositorySnapshotBuilder",
    # Refresh
    "RefreshCoordinator",
    "RequestTracker",
]
