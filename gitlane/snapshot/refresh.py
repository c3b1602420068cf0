"""Refresh supersession for snapshot loading.

Contains:
- RequestTracker: Monotonic tokens where only the latest is current
- RefreshCoordinator: Run snapshot builds off the event loop and discard stale results
"""

import asyncio
import itertools
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, TypeVar, Union

import structlog

from gitlane.snapshot.builder import RepositorySnapshotBuilder
from gitlane.snapshot.models import CommitPage, RepositorySnapshot


logger = structlog.get_logger(__name__)

T = TypeVar("T")


class RequestTracker:
    """Issue increasing tokens; a token is current until a newer one is issued."""

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest = next(self._counter)
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest


class RefreshCoordinator:
    """Coordinate overlapping refreshes of one repository.

    Full refreshes and commit-only refreshes share one token stream, so any
    newer refresh supersedes any older one. Commit detail fetches have their
    own stream. A superseded request returns None and leaves the published
    state untouched. Work already running in a thread cannot be stopped; its
    result is simply dropped.
    """

    def __init__(
        self,
        repo_path: Union[str, Path],
        builder: Optional[RepositorySnapshotBuilder] = None,
    ):
        self.repo_path = repo_path
        self.builder = builder or RepositorySnapshotBuilder()
        self.snapshot: Optional[RepositorySnapshot] = None
        self.commit_details: Optional[str] = None
        self._refreshes = RequestTracker()
        self._details = RequestTracker()
        self._refresh_task: Optional[asyncio.Future] = None
        self._details_task: Optional[asyncio.Future] = None

    async def refresh(self, **options: Any) -> Optional[RepositorySnapshot]:
        """Build and publish a new snapshot.

        Args:
            **options: Passed to RepositorySnapshotBuilder.load_repository.

        Returns:
            The published snapshot, or None when a newer refresh superseded it.
        """
        token = self._refreshes.issue()
        self._cancel(self._refresh_task)
        task = asyncio.ensure_future(
            asyncio.to_thread(self.builder.load_repository, self.repo_path, **options)
        )
        self._refresh_task = task

        snapshot = await self._await_current(task, token, self._refreshes, "refresh")
        if snapshot is not None:
            self.snapshot = snapshot
        return snapshot

    async def refresh_commits(
        self,
        reference: Optional[str] = None,
        selected_commit_id: Optional[str] = None,
        limit: int = 300,
    ) -> Optional[CommitPage]:
        """Reload only the commit list and fold it into the published snapshot."""
        token = self._refreshes.issue()
        self._cancel(self._refresh_task)
        task = asyncio.ensure_future(
            asyncio.to_thread(
                self.builder.load_commits,
                self.repo_path,
                reference,
                selected_commit_id,
                limit,
            )
        )
        self._refresh_task = task

        page = await self._await_current(task, token, self._refreshes, "refresh_commits")
        if page is not None and self.snapshot is not None:
            self.snapshot = _with_commits(self.snapshot, page)
        return page

    async def load_details(self, commit_id: str) -> Optional[str]:
        """Fetch details for a commit; None if a newer fetch superseded it."""
        token = self._details.issue()
        self._cancel(self._details_task)
        task = asyncio.ensure_future(
            asyncio.to_thread(self.builder.load_commit_details, self.repo_path, commit_id)
        )
        self._details_task = task

        details = await self._await_current(task, token, self._details, "load_details")
        if details is not None:
            self.commit_details = details
        return details

    @staticmethod
    def _cancel(task: Optional[asyncio.Future]) -> None:
        if task is not None and not task.done():
            task.cancel()

    async def _await_current(
        self,
        task: "asyncio.Future[T]",
        token: int,
        tracker: RequestTracker,
        kind: str,
    ) -> Optional[T]:
        try:
            result = await task
        except asyncio.CancelledError:
            if tracker.is_current(token):
                raise
            logger.debug("request_superseded", kind=kind, token=token, latest=tracker.latest)
            return None
        except Exception as e:
            if tracker.is_current(token):
                raise
            logger.debug("stale_request_failed", kind=kind, token=token, error=str(e))
            return None

        if not tracker.is_current(token):
            logger.debug("request_superseded", kind=kind, token=token, latest=tracker.latest)
            return None
        return result


def _with_commits(snapshot: RepositorySnapshot, page: CommitPage) -> RepositorySnapshot:
    return replace(
        snapshot,
        commits=page.commits,
        has_more_commits=page.has_more,
        selected_commit_id=page.selected_commit_id,
    )
