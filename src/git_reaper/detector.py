"""Merge status detection for a single branch."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .client import GitHubClient
from .deadline import ScanDeadline
from .models.repositories import Branch, Comparison, Commit, RepositoryRef
from .models.scan import DeadBranch

logger = logging.getLogger(__name__)


def to_calendar_date(value: datetime) -> str:
    """Render a timestamp as its UTC calendar date (``YYYY-MM-DD``)."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date().isoformat()


class MergeDetector:
    """Decides whether one branch is fully merged into the main branch."""

    def __init__(self, client: GitHubClient, repo: RepositoryRef) -> None:
        self.client = client
        self.repo = repo

    async def check(
        self, main_branch: str, branch: Branch, deadline: ScanDeadline | None = None
    ) -> DeadBranch | None:
        """Return a DeadBranch record, or None when the branch is not (provably) dead.

        Per-branch failures are logged and reported as None so a single
        branch never aborts the scan.
        """
        if deadline is not None and deadline.expired:
            return None
        try:
            return await self._check(main_branch, branch)
        except Exception as e:
            logger.warning(f"Failed to check branch {branch.name}: {e}")
            return None

    async def _check(self, main_branch: str, branch: Branch) -> DeadBranch | None:
        compared = await self.client.compare(self.repo, main_branch, branch.name)
        if not compared.ok:
            logger.debug(f"Comparison of {branch.name} failed with {compared.status_code}")
            return None

        comparison = Comparison.model_validate(compared.json())
        if comparison.ahead_by != 0:
            logger.debug(f"{branch.name} is {comparison.ahead_by} commit(s) ahead")
            return None

        fetched = await self.client.get_commit(self.repo, branch.commit.sha)
        if not fetched.ok:
            logger.debug(f"Commit lookup for {branch.name} failed with {fetched.status_code}")
            return None

        commit = Commit.model_validate(fetched.json())
        authored_at = commit.authored_at
        if authored_at is None:
            return None

        return DeadBranch(
            name=branch.name,
            last_commit_date=to_calendar_date(authored_at),
            last_commit_sha=commit.sha,
        )
