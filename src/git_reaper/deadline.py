"""Scan deadline with a one-shot adaptive extension."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class ScanDeadline:
    """A single time budget governing one scan.

    ``armed()`` wraps :func:`asyncio.timeout`; when the budget runs out every
    pending call inside it is cancelled and the block raises ``TimeoutError``.
    With ``adaptive`` set, ``extend_for()`` may push the deadline out once the
    number of branches to check is known. It only ever grows, and only once.
    """

    def __init__(
        self,
        seconds: float,
        *,
        adaptive: bool = False,
        adaptive_base: float = 180,
        per_branch: float = 1.0,
    ) -> None:
        self.seconds = seconds
        self.adaptive = adaptive
        self.adaptive_base = adaptive_base
        self.per_branch = per_branch
        self._timeout: asyncio.Timeout | None = None
        self._extended = False

    @asynccontextmanager
    async def armed(self) -> AsyncIterator[ScanDeadline]:
        async with asyncio.timeout(self.seconds) as timeout:
            self._timeout = timeout
            yield self

    @property
    def expired(self) -> bool:
        return self._timeout is not None and self._timeout.expired()

    def budget_for(self, branch_count: int) -> float:
        return max(self.seconds, self.adaptive_base + self.per_branch * branch_count)

    def extend_for(self, branch_count: int) -> float | None:
        """Re-arm the deadline for *branch_count* branches, measured from now.

        Returns the new budget in seconds, or None when no extension applies.
        """
        if not self.adaptive or self._extended or self._timeout is None:
            return None
        self._extended = True
        budget = self.budget_for(branch_count)
        self._timeout.reschedule(asyncio.get_running_loop().time() + budget)
        logger.info(f"Scan deadline set to {budget:.0f}s for {branch_count} branches")
        return budget
