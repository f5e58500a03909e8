"""Dead branch scan orchestration."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from .client import BRANCH_PAGE_SIZE, GitHubClient
from .config import ReaperConfig
from .credentials import CredentialRotator
from .deadline import ScanDeadline
from .detector import MergeDetector
from .models.repositories import Branch, Repository, RepositoryRef
from .models.scan import DeadBranch, ErrorCode, ScanOutcome, ScanProgress
from .targets import parse_repository_target

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = (
    "Repository analysis timed out. This repository may have too many branches "
    "to analyze quickly. Try using a GitHub token for faster API access."
)


class ScanState(Enum):
    CONNECTING = "connecting"
    LISTING_BRANCHES = "listing_branches"
    SCANNING = "scanning"
    COMPLETE = "complete"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@runtime_checkable
class ProgressObserver(Protocol):
    """Receives progress snapshots; may return an awaitable."""

    def on_progress(self, snapshot: ScanProgress) -> Awaitable[None] | None: ...


ProgressCallback = Callable[[ScanProgress], Any]


class CallbackObserver:
    """Adapts a plain callable to the ProgressObserver protocol."""

    def __init__(self, callback: ProgressCallback) -> None:
        self.callback = callback

    def on_progress(self, snapshot: ScanProgress) -> Any:
        return self.callback(snapshot)


def as_observer(progress: ProgressObserver | ProgressCallback | None) -> ProgressObserver | None:
    if progress is None or isinstance(progress, ProgressObserver):
        return progress
    return CallbackObserver(progress)


def _first_leaf(error: BaseException) -> BaseException:
    # TaskGroup wraps task failures; report the first underlying error
    while isinstance(error, BaseExceptionGroup) and error.exceptions:
        error = error.exceptions[0]
    return error


@dataclass
class _Tally:
    total: int
    processed: int = 0
    records: list[DeadBranch] = field(default_factory=list)


class BranchScanner:
    """Runs one scan: main branch lookup, branch listing, batched merge checks.

    ``run()`` never raises for scan failures; every error is classified into
    the returned ScanOutcome.
    """

    def __init__(
        self,
        client: GitHubClient,
        target: str,
        deadline: ScanDeadline,
        *,
        observer: ProgressObserver | None = None,
        batch_size: int = 10,
    ) -> None:
        self.client = client
        self.target = target
        self.deadline = deadline
        self.observer = observer
        self.batch_size = batch_size
        self.state = ScanState.CONNECTING

    async def run(self) -> ScanOutcome:
        try:
            async with self.deadline.armed():
                records = await self._scan()
        except TimeoutError:
            self._transition(ScanState.TIMED_OUT)
            logger.warning(f"Analysis of {self.target} exceeded its deadline")
            return ScanOutcome.failure(TIMEOUT_MESSAGE, ErrorCode.TIMEOUT)
        except Exception as e:
            self._transition(ScanState.FAILED)
            logger.exception(f"Analysis of {self.target} failed")
            cause = _first_leaf(e)
            return ScanOutcome.failure(
                str(cause) or type(cause).__name__, ErrorCode.ANALYSIS_FAILED
            )

        self._transition(ScanState.COMPLETE)
        return ScanOutcome.success(records)

    async def _scan(self) -> list[DeadBranch]:
        await self._emit(0, 0, 0, "Connecting to GitHub API...")
        repo = parse_repository_target(self.target)
        main_branch = await self._fetch_main_branch(repo)

        self._transition(ScanState.LISTING_BRANCHES)
        await self._emit(0, 0, 0, f"Fetching branches from {repo.full_name}...")
        branches = await self._list_branches(repo)
        candidates = [b for b in branches if b.name != main_branch]
        total = len(candidates)
        self.deadline.extend_for(total)
        await self._emit(0, total, 0, f"Found {total} branches to analyze...")

        self._transition(ScanState.SCANNING)
        detector = MergeDetector(self.client, repo)
        tally = _Tally(total)
        for start in range(0, total, self.batch_size):
            batch = candidates[start : start + self.batch_size]
            async with asyncio.TaskGroup() as tg:
                for branch in batch:
                    tg.create_task(self._settle(detector, main_branch, branch, tally))
            logger.debug(f"Batch settled: {tally.processed}/{total} processed")

        logger.info(
            f"{repo.full_name}: {len(tally.records)} dead of {total} branches "
            f"(main branch {main_branch!r})"
        )
        await self._emit(total, total, len(tally.records), "Analysis complete!")
        return tally.records

    async def _fetch_main_branch(self, repo: RepositoryRef) -> str:
        resp = await self.client.get_repository(repo)
        if not resp.ok:
            raise resp.error("Failed to fetch repository info")
        return Repository.model_validate(resp.json()).default_branch

    async def _list_branches(self, repo: RepositoryRef) -> list[Branch]:
        branches: list[Branch] = []
        page = 1
        while True:
            resp = await self.client.list_branches_page(repo, page)
            if not resp.ok:
                raise resp.error("Failed to fetch branches")
            page_branches = [Branch.model_validate(item) for item in resp.json()]
            branches.extend(page_branches)
            if len(page_branches) < BRANCH_PAGE_SIZE:
                return branches
            page += 1

    async def _settle(
        self, detector: MergeDetector, main_branch: str, branch: Branch, tally: _Tally
    ) -> None:
        record = await detector.check(main_branch, branch, self.deadline)
        tally.processed += 1
        if record is not None:
            tally.records.append(record)
        await self._emit(
            tally.processed,
            tally.total,
            len(tally.records),
            f"Analyzed {tally.processed}/{tally.total} branches...",
        )

    async def _emit(self, current: int, total: int, found: int, status: str) -> None:
        if self.observer is None:
            return
        result = self.observer.on_progress(
            ScanProgress(current=current, total=total, found=found, status=status)
        )
        if inspect.isawaitable(result):
            await result

    def _transition(self, state: ScanState) -> None:
        if state is not self.state:
            logger.info(f"Scan of {self.target}: {self.state.value} -> {state.value}")
            self.state = state


async def analyze_repository(
    target: str,
    *,
    timeout: float | None = None,
    token: str | None = None,
    on_progress: ProgressObserver | ProgressCallback | None = None,
    adaptive_timeout: bool | None = None,
    config: ReaperConfig | None = None,
) -> ScanOutcome:
    """Find the dead branches of *target* (a GitHub URL or ``owner/repo``).

    *timeout* is the base scan budget in seconds. Unless adaptive extension is
    disabled, it grows once the branch count is known. The caller's *token*
    is tried first, then any tokens from the configuration.
    """
    config = config or ReaperConfig.from_env()
    adaptive = config.adaptive_timeout if adaptive_timeout is None else adaptive_timeout
    deadline = ScanDeadline(
        timeout if timeout is not None else config.scan_timeout,
        adaptive=adaptive,
        adaptive_base=config.adaptive_base,
        per_branch=config.per_branch_timeout,
    )
    credentials = CredentialRotator(config.credentials_for(token))

    async with GitHubClient(config, credentials) as client:
        scanner = BranchScanner(
            client,
            target,
            deadline,
            observer=as_observer(on_progress),
            batch_size=config.batch_size,
        )
        return await scanner.run()
