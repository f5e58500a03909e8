"""GitHub API client using httpx."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote

import httpx

from .config import ReaperConfig
from .credentials import CredentialRotator
from .exceptions import GitHubApiError, GitHubNotFoundError, GitHubRateLimitError
from .models.repositories import RepositoryRef

logger = logging.getLogger(__name__)

BRANCH_PAGE_SIZE = 100


class CallStatus(Enum):
    SUCCESS = "success"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


@dataclass(frozen=True)
class ApiResponse:
    """One settled API call. Non-success responses are values, not exceptions."""

    status: CallStatus
    response: httpx.Response

    @property
    def ok(self) -> bool:
        return self.status is CallStatus.SUCCESS

    @property
    def status_code(self) -> int:
        return self.response.status_code

    def json(self) -> Any:
        try:
            return self.response.json()
        except json.JSONDecodeError as e:
            raise GitHubApiError(
                self.response.status_code,
                f"JSON parse error: {e}",
                self.response.text[:500],
            ) from e

    def error(self, context: str = "") -> GitHubApiError:
        """Build the exception describing this (non-success) response."""
        resp = self.response
        # secondary rate limits answer 403 without the remaining header
        if self.status is CallStatus.EXHAUSTED or resp.status_code == 403:
            return GitHubRateLimitError(resp.text[:500])
        if resp.status_code == 404:
            message = f"{context}: Not Found" if context else None
            return GitHubNotFoundError(resp.text[:500], message)
        reason = resp.reason_phrase or str(resp.status_code)
        message = f"{context}: {reason}" if context else None
        return GitHubApiError(resp.status_code, reason, resp.text[:500], message)


def classify(response: httpx.Response) -> CallStatus:
    if response.is_success:
        return CallStatus.SUCCESS
    if response.status_code == 403 and response.headers.get("x-ratelimit-remaining") == "0":
        return CallStatus.EXHAUSTED
    return CallStatus.FAILED


class GitHubClient:
    """Async HTTP client for the read-only parts of the GitHub REST API.

    Each client owns the credential rotator of one scan.
    """

    def __init__(
        self,
        config: ReaperConfig | None = None,
        credentials: CredentialRotator | None = None,
    ) -> None:
        self.config = config or ReaperConfig.from_env()
        self.config.validate()
        self.credentials = credentials if credentials is not None else CredentialRotator()
        self._client = httpx.AsyncClient(
            base_url=self.config.api_url,
            headers={"Accept": "application/vnd.github.v3+json"},
            timeout=self.config.timeout,
            verify=self.config.ssl_verify,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ── HTTP helpers ──────────────────────────────────────────────

    async def _send(
        self, path: str, params: dict[str, Any] | None, token: str | None
    ) -> httpx.Response:
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return await self._client.get(path, params=params, headers=headers)

    async def call(self, path: str, params: dict[str, Any] | None = None) -> ApiResponse:
        """GET *path*, retrying once with the next credential on rate-limit exhaustion.

        Transport errors propagate; HTTP failures come back as an ApiResponse.
        """
        index, token = self.credentials.snapshot()
        resp = await self._send(path, params, token)
        status = classify(resp)

        if status is CallStatus.EXHAUSTED and self.credentials.advance_past(index):
            resp = await self._send(path, params, self.credentials.current())
            status = classify(resp)
        elif status is CallStatus.EXHAUSTED:
            logger.warning(f"Rate limit exhausted for {path} with no credential left to try")

        return ApiResponse(status, resp)

    # ── Repositories ──────────────────────────────────────────────

    async def get_repository(self, repo: RepositoryRef) -> ApiResponse:
        return await self.call(repo.api_path)

    # ── Branches ──────────────────────────────────────────────────

    async def list_branches_page(self, repo: RepositoryRef, page: int) -> ApiResponse:
        return await self.call(
            f"{repo.api_path}/branches",
            params={"per_page": BRANCH_PAGE_SIZE, "page": page},
        )

    async def compare(self, repo: RepositoryRef, base: str, head: str) -> ApiResponse:
        basehead = quote(f"{base}...{head}", safe="/")
        return await self.call(f"{repo.api_path}/compare/{basehead}")

    # ── Commits ───────────────────────────────────────────────────

    async def get_commit(self, repo: RepositoryRef, sha: str) -> ApiResponse:
        return await self.call(f"{repo.api_path}/commits/{quote(sha, safe='')}")
