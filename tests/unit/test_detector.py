"""Tests for merge detection of single branches."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from git_reaper.deadline import ScanDeadline
from git_reaper.detector import MergeDetector, to_calendar_date
from git_reaper.models.repositories import Branch

BRANCH = Branch.model_validate({"name": "feature/a", "commit": {"sha": "sha-a"}})
COMPARE = "/repos/octo/demo/compare/main...feature/a"
COMMIT = "/repos/octo/demo/commits/sha-a"


def _commit(date: str | None = "2024-03-25T14:45:30+01:00") -> dict:
    author = {"name": "Octo Cat", "date": date} if date else {"name": "Octo Cat"}
    return {"sha": "sha-a", "commit": {"author": author, "message": "wip"}}


class TestCalendarDate:
    def test_offset_timestamp(self):
        tz = timezone(timedelta(hours=1))
        assert to_calendar_date(datetime(2024, 3, 25, 14, 45, 30, tzinfo=tz)) == "2024-03-25"

    def test_normalizes_to_utc(self):
        tz = timezone(timedelta(hours=2))
        assert to_calendar_date(datetime(2024, 3, 25, 1, 0, tzinfo=tz)) == "2024-03-24"

    def test_naive_timestamp(self):
        assert to_calendar_date(datetime(2024, 1, 15, 23, 59)) == "2024-01-15"


class TestCheck:
    async def test_merged_branch_is_dead(self, client, repo, mock_api):
        mock_api.get(COMPARE).mock(
            return_value=httpx.Response(200, json={"status": "behind", "ahead_by": 0, "behind_by": 3})
        )
        mock_api.get(COMMIT).mock(return_value=httpx.Response(200, json=_commit()))

        record = await MergeDetector(client, repo).check("main", BRANCH)

        assert record is not None
        assert record.to_dict() == {
            "name": "feature/a",
            "lastCommitDate": "2024-03-25",
            "lastCommitSha": "sha-a",
        }

    async def test_branch_ahead_is_not_dead(self, client, repo, mock_api):
        mock_api.get(COMPARE).mock(
            return_value=httpx.Response(200, json={"status": "diverged", "ahead_by": 2, "behind_by": 1})
        )
        commit_route = mock_api.get(COMMIT).mock(return_value=httpx.Response(200, json=_commit()))

        assert await MergeDetector(client, repo).check("main", BRANCH) is None
        assert not commit_route.called

    async def test_failed_comparison_is_not_dead(self, client, repo, mock_api):
        mock_api.get(COMPARE).mock(return_value=httpx.Response(404))
        assert await MergeDetector(client, repo).check("main", BRANCH) is None

    async def test_failed_commit_lookup_is_not_dead(self, client, repo, mock_api):
        mock_api.get(COMPARE).mock(return_value=httpx.Response(200, json={"ahead_by": 0}))
        mock_api.get(COMMIT).mock(return_value=httpx.Response(500))
        assert await MergeDetector(client, repo).check("main", BRANCH) is None

    async def test_commit_without_author_date_is_not_dead(self, client, repo, mock_api):
        mock_api.get(COMPARE).mock(return_value=httpx.Response(200, json={"ahead_by": 0}))
        mock_api.get(COMMIT).mock(return_value=httpx.Response(200, json=_commit(date=None)))
        assert await MergeDetector(client, repo).check("main", BRANCH) is None

    async def test_malformed_payload_is_absorbed(self, client, repo, mock_api):
        mock_api.get(COMPARE).mock(return_value=httpx.Response(200, json={"status": "weird"}))
        assert await MergeDetector(client, repo).check("main", BRANCH) is None

    async def test_transport_error_is_absorbed(self, client, repo, mock_api):
        mock_api.get(COMPARE).mock(side_effect=httpx.ReadTimeout("slow"))
        assert await MergeDetector(client, repo).check("main", BRANCH) is None

    async def test_same_inputs_same_classification(self, client, repo, mock_api):
        mock_api.get(COMPARE).mock(return_value=httpx.Response(200, json={"ahead_by": 0}))
        mock_api.get(COMMIT).mock(return_value=httpx.Response(200, json=_commit()))
        detector = MergeDetector(client, repo)

        first = await detector.check("main", BRANCH)
        second = await detector.check("main", BRANCH)

        assert first == second
        assert first is not None

    async def test_expired_deadline_skips_remote_calls(self, client, repo, mock_api):
        route = mock_api.get(COMPARE).mock(return_value=httpx.Response(200, json={"ahead_by": 0}))
        deadline = ScanDeadline(0.01)
        with pytest.raises(TimeoutError):
            async with deadline.armed():
                await asyncio.sleep(10)

        assert await MergeDetector(client, repo).check("main", BRANCH, deadline) is None
        assert not route.called
