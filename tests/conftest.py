"""Shared test fixtures for git-reaper."""

from __future__ import annotations

import pytest
import respx

from git_reaper.client import GitHubClient
from git_reaper.config import ReaperConfig
from git_reaper.credentials import CredentialRotator
from git_reaper.models.repositories import RepositoryRef

TEST_API_URL = "https://api.github.com"
TEST_TOKEN = "test-token"


@pytest.fixture
def config() -> ReaperConfig:
    return ReaperConfig(api_url=TEST_API_URL, tokens=[])


@pytest.fixture
def repo() -> RepositoryRef:
    return RepositoryRef(owner="octo", name="demo")


@pytest.fixture
async def client(config: ReaperConfig):
    gh = GitHubClient(config, CredentialRotator([TEST_TOKEN]))
    yield gh
    await gh.close()


@pytest.fixture
def mock_api() -> respx.MockRouter:
    with respx.mock(base_url=TEST_API_URL, assert_all_called=False) as router:
        yield router
