"""Tests for exceptions."""

from git_reaper.exceptions import (
    GitHubApiError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    InvalidRepositoryError,
    ReaperError,
)


def test_api_error():
    e = GitHubApiError(500, "Internal Server Error", "something broke")
    assert e.status_code == 500
    assert "500" in str(e)
    assert "something broke" in str(e)


def test_api_error_custom_message():
    e = GitHubApiError(502, "Bad Gateway", message="Failed to fetch branches: Bad Gateway")
    assert str(e) == "Failed to fetch branches: Bad Gateway"


def test_rate_limit_error():
    e = GitHubRateLimitError("API rate limit exceeded for 1.2.3.4")
    assert e.status_code == 403
    assert "provide a valid GitHub token" in str(e)
    assert isinstance(e, GitHubApiError)


def test_not_found_error():
    e = GitHubNotFoundError("resource not found")
    assert e.status_code == 404


def test_not_found_error_custom_message():
    e = GitHubNotFoundError("{}", message="Failed to fetch branches: Not Found")
    assert e.status_code == 404
    assert str(e) == "Failed to fetch branches: Not Found"


def test_invalid_repository():
    e = InvalidRepositoryError("not a url")
    assert isinstance(e, ReaperError)
    assert "Invalid GitHub URL" in str(e)
