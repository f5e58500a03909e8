"""Git Reaper exceptions."""

from __future__ import annotations

RATE_LIMIT_MESSAGE = (
    "GitHub API rate limit exceeded. Please provide a valid GitHub token "
    "or wait for the rate limit to reset."
)


class ReaperError(Exception):
    """Base exception for Git Reaper operations."""


class InvalidRepositoryError(ReaperError):
    """Raised when a repository target cannot be parsed into owner/name."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(
            f"Invalid GitHub URL: {value!r}. Expected: https://github.com/owner/repo"
        )


class GitHubApiError(ReaperError):
    """Raised when the GitHub API returns a non-success response."""

    def __init__(
        self, status_code: int, status_text: str, body: str = "", message: str | None = None
    ) -> None:
        self.status_code = status_code
        self.status_text = status_text
        self.body = body
        super().__init__(message or f"GitHub API Error {status_code} {status_text}: {body}")


class GitHubRateLimitError(GitHubApiError):
    """Raised when every available credential has exhausted its rate limit."""

    def __init__(self, body: str = "") -> None:
        super().__init__(403, "Forbidden", body, RATE_LIMIT_MESSAGE)


class GitHubNotFoundError(GitHubApiError):
    """Raised on 404 responses."""

    def __init__(self, body: str = "", message: str | None = None) -> None:
        super().__init__(404, "Not Found", body, message)
