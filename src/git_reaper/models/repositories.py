"""Repository models: repository metadata, branches, commits, compare."""

from __future__ import annotations

from datetime import datetime

from .base import ReaperModel


class RepositoryRef(ReaperModel):
    """An owner/name pair identifying one GitHub repository."""

    model_config = {"frozen": True}

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def api_path(self) -> str:
        return f"/repos/{self.owner}/{self.name}"


class Repository(ReaperModel):
    full_name: str = ""
    default_branch: str
    html_url: str = ""
    private: bool = False


class BranchCommit(ReaperModel):
    sha: str
    url: str = ""


class Branch(ReaperModel):
    model_config = {"frozen": True}

    name: str
    commit: BranchCommit
    protected: bool = False


class Comparison(ReaperModel):
    status: str = ""
    ahead_by: int
    behind_by: int = 0
    total_commits: int = 0


class CommitAuthor(ReaperModel):
    name: str = ""
    email: str = ""
    date: datetime | None = None


class CommitDetail(ReaperModel):
    author: CommitAuthor | None = None
    message: str = ""


class Commit(ReaperModel):
    sha: str
    commit: CommitDetail | None = None
    html_url: str = ""

    @property
    def authored_at(self) -> datetime | None:
        if self.commit is None or self.commit.author is None:
            return None
        return self.commit.author.date
