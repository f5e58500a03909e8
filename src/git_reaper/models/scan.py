"""Scan models: dead branch records, progress snapshots, outcomes."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import Field, model_validator

from .base import ReaperModel


class ErrorCode(str, Enum):
    TIMEOUT = "TIMEOUT"
    ANALYSIS_FAILED = "ANALYSIS_FAILED"


class DeadBranch(ReaperModel):
    """A branch fully merged into the main branch but never deleted."""

    model_config = {"frozen": True}

    name: str
    last_commit_date: str = Field(alias="lastCommitDate")
    last_commit_sha: str = Field(alias="lastCommitSha")


class ScanProgress(ReaperModel):
    model_config = {"frozen": True}

    current: int = 0
    total: int = 0
    found: int = 0
    status: str = ""


class ScanError(ReaperModel):
    message: str = Field(alias="errorMessage")
    code: ErrorCode = Field(alias="errorCode")


class ScanOutcome(ReaperModel):
    """Either the dead branches of a finished scan or the error that ended it."""

    dead_branches: list[DeadBranch] | None = Field(default=None, alias="deadBranches")
    error: ScanError | None = None

    @model_validator(mode="after")
    def check_exactly_one(self) -> ScanOutcome:
        if (self.dead_branches is None) == (self.error is None):
            msg = "A scan outcome holds either dead branches or an error"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, dead_branches: list[DeadBranch]) -> ScanOutcome:
        return cls(dead_branches=list(dead_branches))

    @classmethod
    def failure(cls, message: str, code: ErrorCode) -> ScanOutcome:
        return cls(error=ScanError(message=message, code=code))

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None:
            return self.error.to_dict()
        return {"deadBranches": [b.to_dict() for b in self.dead_branches or []]}
