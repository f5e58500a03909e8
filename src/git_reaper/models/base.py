"""Base model for GitHub API payloads and scan results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ReaperModel(BaseModel):
    """Base model with common behavior for all Git Reaper models."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
