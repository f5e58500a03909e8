"""Git Reaper MCP server — dead branch tool registration."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Annotated, Any

from fastmcp import Context, FastMCP
from pydantic import Field

from ..config import ReaperConfig
from ..models.scan import ErrorCode, ScanOutcome, ScanProgress
from ..scanner import analyze_repository


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    config = ReaperConfig.from_env()
    config.validate()
    yield {"config": config}


mcp = FastMCP(
    name="Git Reaper MCP Server",
    instructions=(
        "Finds dead branches in GitHub repositories"
        " — branches fully merged into the default branch but never deleted."
    ),
    lifespan=lifespan,
)


def _get_config(ctx: Context) -> ReaperConfig:
    return ctx.request_context.lifespan_context["config"]


def _ok(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _token_used(config: ReaperConfig, github_token: str | None) -> str:
    if github_token:
        return "user"
    if config.tokens:
        return "server"
    return "none"


def _result(outcome: ScanOutcome, repository: str, token_used: str) -> str:
    detail: dict[str, Any] = outcome.to_dict()
    detail["tokenUsed"] = token_used
    if outcome.error is None:
        detail["repositoryUrl"] = repository
        detail["analyzedAt"] = datetime.now(timezone.utc).isoformat()
    elif outcome.error.code is ErrorCode.TIMEOUT:
        detail["hint"] = "Provide a GitHub token or raise timeout_seconds for large repositories."
    else:
        detail["hint"] = "Verify the repository URL and that the token can read the repository."
    return _ok(detail)


class _ContextProgress:
    """Forwards scan progress to the MCP client."""

    def __init__(self, ctx: Context) -> None:
        self._ctx = ctx

    async def on_progress(self, snapshot: ScanProgress) -> None:
        await self._ctx.report_progress(
            progress=snapshot.current, total=snapshot.total or None
        )


# ════════════════════════════════════════════════════════════════════
# Branches
# ════════════════════════════════════════════════════════════════════


@mcp.tool(
    tags={"github", "branches", "read"},
    annotations={"readOnlyHint": True, "idempotentHint": True, "openWorldHint": True},
)
async def github_find_dead_branches(
    ctx: Context,
    repository: Annotated[
        str,
        Field(
            description="GitHub repository URL or 'owner/repo' (e.g. 'https://github.com/octo/demo')",
            min_length=1,
        ),
    ],
    github_token: Annotated[
        str | None, Field(description="GitHub token tried before the server's tokens")
    ] = None,
    timeout_seconds: Annotated[
        float | None, Field(description="Base scan time budget in seconds", gt=0)
    ] = None,
    adaptive_timeout: Annotated[
        bool | None,
        Field(description="Extend the time budget once the branch count is known"),
    ] = None,
) -> str:
    """List branches fully merged into the default branch but not yet deleted."""
    config = _get_config(ctx)
    outcome = await analyze_repository(
        repository,
        timeout=timeout_seconds,
        token=github_token,
        on_progress=_ContextProgress(ctx),
        adaptive_timeout=adaptive_timeout,
        config=config,
    )
    return _result(outcome, repository, _token_used(config, github_token))
