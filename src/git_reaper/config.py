"""Git Reaper configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GITHUB_TOKEN_1", "GITHUB_TOKEN_2")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in ("true", "1", "yes")


@dataclass
class ReaperConfig:
    """Configuration for branch scans, loaded from environment variables."""

    api_url: str = "https://api.github.com"
    tokens: list[str] = field(default_factory=list)
    timeout: float = 30
    scan_timeout: float = 180
    adaptive_timeout: bool = True
    adaptive_base: float = 180
    per_branch_timeout: float = 1.0
    batch_size: int = 10
    ssl_verify: bool = True

    @classmethod
    def from_env(cls) -> ReaperConfig:
        api_url = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")
        tokens = [os.environ[name] for name in TOKEN_ENV_VARS if os.getenv(name)]

        return cls(
            api_url=api_url,
            tokens=tokens,
            timeout=float(os.getenv("REAPER_REQUEST_TIMEOUT", "30")),
            scan_timeout=float(os.getenv("REAPER_SCAN_TIMEOUT", "180")),
            adaptive_timeout=_env_bool("REAPER_ADAPTIVE_TIMEOUT", True),
            adaptive_base=float(os.getenv("REAPER_ADAPTIVE_BASE", "180")),
            per_branch_timeout=float(os.getenv("REAPER_PER_BRANCH_TIMEOUT", "1")),
            batch_size=int(os.getenv("REAPER_BATCH_SIZE", "10")),
            ssl_verify=_env_bool("GITHUB_SSL_VERIFY", True),
        )

    def credentials_for(self, token: str | None = None) -> tuple[str, ...]:
        """Ordered credentials for one scan: caller token first, then configured ones."""
        ordered: list[str] = []
        for candidate in (token, *self.tokens):
            if candidate and candidate not in ordered:
                ordered.append(candidate)
        return tuple(ordered)

    def validate(self) -> None:
        if not self.api_url:
            msg = "GITHUB_API_URL must not be empty"
            raise ValueError(msg)
        if self.batch_size < 1:
            msg = "REAPER_BATCH_SIZE must be at least 1"
            raise ValueError(msg)
        if self.scan_timeout <= 0 or self.timeout <= 0:
            msg = "REAPER_SCAN_TIMEOUT and REAPER_REQUEST_TIMEOUT must be positive"
            raise ValueError(msg)
        if self.adaptive_base < 0 or self.per_branch_timeout < 0:
            msg = "REAPER_ADAPTIVE_BASE and REAPER_PER_BRANCH_TIMEOUT must not be negative"
            raise ValueError(msg)
