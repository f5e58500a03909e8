"""Scan-scoped GitHub credential rotation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

logger = logging.getLogger(__name__)


class CredentialRotator:
    """Ordered access tokens with a forward-only cursor.

    An empty rotator is valid: ``current()`` returns ``None`` and requests go
    out unauthenticated. The cursor never wraps; once it sits on the last
    token, further rotation requests are refused.
    """

    def __init__(self, tokens: Iterable[str] = ()) -> None:
        self._tokens = tuple(t for t in tokens if t)
        self._cursor = 0
        self._rotations = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._tokens)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def rotations(self) -> int:
        return self._rotations

    def current(self) -> str | None:
        with self._lock:
            return self._tokens[self._cursor] if self._tokens else None

    def snapshot(self) -> tuple[int, str | None]:
        """Return the cursor together with the token it points at."""
        with self._lock:
            token = self._tokens[self._cursor] if self._tokens else None
            return self._cursor, token

    def rotate(self) -> bool:
        """Advance to the next token. Returns whether a rotation happened."""
        with self._lock:
            return self._advance()

    def advance_past(self, index: int) -> bool:
        """Make sure the cursor has moved beyond *index*.

        Concurrent callers that all saw token *index* exhausted trigger a single
        rotation; the rest find the cursor already moved. Returns whether a
        token beyond *index* is now current.
        """
        with self._lock:
            if self._cursor > index:
                return True
            return self._advance()

    def _advance(self) -> bool:
        if self._cursor + 1 >= len(self._tokens):
            return False
        self._cursor += 1
        self._rotations += 1
        logger.info(f"GitHub rate limit hit. Switching to token #{self._cursor + 1}")
        return True
