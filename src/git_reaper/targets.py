"""Repository target parsing."""

from __future__ import annotations

import re

from .exceptions import InvalidRepositoryError
from .models.repositories import RepositoryRef

# Matches:  [http(s)://][www.]github.com/<owner>/<repo>[.git][/anything]
_URL_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/([A-Za-z0-9_-]+)/([A-Za-z0-9_.-]+?)(?:\.git)?(?:/.*)?$"
)
# Matches:  <owner>/<repo>
_SHORTHAND_RE = re.compile(r"^([A-Za-z0-9_-]+)/([A-Za-z0-9_.-]+?)(?:\.git)?$")


def parse_repository_target(value: str) -> RepositoryRef:
    """Extract owner and repository name from a GitHub URL or ``owner/repo``.

    Raises InvalidRepositoryError when *value* matches neither form.
    """
    if not isinstance(value, str):
        raise InvalidRepositoryError(repr(value))
    trimmed = value.strip()
    m = _URL_RE.match(trimmed) or _SHORTHAND_RE.match(trimmed)
    if not m or m.group(2) in (".", ".."):
        raise InvalidRepositoryError(value)
    return RepositoryRef(owner=m.group(1), name=m.group(2))
