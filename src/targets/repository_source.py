from __future__ import annotations

import re
from typing import Optional

from core.models import RepositoryTarget


_REPOSITORY_RE = re.compile(r"^[^/]+/[^/]+$")


def parse_repository(repository: str) -> Optional[RepositoryTarget]:
    """Parse "owner/repo"; return None when the shape does not match."""
    m = _REPOSITORY_RE.match(repository or "")
    if not m:
        return None
    owner, repo = repository.split("/", 1)
    return RepositoryTarget(owner=owner, repo=repo)
