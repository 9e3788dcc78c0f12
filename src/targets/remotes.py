from __future__ import annotations

import re
from typing import List, Optional, Tuple

from core.errors import InvalidRemoteURLError, NoRemotesConfiguredError
from core.models import RemoteDescriptor


"""Remote URL and git config parsing.

Accepts the HTTPS, SSH (scp-like) and git:// remote forms and extracts the
final two path segments as owner/repo, dropping an optional ".git".
"""


_REMOTE_URL_RES = (
    re.compile(r"^https?://[^/]+/(?:.+/)?([^/]+)/([^/]+?)(?:\.git)?/?$"),
    re.compile(r"^ssh://(?:[^@/]+@)?[^/]+/(?:.+/)?([^/]+)/([^/]+?)(?:\.git)?/?$"),
    re.compile(r"^[^@\s/]+@[^:/\s]+:(?:.+/)?([^/]+)/([^/]+?)(?:\.git)?/?$"),
    re.compile(r"^git://[^/]+/(?:.+/)?([^/]+)/([^/]+?)(?:\.git)?/?$"),
)

_SECTION_RE = re.compile(r'^\[\s*remote\s+"([^"]+)"\s*\]$')
_URL_LINE_RE = re.compile(r"^url\s*=\s*(.+)$")


def parse_remote_url(url: str) -> Tuple[str, str]:
    raw = (url or "").strip()
    for pattern in _REMOTE_URL_RES:
        m = pattern.match(raw)
        if m and m.group(1) and m.group(2):
            return m.group(1), m.group(2)
    raise InvalidRemoteURLError(raw)


def parse_git_config_remotes(text: str) -> List[Tuple[str, str]]:
    """Return (name, url) pairs for every remote section, in file order.

    Only the first `url` of a section counts; sections without one are skipped.
    """
    remotes: List[Tuple[str, str]] = []
    current: Optional[str] = None
    seen_url = False

    for line in text.splitlines():
        s = line.strip()
        if not s or s.startswith(("#", ";")):
            continue

        if s.startswith("["):
            m = _SECTION_RE.match(s)
            current = m.group(1) if m else None
            seen_url = False
            continue

        if current is None or seen_url:
            continue

        m = _URL_LINE_RE.match(s)
        if m:
            remotes.append((current, m.group(1).strip().strip('"')))
            seen_url = True

    return remotes


def select_remote(path: str, remotes: List[Tuple[str, str]]) -> RemoteDescriptor:
    # "origin" wins; otherwise the first remote declared
    if not remotes:
        raise NoRemotesConfiguredError(path)

    name, url = next(((n, u) for n, u in remotes if n == "origin"), remotes[0])
    owner, repo = parse_remote_url(url)
    return RemoteDescriptor(name=name, url=url, owner=owner, repo=repo)
