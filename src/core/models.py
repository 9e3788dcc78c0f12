"""Immutable dataclasses shared by the resolution layer, client and tools.

Request-side models (RepositoryTarget, PaginationWindow, FieldError,
ToolResult) are built once per call and never mutated. Entity models
(Issue, Comment, PullRequest, Notification) mirror what the Forgejo API returns and
expose `to_dict()` for the structured part of a tool result.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple


ListState = Literal["open", "closed", "all"]
EditState = Literal["open", "closed"]


@dataclass(frozen=True)
class RepositoryTarget:
    """The owner/repo pair an operation acts on."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class RemoteDescriptor:
    # Transient: parsed from .git/config while resolving a directory
    name: str
    url: str
    owner: str
    repo: str


@dataclass(frozen=True)
class PaginationWindow:
    limit: int = 15
    offset: int = 0

    @property
    def page(self) -> int:
        # Gitea pages are 1-based and sized by limit
        return self.offset // self.limit + 1

    @property
    def start(self) -> int:
        # First index on `page`, which sits below offset when offset is not a multiple of limit
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a single tool call.

    Field groups:
    - text: human-readable summary or error text
    - structured: payload mirroring the entity (None on error)
    - is_error: True for validation, resolution and upstream failures
    """

    text: str
    structured: Optional[Dict[str, Any]] = None
    is_error: bool = False

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        return cls(text=text, structured=None, is_error=True)


@dataclass(frozen=True)
class Issue:
    id: int
    number: int
    title: str
    state: str
    body: str = ""
    user: str = ""
    created: str = ""
    updated: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Comment:
    id: int
    body: str
    user: str = ""
    created: str = ""
    updated: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CommentList:
    comments: Tuple[Comment, ...]
    total: int
    limit: int
    offset: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "comments": [c.to_dict() for c in self.comments],
            "total": self.total,
            "limit": self.limit,
            "offset": self.offset,
        }


@dataclass(frozen=True)
class Branch:
    ref: str = ""
    sha: str = ""


@dataclass(frozen=True)
class PullRequest:
    id: int
    number: int
    title: str
    state: str
    body: str = ""
    user: str = ""
    created: str = ""
    updated: str = ""
    head: Branch = field(default_factory=Branch)
    base: Branch = field(default_factory=Branch)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PullRequestDetails(PullRequest):
    """A single pull request as fetched on its own.

    Field groups:
    - links: html_url, diff_url, patch_url
    - people: assignee, assignees, merged_by (logins)
    - review state: labels, comments, mergeable, has_merged, merged_at
    """

    html_url: str = ""
    diff_url: str = ""
    patch_url: str = ""
    labels: Tuple[str, ...] = ()
    assignee: str = ""
    assignees: Tuple[str, ...] = ()
    comments: int = 0
    mergeable: bool = False
    has_merged: bool = False
    merged_at: str = ""
    merged_by: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["labels"] = list(self.labels)
        data["assignees"] = list(self.assignees)
        return data


@dataclass(frozen=True)
class Notification:
    id: int
    repository: str = ""
    type: str = ""
    number: int = 0
    title: str = ""
    unread: bool = False
    updated: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class NotificationList:
    notifications: Tuple[Notification, ...]
    total: int
    limit: int
    offset: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "notifications": [n.to_dict() for n in self.notifications],
            "total": self.total,
            "limit": self.limit,
            "offset": self.offset,
        }


def to_dicts(items: List[Any]) -> List[Dict[str, Any]]:
    return [item.to_dict() for item in items]
