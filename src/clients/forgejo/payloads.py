from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

from core.errors import ExternalServiceError
from core.models import Branch, Comment, Issue, Notification, PullRequest, PullRequestDetails


"""Map Forgejo/Gitea API JSON to the frozen entity models.

Missing keys fall back to empty values so partial responses from older
servers still map cleanly. A body of the wrong shape (empty, a bare
string, a list where an object is expected) is an upstream failure.
"""

_SUBJECT_NUMBER_RE = re.compile(r"/(?:issues|pulls)/(\d+)")


def expect_object(data: Any) -> Mapping[str, Any]:
    if data is None:
        raise ExternalServiceError("empty response body")
    if not isinstance(data, Mapping):
        raise ExternalServiceError(f"unexpected response body: expected an object, got {type(data).__name__}")
    return data


def expect_list(data: Any) -> List[Any]:
    # An empty body on a list endpoint means no items
    if data is None:
        return []
    if not isinstance(data, list):
        raise ExternalServiceError(f"unexpected response body: expected a list, got {type(data).__name__}")
    return data


def _login(obj: Optional[Mapping[str, Any]]) -> str:
    return str((obj or {}).get("login") or "")


def _branch(obj: Optional[Mapping[str, Any]]) -> Branch:
    obj = obj or {}
    return Branch(ref=str(obj.get("ref") or ""), sha=str(obj.get("sha") or ""))


def issue_from_api(data: Any) -> Issue:
    data = expect_object(data)
    return Issue(
        id=int(data.get("id") or 0),
        number=int(data.get("number") or 0),
        title=str(data.get("title") or ""),
        state=str(data.get("state") or ""),
        body=str(data.get("body") or ""),
        user=_login(data.get("user")),
        created=str(data.get("created_at") or ""),
        updated=str(data.get("updated_at") or ""),
    )


def comment_from_api(data: Any) -> Comment:
    data = expect_object(data)
    return Comment(
        id=int(data.get("id") or 0),
        body=str(data.get("body") or ""),
        user=_login(data.get("user")),
        created=str(data.get("created_at") or ""),
        updated=str(data.get("updated_at") or ""),
    )


def _pull_request_fields(data: Mapping[str, Any]) -> Dict[str, Any]:
    return dict(
        id=int(data.get("id") or 0),
        number=int(data.get("number") or 0),
        title=str(data.get("title") or ""),
        state=str(data.get("state") or ""),
        body=str(data.get("body") or ""),
        user=_login(data.get("user")),
        created=str(data.get("created_at") or ""),
        updated=str(data.get("updated_at") or ""),
        head=_branch(data.get("head")),
        base=_branch(data.get("base")),
    )


def pull_request_from_api(data: Any) -> PullRequest:
    return PullRequest(**_pull_request_fields(expect_object(data)))


def pull_request_details_from_api(data: Any) -> PullRequestDetails:
    data = expect_object(data)
    return PullRequestDetails(
        **_pull_request_fields(data),
        html_url=str(data.get("html_url") or ""),
        diff_url=str(data.get("diff_url") or ""),
        patch_url=str(data.get("patch_url") or ""),
        labels=tuple(str(label.get("name") or "") for label in data.get("labels") or []),
        assignee=_login(data.get("assignee")),
        assignees=tuple(_login(user) for user in data.get("assignees") or []),
        comments=int(data.get("comments") or 0),
        mergeable=bool(data.get("mergeable")),
        has_merged=bool(data.get("merged")),
        merged_at=str(data.get("merged_at") or ""),
        merged_by=_login(data.get("merged_by")),
    )


def subject_number(url: str) -> int:
    # .../repos/o/r/issues/12 or .../pulls/34; anything else has no number
    match = _SUBJECT_NUMBER_RE.search(url or "")
    return int(match.group(1)) if match else 0


def notification_from_api(data: Any) -> Notification:
    data = expect_object(data)
    subject = data.get("subject") or {}
    return Notification(
        id=int(data.get("id") or 0),
        repository=str((data.get("repository") or {}).get("full_name") or ""),
        type=str(subject.get("type") or "").lower(),
        number=subject_number(str(subject.get("url") or "")),
        title=str(subject.get("title") or ""),
        unread=bool(data.get("unread")),
        updated=str(data.get("updated_at") or ""),
    )


def compact(**fields: Any) -> Dict[str, Any]:
    # PATCH/POST bodies only carry the fields the caller set
    return {k: v for k, v in fields.items() if v is not None}
