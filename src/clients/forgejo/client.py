"""Forgejo client module: issues, pull requests and comments over the REST API.

A small async client around `httpx.AsyncClient` for the `/api/v1` endpoints
the tools need. Each operation is a single request: nothing is cached and
nothing is retried. Failures surface as `ExternalServiceError` whose text
("<status> <reason>[: <message>]") is passed through to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

import httpx

from core.errors import ExternalServiceError
from core.models import (
    Comment,
    CommentList,
    Issue,
    NotificationList,
    PaginationWindow,
    PullRequest,
    PullRequestDetails,
    RepositoryTarget,
)

from .payloads import (
    comment_from_api,
    compact,
    expect_list,
    issue_from_api,
    notification_from_api,
    pull_request_details_from_api,
    pull_request_from_api,
)

logger = logging.getLogger(__name__)


class ForgejoClient:
    """Async Forgejo/Gitea API client.

    Purpose:
      - issues: list_issues, create_issue, edit_issue
      - issue comments: list_issue_comments, create_issue_comment, edit_issue_comment
      - pull requests: list_pull_requests, get_pull_request, create_pull_request,
        edit_pull_request
      - notifications: list_notifications

    Pull request comments live on the issue comment endpoints, so the
    comment methods serve both.
    """

    API_PREFIX = "/api/v1"
    JSON_ACCEPT = "application/json"
    DRAFT_PREFIX = "WIP: "
    NOTIFICATION_PAGE_SIZE = 50
    NOTIFICATION_STATUSES = {
        "read": ("read",),
        "unread": ("unread",),
        "all": ("read", "unread"),
    }

    def __init__(
        self,
        *,
        base_url: str,
        token: str,
        timeout: float = 20.0,
        verify: bool = True,
    ) -> None:
        self._base_url = (base_url or "").rstrip("/") + self.API_PREFIX
        self._timeout = float(timeout)
        self._verify = bool(verify)
        self._headers = self._build_headers(token)

    # --- issues ---

    async def list_issues(
        self,
        target: RepositoryTarget,
        *,
        window: PaginationWindow,
        state: str = "open",
    ) -> List[Issue]:
        data = await self._request(
            "GET",
            f"/repos/{target.owner}/{target.repo}/issues",
            params={"state": state, "type": "issues", "page": window.page, "limit": window.limit},
        )
        return [issue_from_api(item) for item in expect_list(data)]

    async def create_issue(self, target: RepositoryTarget, *, title: str, body: Optional[str] = None) -> Issue:
        data = await self._request(
            "POST",
            f"/repos/{target.owner}/{target.repo}/issues",
            json={"title": title, "body": body or ""},
        )
        return issue_from_api(data)

    async def edit_issue(
        self,
        target: RepositoryTarget,
        number: int,
        *,
        title: Optional[str] = None,
        body: Optional[str] = None,
        state: Optional[str] = None,
    ) -> Issue:
        data = await self._request(
            "PATCH",
            f"/repos/{target.owner}/{target.repo}/issues/{number}",
            json=compact(title=title, body=body, state=state),
        )
        return issue_from_api(data)

    # --- comments ---

    async def list_issue_comments(
        self,
        target: RepositoryTarget,
        number: int,
        *,
        window: PaginationWindow,
    ) -> CommentList:
        data = await self._request(
            "GET",
            f"/repos/{target.owner}/{target.repo}/issues/{number}/comments",
            params={"page": window.page, "limit": window.limit},
        )
        comments = tuple(comment_from_api(item) for item in expect_list(data))
        # The endpoint has no total count; report what came back.
        return CommentList(comments=comments, total=len(comments), limit=window.limit, offset=window.offset)

    async def create_issue_comment(self, target: RepositoryTarget, number: int, *, body: str) -> Comment:
        data = await self._request(
            "POST",
            f"/repos/{target.owner}/{target.repo}/issues/{number}/comments",
            json={"body": body},
        )
        return comment_from_api(data)

    async def edit_issue_comment(self, target: RepositoryTarget, comment_id: int, *, body: str) -> Comment:
        data = await self._request(
            "PATCH",
            f"/repos/{target.owner}/{target.repo}/issues/comments/{comment_id}",
            json={"body": body},
        )
        return comment_from_api(data)

    # --- pull requests ---

    async def list_pull_requests(
        self,
        target: RepositoryTarget,
        *,
        window: PaginationWindow,
        state: str = "open",
    ) -> List[PullRequest]:
        data = await self._request(
            "GET",
            f"/repos/{target.owner}/{target.repo}/pulls",
            params={"state": state, "page": window.page, "limit": window.limit},
        )
        return [pull_request_from_api(item) for item in expect_list(data)]

    async def get_pull_request(self, target: RepositoryTarget, number: int) -> PullRequestDetails:
        data = await self._request("GET", f"/repos/{target.owner}/{target.repo}/pulls/{number}")
        return pull_request_details_from_api(data)

    async def create_pull_request(
        self,
        target: RepositoryTarget,
        *,
        head: str,
        base: str,
        title: str,
        body: Optional[str] = None,
        draft: bool = False,
        assignee: Optional[str] = None,
    ) -> PullRequest:
        if draft and not title.startswith(self.DRAFT_PREFIX):
            title = self.DRAFT_PREFIX + title

        payload = compact(head=head, base=base, title=title, body=body, assignee=assignee)
        data = await self._request("POST", f"/repos/{target.owner}/{target.repo}/pulls", json=payload)
        return pull_request_from_api(data)

    async def edit_pull_request(
        self,
        target: RepositoryTarget,
        number: int,
        *,
        title: Optional[str] = None,
        body: Optional[str] = None,
        state: Optional[str] = None,
        base: Optional[str] = None,
    ) -> PullRequest:
        data = await self._request(
            "PATCH",
            f"/repos/{target.owner}/{target.repo}/pulls/{number}",
            json=compact(title=title, body=body, state=state, base=base),
        )
        return pull_request_from_api(data)

    # --- notifications ---

    async def list_notifications(
        self,
        target: Optional[RepositoryTarget],
        *,
        window: PaginationWindow,
        status: str = "unread",
    ) -> NotificationList:
        """List the token owner's notifications, optionally for one repository.

        The notifications endpoint cannot filter by repository, so every
        page is fetched, filtered by full name, then sliced by the window.
        `total` counts the notifications left after filtering.
        """
        params: dict[str, Any] = {"status-types": list(self.NOTIFICATION_STATUSES[status])}
        notifications = []
        page = 1
        while True:
            data = await self._request(
                "GET",
                "/notifications",
                params={**params, "page": page, "limit": self.NOTIFICATION_PAGE_SIZE},
            )
            items = expect_list(data)
            notifications.extend(notification_from_api(item) for item in items)
            if len(items) < self.NOTIFICATION_PAGE_SIZE:
                break
            page += 1

        if target is not None:
            notifications = [n for n in notifications if n.repository == target.full_name]

        shown = notifications[window.offset : window.offset + window.limit]
        return NotificationList(
            notifications=tuple(shown),
            total=len(notifications),
            limit=window.limit,
            offset=window.offset,
        )

    # --- HTTP helpers ---

    def _build_headers(self, token: str) -> dict[str, str]:
        headers = {
            "Accept": self.JSON_ACCEPT,
            "User-Agent": "forgejo-mcp",
        }
        token = (token or "").strip()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _create_client(self, custom_headers: Optional[Mapping[str, str]] = None) -> httpx.AsyncClient:
        headers = {**self._headers, **dict(custom_headers or {})}
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=self._timeout,
            verify=self._verify,
        )

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.is_success:
            return

        text = f"{resp.status_code} {resp.reason_phrase}"
        try:
            message = resp.json().get("message")
        except (ValueError, AttributeError):
            message = None
        if message:
            text = f"{text}: {message}"
        raise ExternalServiceError(text)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        logger.debug("%s %s%s", method, self._base_url, url)
        async with self._create_client() as client:
            try:
                resp = await client.request(method, url, params=dict(params or {}), json=json)
            except httpx.HTTPError as e:
                raise ExternalServiceError(str(e) or type(e).__name__) from e

            self._raise_for_status(resp)
            if not resp.content:
                return None
            try:
                return resp.json()
            except ValueError as e:
                raise ExternalServiceError(f"invalid JSON response: {e}") from e
