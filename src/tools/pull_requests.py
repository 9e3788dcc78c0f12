"""MCP tools for pull requests.

Registers 'pr_list', 'pr_fetch', 'pr_create' and 'pr_edit'. When
'pr_create' gets no head branch it falls back to the branch checked out
in `directory`.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult

from core.errors import BranchDetectionError
from core.models import PullRequest, PullRequestDetails, ToolResult, to_dicts
from core.schema import (
    TITLE_LENGTH,
    Boolean,
    Integer,
    Paging,
    Target,
    Text,
    edit_body,
    edit_state,
    edit_title,
    list_state,
)
from targets.directory_source import DirectorySource
from tools.dispatch import Dispatcher, ToolCall, ToolName, ToolSpec, to_call_tool_result

DEFAULT_BASE = "main"
NO_HEAD = "head branch is required when no directory is provided"


def _branch(name: str, label: str) -> Text:
    return Text(name, min_len=1, max_len=255, length_message=f"{label} must be between 1 and 255 characters")


PR_LIST_SCHEMA = (Target(), Paging(), list_state())

PR_FETCH_SCHEMA = (Target(), Integer("pull_request_number"))

PR_CREATE_SCHEMA = (
    Target(),
    _branch("head", "head branch"),
    _branch("base", "base branch"),
    Text("title", required=True, min_len=1, max_len=255, length_message=TITLE_LENGTH, required_message="title is required"),
    edit_body(),
    Boolean("draft"),
    _branch("assignee", "assignee"),
)

PR_EDIT_SCHEMA = (
    Target(),
    Integer("pull_request_number"),
    edit_state(),
    edit_title(),
    edit_body(),
    _branch("base_branch", "base branch"),
)


def format_pr_list(pulls) -> str:
    if not pulls:
        return "No pull requests found"
    lines = [f"Found {len(pulls)} pull requests:\n"]
    lines.extend(f"- #{pr.number}: {pr.title} ({pr.state})\n" for pr in pulls)
    return "".join(lines)


def format_pr_details(pr: PullRequestDetails) -> str:
    lines = [
        f"Pull Request #{pr.number}: {pr.title}",
        f"State: {pr.state}",
        f"Author: {pr.user}",
        f"Created: {pr.created}",
        f"Updated: {pr.updated}",
    ]
    if pr.assignee:
        lines.append(f"Assignee: {pr.assignee}")
    if pr.assignees:
        lines.append(f"Assignees: {', '.join(pr.assignees)}")
    if pr.labels:
        lines.append(f"Labels: {', '.join(pr.labels)}")
    lines.append(f"Comments: {pr.comments}")
    lines.append(f"Mergeable: {'true' if pr.mergeable else 'false'}")
    if pr.has_merged:
        merged = f"Merged: {pr.merged_at}"
        if pr.merged_by:
            merged += f" by {pr.merged_by}"
        lines.append(merged)
    lines.append(f"URL: {pr.html_url}")
    return "\n".join(lines) + "\n"


def format_pr_created(
pr: PullRequest, *, draft: bool = False) -> str:
    text = (
        f"Pull request created successfully. Number: {pr.number}, Title: {pr.title}, "
        f"State: {pr.state}, Created: {pr.created}\n"
    )
    if pr.body:
        text += f"Body: {pr.body}\n"
    if draft:
        text += "Note: Created as draft pull request\n"
    return text


def format_pr_edited(pr: PullRequest) -> str:
    text = f"Pull request edited successfully. Number: {pr.number}, Title: {pr.title}, State: {pr.state}"
    if pr.updated:
        text += f", Updated: {pr.updated}"
    text += "\n"
    if pr.body:
        text += f"Body: {pr.body}\n"
    return text


async def handle_pr_list(call: ToolCall) -> ToolResult:
    pulls = await call.client.list_pull_requests(call.target, window=call.values["window"], state=call.values["state"])
    return ToolResult(text=format_pr_list(pulls), structured={"pull_requests": to_dicts(pulls)})


async def handle_pr_fetch(call: ToolCall) -> ToolResult:
    pr = await call.client.get_pull_request(call.target, call.values["pull_request_number"])
    return ToolResult(text=format_pr_details(pr), structured={"pull_request": pr.to_dict()})


async def handle_pr_create(
call: ToolCall) -> ToolResult:
    v = call.values
    head = v["head"]
    if head is None:
        directory = v["directory"]
        if directory is None:
            return ToolResult.error(f"Failed to detect current branch: {NO_HEAD}")
        try:
            head = await DirectorySource(directory=directory).current_branch()
        except BranchDetectionError as e:
            return ToolResult.error(
                f"Failed to detect current branch in '{directory}': {e}. "
                "Please ensure you're in a git repository and on a valid branch."
            )

    pr = await call.client.create_pull_request(
        call.target,
        head=head,
        base=v["base"] or DEFAULT_BASE,
        title=v["title"],
        body=v["body"],
        draft=v["draft"],
        assignee=v["assignee"],
    )
    return ToolResult(text=format_pr_created(pr, draft=v["draft"]), structured={"pull_request": pr.to_dict()})


def check_pr_edit(values: Dict[str, Any]) -> Optional[str]:
    if not any(values.get(k) for k in ("title", "body", "state", "base_branch")):
        return "At least one of title, body, state, or base_branch must be provided"
    return None


async def handle_pr_edit(call: ToolCall) -> ToolResult:
    v = call.values
    pr = await call.client.edit_pull_request(
        call.target,
        v["pull_request_number"],
        title=v["title"],
        body=v["body"],
        state=v["state"],
        base=v["base_branch"],
    )
    return ToolResult(text=format_pr_edited(pr), structured={"pull_request": pr.to_dict()})


SPECS = {
    ToolName.PR_LIST: ToolSpec(
        name=ToolName.PR_LIST,
        schema=PR_LIST_SCHEMA,
        handler=handle_pr_list,
        error_prefix="Failed to list pull requests: ",
    ),
    ToolName.PR_FETCH: ToolSpec(
        name=ToolName.PR_FETCH,
        schema=PR_FETCH_SCHEMA,
        handler=handle_pr_fetch,
        error_prefix="Failed to fetch pull request: ",
    ),
    ToolName.PR_CREATE: ToolSpec(
        name=ToolName.PR_CREATE,
        schema=PR_CREATE_SCHEMA,
        handler=handle_pr_create,
        error_prefix="Failed to create pull request: ",
    ),
    ToolName.PR_EDIT: ToolSpec(
        name=ToolName.PR_EDIT,
        schema=PR_EDIT_SCHEMA,
        handler=handle_pr_edit,
        error_prefix="Failed to edit pull request: ",
        precheck=check_pr_edit,
    ),
}


def register(mcp: FastMCP, *, dispatcher: Dispatcher) -> None:
    @mcp.tool(name="pr_list", structured_output=False)
    async def pr_list(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        state: Optional[str] = None,
    ) -> CallToolResult:
        """List pull requests from a Forgejo/Gitea repository with pagination and state filtering.

        Parameters:
          - directory / repository: the target repository (directory wins).
          - limit: page size, 1-100 (default 15); offset: pull requests to skip.
          - state: "open", "closed" or "all" (default "open").
        """
        raw = {"directory": directory, "repository": repository, "limit": limit, "offset": offset, "state": state}
        return to_call_tool_result(await dispatcher.dispatch(ToolName.PR_LIST, raw))

    @mcp.tool(name="pr_fetch", structured_output=False)
    async def pr_fetch(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        pull_request_number: Optional[int] = None,
    ) -> CallToolResult:
        """Fetch one pull request with its labels, assignees, merge state and URL."""
        raw = {"directory": directory, "repository": repository, "pull_request_number": pull_request_number}
        return to_call_tool_result(await dispatcher.dispatch(ToolName.PR_FETCH, raw))

    @mcp.tool(name="pr_create", structured_output=False)
    async def pr_create(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        head: Optional[str] = None,
        base: Optional[str] = None,
        title: Optional[str] = None,
        body: Optional[str] = None,
        draft: Optional[bool] = None,
        assignee: Optional[str] = None,
    ) -> CallToolResult:
        """Create a new pull request in a Forgejo/Gitea repository.

        Parameters:
          - directory / repository: the target repository (directory wins).
          - head: source branch; defaults to the branch checked out in `directory`.
          - base: target branch (default "main").
          - title: 1-255 characters (required); body: description (optional).
          - draft: open the pull request as a work in progress.
          - assignee: user to assign (optional).
        """
        raw = {
            "directory": directory,
            "repository": repository,
            "head": head,
            "base": base,
            "title": title,
            "body": body,
            "draft": draft,
            "assignee": assignee,
        }
        return to_call_tool_result(await dispatcher.dispatch(ToolName.PR_CREATE, raw))

    @mcp.tool(name="pr_edit", structured_output=False)
    async def pr_edit(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        pull_request_number: Optional[int] = None,
        title: Optional[str] = None,
        body: Optional[str] = None,
        state: Optional[str] = None,
        base_branch: Optional[str] = None,
    ) -> CallToolResult:
        """Edit an existing pull request in a Forgejo/Gitea repository.

        At least one of title, body, state ("open"/"closed") or base_branch
        must be set.
        """
        raw = {
            "directory": directory,
            "repository": repository,
            "pull_request_number": pull_request_number,
            "title": title,
            "body": body,
            "state": state,
            "base_branch": base_branch,
        }
        return to_call_tool_result(await dispatcher.dispatch(ToolName.PR_EDIT, raw))
