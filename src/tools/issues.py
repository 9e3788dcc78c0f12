"""MCP tools for listing, creating and editing issues.

Registers 'issue_list', 'issue_create' and 'issue_edit'. Argument checks
live in the schemas below; the handlers only talk to the Forgejo client
and shape its answer into a ToolResult.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult

from core.models import Issue, ToolResult, to_dicts
from core.schema import (
    TITLE_LENGTH,
    Integer,
    Paging,
    Target,
    Text,
    edit_body,
    edit_state,
    edit_title,
    list_state,
)
from tools.dispatch import Dispatcher, ToolCall, ToolName, ToolSpec, to_call_tool_result

ISSUE_LIST_SCHEMA = (Target(), Paging(), list_state())

ISSUE_CREATE_SCHEMA = (
    Target(),
    Text("title", required=True, min_len=1, max_len=255, length_message=TITLE_LENGTH),
    Text("body", max_len=65535, length_message="body must be less than 65535 characters"),
)

ISSUE_EDIT_SCHEMA = (
    Target(),
    Integer("issue_number"),
    edit_title(),
    edit_body(),
    edit_state(),
)


def format_issue_edit(issue: Issue) -> str:
    text = f"Issue edited successfully. Number: {issue.number}, Title: {issue.title}, State: {issue.state}"
    if issue.updated:
        text += f", Updated: {issue.updated}"
    text += "\n"
    if issue.body:
        text += f"Body: {issue.body}\n"
    return text


async def handle_issue_list(call: ToolCall) -> ToolResult:
    window = call.values["window"]
    issues = await call.client.list_issues(call.target, window=window, state=call.values["state"])

    text = f"Found {len(issues)} issues"
    if call.compat_mode and issues:
        text += ":\n" + "".join(f"- #{i.number}: {i.title} ({i.state})\n" for i in issues)
    return ToolResult(text=text, structured={"issues": to_dicts(issues)})


async def handle_issue_create(call: ToolCall) -> ToolResult:
    issue = await call.client.create_issue(call.target, title=call.values["title"], body=call.values["body"])
    return ToolResult(
        text=f"Issue created successfully. Number: {issue.number}, Title: {issue.title}",
        structured={"issue": issue.to_dict()},
    )


def check_issue_edit(values: Dict[str, Any]) -> Optional[str]:
    if not any(values.get(k) for k in ("title", "body", "state")):
        return "At least one of title, body, or state must be provided"
    return None


async def handle_issue_edit(call: ToolCall) -> ToolResult:
    v = call.values
    issue = await call.client.edit_issue(
        call.target,
        v["issue_number"],
        title=v["title"],
        body=v["body"],
        state=v["state"],
    )
    return ToolResult(text=format_issue_edit(issue), structured={"issue": issue.to_dict()})


SPECS = {
    ToolName.ISSUE_LIST: ToolSpec(
        name=ToolName.ISSUE_LIST,
        schema=ISSUE_LIST_SCHEMA,
        handler=handle_issue_list,
        error_prefix="Failed to list issues: ",
    ),
    ToolName.ISSUE_CREATE: ToolSpec(
        name=ToolName.ISSUE_CREATE,
        schema=ISSUE_CREATE_SCHEMA,
        handler=handle_issue_create,
        error_prefix="Failed to create issue: ",
    ),
    ToolName.ISSUE_EDIT: ToolSpec(
        name=ToolName.ISSUE_EDIT,
        schema=ISSUE_EDIT_SCHEMA,
        handler=handle_issue_edit,
        error_prefix="Failed to edit issue: ",
        precheck=check_issue_edit,
    ),
}


def register(mcp: FastMCP, *, dispatcher: Dispatcher) -> None:
    @mcp.tool(name="issue_list", structured_output=False)
    async def issue_list(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        state: Optional[str] = None,
    ) -> CallToolResult:
        """List issues from a Gitea/Forgejo repository.

        Parameters:
          - directory: absolute path to a local git checkout; its remote decides
            the repository and it takes precedence over `repository`.
          - repository: "owner/repo", used when no directory is given.
          - limit: page size, 1-100 (default 15).
          - offset: number of issues to skip (default 0).
          - state: "open", "closed" or "all" (default "open").
        """
        raw = {"directory": directory, "repository": repository, "limit": limit, "offset": offset, "state": state}
        return to_call_tool_result(await dispatcher.dispatch(ToolName.ISSUE_LIST, raw))

    @mcp.tool(name="issue_create", structured_output=False)
    async def issue_create(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        title: Optional[str] = None,
        body: Optional[str] = None,
    ) -> CallToolResult:
        """Create a new issue on a Forgejo/Gitea repository.

        Parameters:
          - directory / repository: the target repository (directory wins).
          - title: 1-255 characters (required).
          - body: issue description (optional).
        """
        raw = {"directory": directory, "repository": repository, "title": title, "body": body}
        return to_call_tool_result(await dispatcher.dispatch(ToolName.ISSUE_CREATE, raw))

    @mcp.tool(name="issue_edit", structured_output=False)
    async def issue_edit(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        issue_number: Optional[int] = None,
        title: Optional[str] = None,
        body: Optional[str] = None,
        state: Optional[str] = None,
    ) -> CallToolResult:
        """Edit an existing issue in a Forgejo/Gitea repository.

        At least one of title, body or state ("open"/"closed") must be set.
        """
        raw = {
            "directory": directory,
            "repository": repository,
            "issue_number": issue_number,
            "title": title,
            "body": body,
            "state": state,
        }
        return to_call_tool_result(await dispatcher.dispatch(ToolName.ISSUE_EDIT, raw))
