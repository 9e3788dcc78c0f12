from __future__ import annotations

from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult

from core.models import ToolResult
from core.schema import Integer, Paging, Target, content
from tools.dispatch import Dispatcher, ToolCall, ToolName, ToolSpec, to_call_tool_result
from tools.issue_comments import format_comment_created, format_comment_edited, format_comment_list

PR_KIND = "Pull request comment"

PR_COMMENT_LIST_SCHEMA = (Target(), Integer("pull_request_number"), Paging())
PR_COMMENT_CREATE_SCHEMA = (Target(), Integer("pull_request_number"), content("comment"))
PR_COMMENT_EDIT_SCHEMA = (
    Target(),
    Integer("pull_request_number"),
    Integer("comment_id"),
    content("new_content"),
)


async def handle_pr_comment_list(call: ToolCall) -> ToolResult:
    comments = await call.client.list_issue_comments(
        call.target,
        call.values["pull_request_number"],
        window=call.values["window"],
    )
    return ToolResult(
        text=format_comment_list(comments),
        structured={"pull_request_comments": [c.to_dict() for c in comments.comments]},
    )


async def handle_pr_comment_create(call: ToolCall) -> ToolResult:
    comment = await call.client.create_issue_comment(
        call.target,
        call.values["pull_request_number"],
        body=call.values["comment"],
    )
    return ToolResult(
        text=format_comment_created(comment, kind=PR_KIND),
        structured={"comment": comment.to_dict()},
    )


async def handle_pr_comment_edit(call: ToolCall) -> ToolResult:
    comment = await call.client.edit_issue_comment(
        call.target,
        call.values["comment_id"],
        body=call.values["new_content"],
    )
    return ToolResult(
        text=format_comment_edited(comment, kind=PR_KIND),
        structured={"comment": comment.to_dict()},
    )


SPECS = {
    ToolName.PR_COMMENT_LIST: ToolSpec(
        name=ToolName.PR_COMMENT_LIST,
        schema=PR_COMMENT_LIST_SCHEMA,
        handler=handle_pr_comment_list,
        error_prefix="Failed to list pull request comments: ",
    ),
    ToolName.PR_COMMENT_CREATE: ToolSpec(
        name=ToolName.PR_COMMENT_CREATE,
        schema=PR_COMMENT_CREATE_SCHEMA,
        handler=handle_pr_comment_create,
        error_prefix="Failed to create pull request comment: ",
    ),
    ToolName.PR_COMMENT_EDIT: ToolSpec(
        name=ToolName.PR_COMMENT_EDIT,
        schema=PR_COMMENT_EDIT_SCHEMA,
        handler=handle_pr_comment_edit,
        error_prefix="Failed to edit pull request comment: ",
    ),
}


def register(mcp: FastMCP, *, dispatcher: Dispatcher) -> None:
    @mcp.tool(name="pr_comment_list", structured_output=False)
    async def pr_comment_list(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        pull_request_number: Optional[int] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> CallToolResult:
        """List comments from a Forgejo/Gitea repository pull request with pagination support.

        Parameters:
          - directory / repository: the target repository (directory wins).
          - pull_request_number: the pull request (>= 1).
          - limit: page size, 1-100 (default 15); offset: comments to skip.
        """
        raw = {
            "directory": directory,
            "repository": repository,
            "pull_request_number": pull_request_number,
            "limit": limit,
            "offset": offset,
        }
        return to_call_tool_result(await dispatcher.dispatch(ToolName.PR_COMMENT_LIST, raw))

    @mcp.tool(name="pr_comment_create", structured_output=False)
    async def pr_comment_create(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        pull_request_number: Optional[int] = None,
        comment: Optional[str] = None,
    ) -> CallToolResult:
        """Create a comment on a Forgejo/Gitea repository pull request."""
        raw = {
            "directory": directory,
            "repository": repository,
            "pull_request_number": pull_request_number,
            "comment": comment,
        }
        return to_call_tool_result(await dispatcher.dispatch(ToolName.PR_COMMENT_CREATE, raw))

    @mcp.tool(name="pr_comment_edit", structured_output=False)
    async def pr_comment_edit(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        pull_request_number: Optional[int] = None,
        comment_id: Optional[int] = None,
        new_content: Optional[str] = None,
    ) -> CallToolResult:
        """Edit an existing comment on a Forgejo/Gitea repository pull request."""
        raw = {
            "directory": directory,
            "repository": repository,
            "pull_request_number": pull_request_number,
            "comment_id": comment_id,
            "new_content": new_content,
        }
        return to_call_tool_result(await dispatcher.dispatch(ToolName.PR_COMMENT_EDIT, raw))
