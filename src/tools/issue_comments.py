"""MCP tools for issue comments.

Registers 'issue_comment_create', 'issue_comment_list' and
'issue_comment_edit'. The text formatters here are shared with the pull
request comment tools, which differ only in wording and payload keys.
"""

from __future__ import annotations

from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult

from core.models import Comment, CommentList, PaginationWindow, ToolResult
from core.schema import Integer, Paging, Target, content
from tools.dispatch import Dispatcher, ToolCall, ToolName, ToolSpec, to_call_tool_result

COMMENT_CREATE_SCHEMA = (Target(), Integer("issue_number"), content("comment"))
COMMENT_LIST_SCHEMA = (Target(), Integer("issue_number"), Paging())
COMMENT_EDIT_SCHEMA = (Target(), Integer("issue_number"), Integer("comment_id"), content("new_content"))


def format_comment_created(comment: Comment, *, kind: str = "Comment") -> str:
    return f"{kind} created successfully. ID: {comment.id}, Created: {comment.created}\nComment body: {comment.body}"


def format_comment_edited(comment: Comment, *, kind: str = "Comment") -> str:
    return f"{kind} edited successfully. ID: {comment.id}, Updated: {comment.updated}\nComment body: {comment.body}"


def format_comment_list(comments: CommentList) -> str:
    """Detailed listing: header with the shown range, then one line per comment."""
    if not comments.comments:
        return "Found 0 comments"

    # The API pages by limit, so the rows shown start at the page boundary
    start = PaginationWindow(limit=comments.limit, offset=comments.offset).start
    first = start + 1
    last = start + len(comments.comments)
    lines = [f"Found {comments.total} comments (showing {first}-{last}):\n"]
    for i, c in enumerate(comments.comments, start=1):
        lines.append(f"Comment {i} (ID: {c.id}): {c.body}\n")
    return "".join(lines)


async def handle_comment_create(call: ToolCall) -> ToolResult:
    comment = await call.client.create_issue_comment(
        call.target,
        call.values["issue_number"],
        body=call.values["comment"],
    )
    return ToolResult(text=format_comment_created(comment), structured={"comment": comment.to_dict()})


async def handle_comment_list(call: ToolCall) -> ToolResult:
    comments = await call.client.list_issue_comments(
        call.target,
        call.values["issue_number"],
        window=call.values["window"],
    )
    if call.compat_mode:
        text = format_comment_list(comments)
    else:
        text = f"Found {comments.total} comments"
    return ToolResult(text=text, structured=comments.to_dict())


async def handle_comment_edit(call: ToolCall) -> ToolResult:
    comment = await call.client.edit_issue_comment(
        call.target,
        call.values["comment_id"],
        body=call.values["new_content"],
    )
    return ToolResult(text=format_comment_edited(comment), structured={"comment": comment.to_dict()})


SPECS = {
    ToolName.ISSUE_COMMENT_CREATE: ToolSpec(
        name=ToolName.ISSUE_COMMENT_CREATE,
        schema=COMMENT_CREATE_SCHEMA,
        handler=handle_comment_create,
        error_prefix="Failed to create comment: ",
    ),
    ToolName.ISSUE_COMMENT_LIST: ToolSpec(
        name=ToolName.ISSUE_COMMENT_LIST,
        schema=COMMENT_LIST_SCHEMA,
        handler=handle_comment_list,
        error_prefix="Failed to list issue comments: ",
    ),
    ToolName.ISSUE_COMMENT_EDIT: ToolSpec(
        name=ToolName.ISSUE_COMMENT_EDIT,
        schema=COMMENT_EDIT_SCHEMA,
        handler=handle_comment_edit,
        error_prefix="Failed to edit comment: ",
    ),
}


def register(mcp: FastMCP, *, dispatcher: Dispatcher) -> None:
    @mcp.tool(name="issue_comment_create", structured_output=False)
    async def issue_comment_create(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        issue_number: Optional[int] = None,
        comment: Optional[str] = None,
    ) -> CallToolResult:
        """Create a comment on a Forgejo/Gitea repository issue.

        Parameters:
          - directory / repository: the target repository (directory wins).
          - issue_number: the issue to comment on (>= 1).
          - comment: comment text; must not be blank.
        """
        raw = {"directory": directory, "repository": repository, "issue_number": issue_number, "comment": comment}
        return to_call_tool_result(await dispatcher.dispatch(ToolName.ISSUE_COMMENT_CREATE, raw))

    @mcp.tool(name="issue_comment_list", structured_output=False)
    async def issue_comment_list(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        issue_number: Optional[int] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> CallToolResult:
        """List comments from a Forgejo/Gitea repository issue with pagination support."""
        raw = {
            "directory": directory,
            "repository": repository,
            "issue_number": issue_number,
            "limit": limit,
            "offset": offset,
        }
        return to_call_tool_result(await dispatcher.dispatch(ToolName.ISSUE_COMMENT_LIST, raw))

    @mcp.tool(name="issue_comment_edit", structured_output=False)
    async def issue_comment_edit(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        issue_number: Optional[int] = None,
        comment_id: Optional[int] = None,
        new_content: Optional[str] = None,
    ) -> CallToolResult:
        """Edit an existing comment on a Forgejo/Gitea repository issue."""
        raw = {
            "directory": directory,
            "repository": repository,
            "issue_number": issue_number,
            "comment_id": comment_id,
            "new_content": new_content,
        }
        return to_call_tool_result(await dispatcher.dispatch(ToolName.ISSUE_COMMENT_EDIT, raw))
