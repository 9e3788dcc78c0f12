"""MCP tool for the token owner's notifications.

Registers 'notification_list'. The target is optional here: with a
directory or repository the list is narrowed to that repository,
without either every notification is listed.
"""

from __future__ import annotations

from typing import Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult

from core.models import ToolResult
from core.schema import Choice, Paging, Target
from tools.dispatch import Dispatcher, ToolCall, ToolName, ToolSpec, to_call_tool_result

NOTIFICATION_STATUS = "status must be 'read', 'unread', or 'all'"

NOTIFICATION_LIST_SCHEMA = (
    Target(required=False),
    Choice("status", ("read", "unread", "all"), NOTIFICATION_STATUS, default="unread"),
    Paging(),
)


async def handle_notification_list(call: ToolCall) -> ToolResult:
    status = call.values["status"]
    notifications = await call.client.list_notifications(
        call.target,
        window=call.values["window"],
        status=status,
    )
    text = f"Found {len(notifications.notifications)} {status} notifications"
    return ToolResult(text=text, structured=notifications.to_dict())


SPECS = {
    ToolName.NOTIFICATION_LIST: ToolSpec(
        name=ToolName.NOTIFICATION_LIST,
        schema=NOTIFICATION_LIST_SCHEMA,
        handler=handle_notification_list,
        error_prefix="Failed to list notifications: ",
    ),
}


def register(mcp: FastMCP, *, dispatcher: Dispatcher) -> None:
    @mcp.tool(name="notification_list", structured_output=False)
    async def notification_list(
        directory: Optional[str] = None,
        repository: Optional[str] = None,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> CallToolResult:
        """List notifications for the authenticated user.

        Parameters:
          - directory / repository: optional; narrows the list to one repository.
          - status: "read", "unread" or "all" (default "unread").
          - limit: page size, 1-100 (default 15); offset: notifications to skip.
        """
        raw = {
            "directory": directory,
            "repository": repository,
            "status": status,
            "limit": limit,
            "offset": offset,
        }
        return to_call_tool_result(await dispatcher.dispatch(ToolName.NOTIFICATION_LIST, raw))
