from __future__ import annotations

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult

from core.models import ToolResult
from tools.dispatch import Dispatcher, ToolCall, ToolName, ToolSpec, to_call_tool_result

GREETING = "Hello, World!"


async def handle_hello(call: ToolCall) -> ToolResult:
    return ToolResult(text=GREETING, structured={"message": GREETING})


SPECS = {
    ToolName.HELLO: ToolSpec(name=ToolName.HELLO, schema=(), handler=handle_hello, targeted=False),
}


def register(mcp: FastMCP, *, dispatcher: Dispatcher) -> None:
    @mcp.tool(name="hello", structured_output=False)
    async def hello() -> CallToolResult:
        """Returns a hello world message"""
        return to_call_tool_result(await dispatcher.dispatch(ToolName.HELLO, {}))
