"""Tool identifiers, per-tool specs, and the dispatcher that runs them.

Every call goes through the same pipeline:
  validate arguments -> optional precheck -> resolve target -> handler
and ends as exactly one ToolResult. Failures at each stage become error
results with their own prefix; nothing is raised to the MCP runtime.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from mcp.types import CallToolResult, TextContent

from clients.forgejo import ForgejoClient
from core.errors import ForgejoMCPError, ResolutionError, ValidationError
from core.models import RepositoryTarget, ToolResult
from core.schema import Schema, validate
from targets.target_factory import resolve_target

logger = logging.getLogger(__name__)


class ToolName(str, enum.Enum):
    HELLO = "hello"
    ISSUE_LIST = "issue_list"
    ISSUE_CREATE = "issue_create"
    ISSUE_EDIT = "issue_edit"
    ISSUE_COMMENT_CREATE = "issue_comment_create"
    ISSUE_COMMENT_LIST = "issue_comment_list"
    ISSUE_COMMENT_EDIT = "issue_comment_edit"
    PR_LIST = "pr_list"
    PR_FETCH = "pr_fetch"
    PR_CREATE = "pr_create"
    PR_EDIT = "pr_edit"
    PR_COMMENT_LIST = "pr_comment_list"
    PR_COMMENT_CREATE = "pr_comment_create"
    PR_COMMENT_EDIT = "pr_comment_edit"
    NOTIFICATION_LIST = "notification_list"


@dataclass(frozen=True)
class ToolCall:
    """Everything a handler needs for one validated call."""

    values: Dict[str, Any]
    target: Optional[RepositoryTarget]
    client: ForgejoClient
    compat_mode: bool = False


Handler = Callable[[ToolCall], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolSpec:
    """Static binding of a tool to its schema and handler.

    - error_prefix: prepended to upstream error text
    - targeted: whether directory/repository resolve to a target; when the
      schema makes the target optional and both are blank, target is None
    - precheck: returns plain error text for requests that are valid
      field-by-field but cannot proceed (e.g. an edit with no changes)
    """

    name: ToolName
    schema: Schema
    handler: Handler
    error_prefix: str = ""
    targeted: bool = True
    precheck: Optional[Callable[[Dict[str, Any]], Optional[str]]] = None


class Dispatcher:
    def __init__(
        self,
        specs: Mapping[ToolName, ToolSpec],
        *,
        client: ForgejoClient,
        compat_mode: bool = False,
    ) -> None:
        missing = [n.value for n in ToolName if n not in specs]
        if missing:
            raise KeyError(f"No handler registered for tools: {', '.join(missing)}")
        for name, spec in specs.items():
            if spec.name is not name:
                raise KeyError(f"Tool spec {spec.name.value} registered under {name.value}")

        self._specs = dict(specs)
        self._client = client
        self._compat_mode = bool(compat_mode)

    async def dispatch(self, name: ToolName, raw: Optional[Mapping[str, Any]]) -> ToolResult:
        spec = self._specs[name]
        logger.info("Handling %s request", name.value)

        try:
            values = validate(spec.schema, raw)
        except ValidationError as e:
            logger.warning("%s: invalid request: %s", name.value, e)
            return ToolResult.error(f"Invalid request: {e}")

        if spec.precheck is not None:
            message = spec.precheck(values)
            if message:
                logger.warning("%s: %s", name.value, message)
                return ToolResult.error(message)

        target = None
        # an optional target left blank passes validation with neither field set
        if spec.targeted and (values.get("directory") or values.get("repository")):
            try:
                target = await resolve_target(values.get("directory"), values.get("repository"))
            except ResolutionError as e:
                logger.warning("%s: failed to resolve directory: %s", name.value, e)
                return ToolResult.error(f"Failed to resolve directory: {e}")
            except ValidationError as e:
                return ToolResult.error(f"Invalid request: {e}")

        call = ToolCall(values=values, target=target, client=self._client, compat_mode=self._compat_mode)
        try:
            return await spec.handler(call)
        except ForgejoMCPError as e:
            logger.error("%s: %s%s", name.value, spec.error_prefix, e)
            return ToolResult.error(f"{spec.error_prefix}{e}")


def to_call_tool_result(result: ToolResult) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=result.text)],
        structuredContent=result.structured,
        isError=result.is_error,
    )
