"""Server bootstrap for the Forgejo MCP service.

Creates the FastMCP instance, wires the Forgejo client into the tool
dispatcher, registers every tool, and starts the MCP server (stdio
transport).
"""

import logging
import sys

from mcp.server.fastmcp import FastMCP

from clients.forgejo import ForgejoClient
from config import (
    FORGEJO_AUTH_TOKEN,
    FORGEJO_COMPAT_MODE,
    FORGEJO_REMOTE_URL,
    FORGEJO_TIMEOUT,
    HTTP_VERIFY,
    LOG_LEVEL,
    validate_config,
)
from core.errors import ConfigError

from tools.hello import register as register_hello
from tools.issues import register as register_issues
from tools.issue_comments import register as register_issue_comments
from tools.pull_requests import register as register_pull_requests
from tools.pr_comments import register as register_pr_comments
from tools.notifications import register as register_notifications
from tools.registry import build_dispatcher

logger = logging.getLogger(__name__)

mcp = FastMCP("forgejo-mcp")


def register_tools() -> None:
    forgejo_client = ForgejoClient(
        base_url=FORGEJO_REMOTE_URL,
        token=FORGEJO_AUTH_TOKEN,
        timeout=FORGEJO_TIMEOUT,
        verify=HTTP_VERIFY,
    )
    dispatcher = build_dispatcher(forgejo_client, compat_mode=FORGEJO_COMPAT_MODE)

    register_hello(mcp, dispatcher=dispatcher)
    register_issues(mcp, dispatcher=dispatcher)
    register_issue_comments(mcp, dispatcher=dispatcher)
    register_pull_requests(mcp, dispatcher=dispatcher)
    register_pr_comments(mcp, dispatcher=dispatcher)
    register_notifications(mcp, dispatcher=dispatcher)


register_tools()


def configure_logging(level: str = LOG_LEVEL) -> None:
    # stdout carries the stdio protocol; logs go to stderr
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def main() -> None:
    configure_logging()
    try:
        validate_config()
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)

    logger.info("Starting forgejo-mcp against %s", FORGEJO_REMOTE_URL)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
