"""Closed registry of every tool the server exposes.

TOOLS maps each ToolName to the spec declared by its tool module;
`build_dispatcher` binds that mapping to a Forgejo client.
"""

from __future__ import annotations

from typing import Dict

from clients.forgejo import ForgejoClient
from tools import hello, issue_comments, issues, notifications, pr_comments, pull_requests
from tools.dispatch import Dispatcher, ToolName, ToolSpec

_MODULES = (hello, issues, issue_comments, pull_requests, pr_comments, notifications)

TOOLS: Dict[ToolName, ToolSpec] = {}
for _module in _MODULES:
    TOOLS.update(_module.SPECS)


def build_dispatcher(client: ForgejoClient, *, compat_mode: bool = False) -> Dispatcher:
    return Dispatcher(TOOLS, client=client, compat_mode=compat_mode)
