import pytest

from core.errors import ExternalServiceError
from tools import hello as hello_tool
from tools import issues as issues_tool
from tools.registry import build_dispatcher


def _register(dummy_mcp, client, *, compat_mode=False):
    dispatcher = build_dispatcher(client, compat_mode=compat_mode)
    hello_tool.register(dummy_mcp, dispatcher=dispatcher)
    issues_tool.register(dummy_mcp, dispatcher=dispatcher)
    return dummy_mcp.tools


@pytest.mark.asyncio
async def test_hello(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["hello"]()

    assert out.isError is False
    assert out.content[0].text == "Hello, World!"
    assert out.structuredContent == {"message": "Hello, World!"}


@pytest.mark.asyncio
async def test_issue_list_summary(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["issue_list"](repository="testuser/testrepo", limit=5)

    assert out.isError is False
    assert out.content[0].text == "Found 2 issues"
    assert [i["number"] for i in out.structuredContent["issues"]] == [1, 2]

    _, args, kwargs = fake_client.calls[0]
    assert args[0].full_name == "testuser/testrepo"
    assert kwargs["window"].limit == 5
    assert kwargs["state"] == "open"


@pytest.mark.asyncio
async def test_issue_list_compat_mode_lists_each_issue(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client, compat_mode=True)

    out = await tools["issue_list"](repository="testuser/testrepo", state="all")

    assert out.content[0].text == "Found 2 issues:\n- #1: First (open)\n- #2: Second (closed)\n"


@pytest.mark.asyncio
async def test_issue_list_limit_too_large(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["issue_list"](repository="testuser/testrepo", limit=101)

    assert out.isError is True
    assert out.content[0].text == "Invalid request: limit: must be no greater than 100."
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_issue_create(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["issue_create"](repository="testuser/testrepo", title="Crash on start", body="Steps")

    assert out.isError is False
    assert out.content[0].text == "Issue created successfully. Number: 10, Title: Crash on start"
    assert out.structuredContent["issue"]["title"] == "Crash on start"


@pytest.mark.asyncio
async def test_issue_create_upstream_failure(dummy_mcp, fake_client):
    fake_client.error = ExternalServiceError("401 Unauthorized")
    tools = _register(dummy_mcp, fake_client)

    out = await tools["issue_create"](repository="testuser/testrepo", title="x")

    assert out.isError is True
    assert out.content[0].text == "Failed to create issue: 401 Unauthorized"
    assert out.structuredContent is None


@pytest.mark.asyncio
async def test_issue_edit(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["issue_edit"](repository="testuser/testrepo", issue_number=123, title="Updated title")

    assert out.isError is False
    assert out.content[0].text == (
        "Issue edited successfully. Number: 123, Title: Updated title, State: open, "
        "Updated: 2025-10-06T12:00:00Z\nBody: Original body\n"
    )
    assert out.structuredContent["issue"]["updated"] == "2025-10-06T12:00:00Z"


@pytest.mark.asyncio
async def test_issue_edit_requires_a_change(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["issue_edit"](repository="testuser/testrepo", issue_number=123)

    assert out.isError is True
    assert out.content[0].text == "At least one of title, body, or state must be provided"


@pytest.mark.asyncio
async def test_issue_edit_invalid_repository(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["issue_edit"](repository="invalid-repo", issue_number=123, title="Updated title")

    assert out.content[0].text == "Invalid request: repository: repository must be in format 'owner/repo'."
