import pytest

from core.errors import ExternalServiceError
from core.models import PullRequestDetails
from tools import pull_requests as pull_requests_tool
from tools.registry import build_dispatcher


def _register(dummy_mcp, client):
    pull_requests_tool.register(dummy_mcp, dispatcher=build_dispatcher(client))
    return dummy_mcp.tools


@pytest.mark.asyncio
async def test_pr_list(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_list"](repository="testuser/testrepo", state="all")

    assert out.isError is False
    assert out.content[0].text == "Found 1 pull requests:\n- #7: Add feature (open)\n"
    assert out.structuredContent["pull_requests"][0]["head"] == {"ref": "", "sha": ""}
    assert fake_client.calls[0][2]["state"] == "all"


@pytest.mark.asyncio
async def test_pr_list_empty(dummy_mcp, fake_client):
    async def no_pulls(target, *, window, state="open"):
        return []

    fake_client.list_pull_requests = no_pulls
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_list"](repository="testuser/testrepo")

    assert out.content[0].text == "No pull requests found"
    assert out.structuredContent == {"pull_requests": []}


@pytest.mark.asyncio
async def test_pr_list_invalid_state(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_list"](repository="testuser/testrepo", state="merged")

    assert out.content[0].text == "Invalid request: state: state must be one of: open, closed, all."


@pytest.mark.asyncio
async def test_pr_create_with_explicit_branches(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_create"](repository="testuser/testrepo", head="feature", title="Add feature")

    assert out.isError is False
    assert out.content[0].text == (
        "Pull request created successfully. Number: 7, Title: Add feature, State: open, "
        "Created: 2025-09-10T10:00:00Z\nBody: Details\n"
    )
    kwargs = fake_client.calls[0][2]
    assert kwargs["head"] == "feature"
    assert kwargs["base"] == "main"
    assert kwargs["draft"] is False


@pytest.mark.asyncio
async def test_pr_create_detects_head_from_directory(tmp_path, git_checkout, dummy_mcp, fake_client):
    directory = git_checkout(tmp_path, head="ref: refs/heads/feature/login\n")
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_create"](directory=directory, title="Login", base="develop", draft=True)

    assert out.isError is False
    assert out.content[0].text.endswith("Note: Created as draft pull request\n")
    _, args, kwargs = fake_client.calls[0]
    assert args[0].full_name == "testuser/testrepo"
    assert kwargs["head"] == "feature/login"
    assert kwargs["base"] == "develop"


@pytest.mark.asyncio
async def test_pr_create_without_head_or_directory(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_create"](repository="testuser/testrepo", title="x")

    assert out.isError is True
    assert out.content[0].text == (
        "Failed to detect current branch: head branch is required when no directory is provided"
    )
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_pr_create_detached_head_names_directory(tmp_path, git_checkout, dummy_mcp, fake_client):
    directory = git_checkout(tmp_path, head="3f2a1b0c9d8e7f6a5b4c3d2e1f0a9b8c7d6e5f4a\n")
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_create"](directory=directory, title="x")

    assert out.isError is True
    assert out.content[0].text == (
        f"Failed to detect current branch in '{directory}': HEAD is detached in {directory}. "
        "Please ensure you're in a git repository and on a valid branch."
    )
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_pr_create_upstream_failure(
dummy_mcp, fake_client):
    fake_client.error = ExternalServiceError("409 Conflict: pull request already exists")
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_create"](repository="testuser/testrepo", head="feature", title="x")

    assert out.content[0].text == "Failed to create pull request: 409 Conflict: pull request already exists"


@pytest.mark.asyncio
async def test_pr_edit(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_edit"](repository="testuser/testrepo", pull_request_number=7, base_branch="develop")

    assert out.content[0].text == (
        "Pull request edited successfully. Number: 7, Title: Add feature, State: open, "
        "Updated: 2025-09-11T10:00:00Z\nBody: Details\n"
    )
    assert fake_client.calls[0][2]["base"] == "develop"


@pytest.mark.asyncio
async def test_pr_edit_invalid_state(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_edit"](repository="testuser/testrepo", pull_request_number=7, state="merged")

    assert out.content[0].text == "Invalid request: state: state must be 'open' or 'closed'."


@pytest.mark.asyncio
async def test_pr_fetch(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_fetch"](repository="testuser/testrepo", pull_request_number=7)

    assert out.isError is False
    assert out.content[0].text == (
        "Pull Request #7: Add feature\n"
        "State: closed\n"
        "Author: testuser\n"
        "Created: 2025-09-10T10:00:00Z\n"
        "Updated: 2025-09-11T10:00:00Z\n"
        "Assignee: alice\n"
        "Assignees: alice, bob\n"
        "Labels: bug, ui\n"
        "Comments: 3\n"
        "Mergeable: true\n"
        "Merged: 2025-09-12T10:00:00Z by carol\n"
        "URL: https://example.com/testuser/testrepo/pulls/7\n"
    )
    pr = out.structuredContent["pull_request"]
    assert pr["labels"] == ["bug", "ui"]
    assert pr["has_merged"] is True
    name, args, _ = fake_client.calls[0]
    assert name == "get_pull_request"
    assert args[0].full_name == "testuser/testrepo"
    assert args[1] == 7


@pytest.mark.asyncio
async def test_pr_fetch_minimal_pull_request(dummy_mcp, fake_client):
    fake_client.details = PullRequestDetails(id=8, number=8, title="Fix", state="open", user="testuser")
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_fetch"](repository="testuser/testrepo", pull_request_number=8)

    assert out.content[0].text == (
        "Pull Request #8: Fix\nState: open\nAuthor: testuser\nCreated: \nUpdated: \n"
        "Comments: 0\nMergeable: false\nURL: \n"
    )


@pytest.mark.asyncio
async def test_pr_fetch_requires_number(dummy_mcp, fake_client):
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_fetch"](repository="testuser/testrepo")

    assert out.content[0].text == "Invalid request: pull_request_number: must be no less than 1."
    assert fake_client.calls == []


@pytest.mark.asyncio
async def test_pr_fetch_upstream_failure(dummy_mcp, fake_client):
    fake_client.error = ExternalServiceError("404 Not Found")
    tools = _register(dummy_mcp, fake_client)

    out = await tools["pr_fetch"](repository="testuser/testrepo", pull_request_number=99)

    assert out.isError is True
    assert out.content[0].text == "Failed to fetch pull request: 404 Not Found"
