import pytest

from core.models import (
    Comment,
    CommentList,
    Issue,
    Notification,
    NotificationList,
    PullRequest,
    PullRequestDetails,
)


class DummyMCP:
    """Minimal FastMCP stand-in to capture tool registration."""

    def __init__(self) -> None:
        self.tools = {}

    def tool(self, *, name: str, **kwargs):
        def _decorator(fn):
            self.tools[name] = fn
            return fn
        return _decorator


class FakeForgejoClient:
    """Records every call and returns canned entities."""

    def __init__(self, *, error=None) -> None:
        self.calls = []
        self.error = error
        self.issues = [
            Issue(id=1, number=1, title="First", state="open", user="testuser"),
            Issue(id=2, number=2, title="Second", state="closed", user="testuser"),
        ]
        self.comment = Comment(
            id=42,
            body="Looks good",
            user="testuser",
            created="2025-09-10T10:00:00Z",
            updated="2025-09-10T11:00:00Z",
        )
        self.pull = PullRequest(
            id=7,
            number=7,
            title="Add feature",
            state="open",
            body="Details",
            user="testuser",
            created="2025-09-10T10:00:00Z",
            updated="2025-09-11T10:00:00Z",
        )
        self.details = PullRequestDetails(
            id=7,
            number=7,
            title="Add feature",
            state="closed",
            body="Details",
            user="testuser",
            created="2025-09-10T10:00:00Z",
            updated="2025-09-11T10:00:00Z",
            html_url="https://example.com/testuser/testrepo/pulls/7",
            labels=("bug", "ui"),
            assignee="alice",
            assignees=("alice", "bob"),
            comments=3,
            mergeable=True,
            has_merged=True,
            merged_at="2025-09-12T10:00:00Z",
            merged_by="carol",
        )
        self.notifications = [
            Notification(id=1, repository="testuser/testrepo", type="issue", number=123, title="New issue", unread=True),
            Notification(id=2, repository="other/repo", type="pull", number=456, title="Review", unread=True),
        ]

    def _record(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if self.error is not None:
            raise self.error

    async def list_issues(self, target, *, window, state="open"):
        self._record("list_issues", target, window=window, state=state)
        return list(self.issues)

    async def create_issue(self, target, *, title, body=None):
        self._record("create_issue", target, title=title, body=body)
        return Issue(id=10, number=10, title=title, state="open", body=body or "", user="testuser")

    async def edit_issue(self, target, number, *, title=None, body=None, state=None):
        self._record("edit_issue", target, number, title=title, body=body, state=state)
        return Issue(
            id=number,
            number=number,
            title=title or "Test Issue",
            state=state or "open",
            body=body or "Original body",
            user="testuser",
            created="2025-09-11T10:30:00Z",
            updated="2025-10-06T12:00:00Z",
        )

    async def list_issue_comments(self, target, number, *, window):
        self._record("list_issue_comments", target, number, window=window)
        return CommentList(comments=(self.comment,), total=1, limit=window.limit, offset=window.offset)

    async def create_issue_comment(self, target, number, *, body):
        self._record("create_issue_comment", target, number, body=body)
        return Comment(id=self.comment.id, body=body, user="testuser", created=self.comment.created, updated=self.comment.updated)

    async def edit_issue_comment(self, target, comment_id, *, body):
        self._record("edit_issue_comment", target, comment_id, body=body)
        return Comment(id=comment_id, body=body, user="testuser", created=self.comment.created, updated=self.comment.updated)

    async def list_pull_requests(self, target, *, window, state="open"):
        self._record("list_pull_requests", target, window=window, state=state)
        return [self.pull]

    async def create_pull_request(self, target, *, head, base, title, body=None, draft=False, assignee=None):
        self._record(
            "create_pull_request", target, head=head, base=base, title=title, body=body, draft=draft, assignee=assignee
        )
        return self.pull

    async def edit_pull_request(self, target, number, *, title=None, body=None, state=None, base=None):
        self._record("edit_pull_request", target, number, title=title, body=body, state=state, base=base)
        return self.pull

    async def get_pull_request(self, target, number):
        self._record("get_pull_request", target, number)
        return self.details

    async def list_notifications(self, target, *, window, status="unread"):
        self._record("list_notifications", target, window=window, status=status)
        items = [n for n in self.notifications if target is None or n.repository == target.full_name]
        shown = tuple(items[window.offset : window.offset + window.limit])
        return NotificationList(notifications=shown, total=len(items), limit=window.limit, offset=window.offset)


def make_git_checkout(
root, *, config=None, head="ref: refs/heads/main\n"):
    """Create a minimal .git directory under root and return root as str."""
    git_dir = root / ".git"
    git_dir.mkdir(parents=True)
    if config is None:
        config = '[core]\n\tbare = false\n[remote "origin"]\n\turl = https://example.com/testuser/testrepo.git\n'
    (git_dir / "config").write_text(config, encoding="utf-8")
    (git_dir / "HEAD").write_text(head, encoding="utf-8")
    return str(root)


@pytest.fixture
def dummy_mcp():
    return DummyMCP()


@pytest.fixture
def fake_client():
    return FakeForgejoClient()


@pytest.fixture
def git_checkout():
    return make_git_checkout
