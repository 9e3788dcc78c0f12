import pytest

from core.errors import (
    BranchDetectionError,
    DirectoryNotFoundError,
    InvalidRemoteURLError,
    NoRemotesConfiguredError,
    NotGitRepositoryError,
)
from core.models import RepositoryTarget
from targets.directory_source import DirectorySource


@pytest.mark.asyncio
async def test_resolve_origin_remote(tmp_path, git_checkout):
    directory = git_checkout(tmp_path)

    target = await DirectorySource(directory=directory).resolve()
    assert target == RepositoryTarget(owner="testuser", repo="testrepo")


@pytest.mark.asyncio
async def test_resolve_ssh_remote(tmp_path, git_checkout):
    directory = git_checkout(tmp_path, config='[remote "origin"]\n\turl = git@example.com:testuser/testrepo.git\n')

    target = await DirectorySource(directory=directory).resolve()
    assert target.full_name == "testuser/testrepo"


@pytest.mark.asyncio
async def test_resolve_missing_directory(tmp_path):
    missing = str(tmp_path / "missing")

    with pytest.raises(DirectoryNotFoundError) as exc:
        await DirectorySource(directory=missing).resolve()
    assert str(exc.value) == f"repository validate failed for {missing}: directory does not exist"


@pytest.mark.asyncio
async def test_resolve_not_a_git_repository(tmp_path):
    with pytest.raises(NotGitRepositoryError) as exc:
        await DirectorySource(directory=str(tmp_path)).resolve()
    assert str(exc.value) == f"not a git repository: {tmp_path} (no .git directory found)"


@pytest.mark.asyncio
async def test_resolve_git_file_is_not_a_directory(tmp_path):
    (tmp_path / ".git").write_text("gitdir: ../elsewhere\n", encoding="utf-8")

    with pytest.raises(NotGitRepositoryError) as exc:
        await DirectorySource(directory=str(tmp_path)).resolve()
    assert "(.git is not a directory)" in str(exc.value)


@pytest.mark.asyncio
async def test_resolve_does_not_walk_up(tmp_path, git_checkout):
    git_checkout(tmp_path)
    child = tmp_path / "sub"
    child.mkdir()

    with pytest.raises(NotGitRepositoryError):
        await DirectorySource(directory=str(child)).resolve()


@pytest.mark.asyncio
async def test_resolve_no_remotes(tmp_path, git_checkout):
    directory = git_checkout(tmp_path, config="[core]\n\tbare = false\n")

    with pytest.raises(NoRemotesConfiguredError):
        await DirectorySource(directory=directory).resolve()


@pytest.mark.asyncio
async def test_resolve_unparseable_remote(tmp_path, git_checkout):
    directory = git_checkout(tmp_path, config='[remote "origin"]\n\turl = /srv/git/project\n')

    with pytest.raises(InvalidRemoteURLError):
        await DirectorySource(directory=directory).resolve()


@pytest.mark.asyncio
async def test_current_branch(tmp_path, git_checkout):
    directory = git_checkout(tmp_path, head="ref: refs/heads/feature/login\n")

    assert await DirectorySource(directory=directory).current_branch() == "feature/login"


@pytest.mark.asyncio
async def test_current_branch_detached(tmp_path, git_checkout):
    directory = git_checkout(tmp_path, head="3f2a1b0c9d8e7f6a5b4c3d2e1f0a9b8c7d6e5f4a\n")

    with pytest.raises(BranchDetectionError):
        await DirectorySource(directory=directory).current_branch()
