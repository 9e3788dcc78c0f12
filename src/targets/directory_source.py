from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from core.errors import (
    BranchDetectionError,
    DirectoryNotFoundError,
    NotGitRepositoryError,
    ResolutionError,
)
from core.models import RemoteDescriptor, RepositoryTarget
from targets.remotes import parse_git_config_remotes, select_remote


"""Resolve a local checkout to the repository it tracks.

Only the given directory is inspected (no walking up to parent
directories). Reads are blocking, so they run in a worker thread.
"""

logger = logging.getLogger(__name__)

_HEAD_REF_PREFIX = "ref: refs/heads/"


class DirectorySource:
    # Filesystem-backed resolver for one absolute directory.

    def __init__(self, *, directory: str) -> None:
        self._directory = directory
        self._root = Path(directory)

    def _git_dir(self) -> Path:
        if not self._root.exists() or not self._root.is_dir():
            raise DirectoryNotFoundError(self._directory)

        git_dir = self._root / ".git"
        if not git_dir.exists():
            raise NotGitRepositoryError(self._directory)
        if not git_dir.is_dir():
            raise NotGitRepositoryError(self._directory, ".git is not a directory")
        return git_dir

    def _read_remote(self) -> RemoteDescriptor:
        config_path = self._git_dir() / "config"
        try:
            text = config_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise ResolutionError(
                f"repository extract failed for {config_path}: failed to read git config: {e}"
            ) from e

        return select_remote(self._directory, parse_git_config_remotes(text))

    def _read_branch(self) -> str:
        head_path = self._git_dir() / "HEAD"
        try:
            head = head_path.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise BranchDetectionError(f"failed to read {head_path}: {e}") from e

        if not head.startswith(_HEAD_REF_PREFIX):
            raise BranchDetectionError(f"HEAD is detached in {self._directory}")
        return head[len(_HEAD_REF_PREFIX):]

    async def resolve(self) -> RepositoryTarget:
        remote = await asyncio.to_thread(self._read_remote)
        logger.debug("Resolved %s via remote %s (%s)", self._directory, remote.name, remote.url)
        return RepositoryTarget(owner=remote.owner, repo=remote.repo)

    async def current_branch(self) -> str:
        return await asyncio.to_thread(self._read_branch)
