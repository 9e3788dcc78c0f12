from __future__ import annotations

from typing import Sequence

from core.models import FieldError


class ForgejoMCPError(Exception):
    """Base error for the Forgejo MCP server."""


class ConfigError(ForgejoMCPError):
    """Raised when required process configuration is missing."""


class ValidationError(ForgejoMCPError):
    """Raised when user input is invalid.

    Carries the ordered field errors; str() renders them the way they are
    reported back to the caller, e.g. "limit: must be no greater than 100."
    """

    def __init__(self, errors: Sequence[FieldError]) -> None:
        self.errors = tuple(errors)
        super().__init__(format_field_errors(self.errors))


class ResolutionError(ForgejoMCPError):
    """Raised when a directory cannot be resolved to a repository."""


class DirectoryNotFoundError(ResolutionError):
    """Raised when the directory to resolve does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"repository validate failed for {path}: directory does not exist")


class NotGitRepositoryError(ResolutionError):
    """Raised when the directory has no usable .git directory."""

    def __init__(self, path: str, reason: str = "no .git directory found") -> None:
        self.path = path
        super().__init__(f"not a git repository: {path} ({reason})")


class NoRemotesConfiguredError(ResolutionError):
    """Raised when the git config lists no remotes."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"repository extract failed for {path}: no configured remotes")


class InvalidRemoteURLError(ResolutionError):
    """Raised when a remote URL matches none of the known forms."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"failed to parse remote URL: {url}")


class BranchDetectionError(ForgejoMCPError):
    """Raised when the current branch of a checkout cannot be determined."""


class ExternalServiceError(ForgejoMCPError):
    """Raised when the Forgejo API fails."""


def format_field_errors(errors: Sequence[FieldError]) -> str:
    # "a: x; b: y." with a trailing period after the last entry
    return "; ".join(f"{e.field}: {e.message}" for e in errors) + "."
