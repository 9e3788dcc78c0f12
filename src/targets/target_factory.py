"""Choose and resolve the repository a tool call targets.

Exposes `check_target_fields` (input checks reported as field errors) and
`resolve_target` (turns validated inputs into a RepositoryTarget).

Priority Logic:
1. A non-blank directory always wins; repository is then ignored.
2. Otherwise a non-blank repository in "owner/repo" form is used.
3. With neither, both fields are reported as missing.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from core.errors import ValidationError
from core.models import FieldError, RepositoryTarget
from targets.directory_source import DirectorySource
from targets.repository_source import parse_repository

MISSING_TARGET = "at least one of directory or repository must be provided"
NOT_ABSOLUTE = "directory must be an absolute path"
INVALID_DIRECTORY = "invalid directory"
BAD_REPOSITORY = "repository must be in format 'owner/repo'"


def clean(value: Optional[str]) -> Optional[str]:
    # Blank strings count as absent
    if value is None or not str(value).strip():
        return None
    return str(value).strip()


def check_target_fields(directory: Optional[str], repository: Optional[str]) -> List[FieldError]:
    """Validate directory/repository as fields, in that order."""
    directory = clean(directory)
    repository = clean(repository)

    if directory is None and repository is None:
        return [
            FieldError("directory", MISSING_TARGET),
            FieldError("repository", MISSING_TARGET),
        ]

    if directory is not None:
        if not Path(directory).is_absolute():
            return [FieldError("directory", NOT_ABSOLUTE)]
        if not os.path.isdir(directory):
            return [FieldError("directory", INVALID_DIRECTORY)]
        return []

    if parse_repository(repository) is None:
        return [FieldError("repository", BAD_REPOSITORY)]
    return []


async def resolve_target(directory: Optional[str], repository: Optional[str]) -> RepositoryTarget:
    """Resolve inputs that already passed `check_target_fields`.

    Raises ResolutionError subclasses for git-level failures on the
    directory path.
    """
    directory = clean(directory)
    if directory is not None:
        return await DirectorySource(directory=directory).resolve()

    target = parse_repository(clean(repository) or "")
    if target is None:
        raise ValidationError(check_target_fields(None, repository))
    return target
