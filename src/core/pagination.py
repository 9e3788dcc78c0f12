"""Pagination normalization for list tools.

`normalize` turns raw limit/offset arguments into a PaginationWindow plus
the field errors found; the window is only meaningful when no errors are
returned. An absent or non-positive limit falls back to the
default; an explicit limit above the maximum is rejected rather than
clamped.
"""

from __future__ import annotations

from typing import Any, List, Tuple, Union

from core.models import FieldError, PaginationWindow

DEFAULT_LIMIT = 15
MAX_LIMIT = 100


def coerce_int(value: Any) -> Union[int, None]:
    """Return value as int, or None when it is not an integer.

    JSON clients may send 5.0 for 5; bools are never integers here.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def normalize(raw_limit: Any = None, raw_offset: Any = None) -> Tuple[PaginationWindow, List[FieldError]]:
    errors: List[FieldError] = []

    limit = DEFAULT_LIMIT
    if raw_limit is not None:
        n = coerce_int(raw_limit)
        if n is None:
            errors.append(FieldError("limit", "must be an integer"))
        elif n > MAX_LIMIT:
            errors.append(FieldError("limit", f"must be no greater than {MAX_LIMIT}"))
        elif n > 0:
            limit = n

    offset = 0
    if raw_offset is not None:
        n = coerce_int(raw_offset)
        if n is None:
            errors.append(FieldError("offset", "must be an integer"))
        elif n < 0:
            errors.append(FieldError("offset", "must be no less than 0"))
        else:
            offset = n

    return PaginationWindow(limit=limit, offset=offset), errors
