"""Per-tool field schemas and the validator that applies them.

A schema is an ordered tuple of fields. `validate` runs every field
against the raw arguments, collects all errors, and raises a single
ValidationError whose errors follow the schema's declaration order.
Unknown arguments are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from core import pagination
from core.errors import ValidationError
from core.models import FieldError
from targets.target_factory import check_target_fields, clean

Checked = Tuple[Dict[str, Any], List[FieldError]]

BLANK = "cannot be blank"


class Field:
    """Base class: a field reads its raw value(s) and returns (values, errors)."""

    def check(self, raw: Mapping[str, Any]) -> Checked:
        raise NotImplementedError


@dataclass(frozen=True)
class Target(Field):
    # directory + repository, checked together; an optional target may omit both
    required: bool = True

    def check(self, raw: Mapping[str, Any]) -> Checked:
        directory = raw.get("directory")
        repository = raw.get("repository")
        errors: List[FieldError] = []
        for name, value in (("directory", directory), ("repository", repository)):
            if value is not None and not isinstance(value, str):
                errors.append(FieldError(name, "must be a string"))
        if errors:
            return {}, errors

        values = {"directory": clean(directory), "repository": clean(repository)}
        if not self.required and values["directory"] is None and values["repository"] is None:
            return values, []
        return values, check_target_fields(directory, repository)


@dataclass(frozen=True)
class Paging(Field):
    def check(self, raw: Mapping[str, Any]) -> Checked:
        window, errors = pagination.normalize(raw.get("limit"), raw.get("offset"))
        return {"window": window}, errors


@dataclass(frozen=True)
class Integer(Field):
    name: str
    minimum: int = 1
    required: bool = True

    def check(self, raw: Mapping[str, Any]) -> Checked:
        value = raw.get(self.name)
        low = f"must be no less than {self.minimum}"
        if value is None:
            if self.required:
                return {}, [FieldError(self.name, low)]
            return {self.name: None}, []

        n = pagination.coerce_int(value)
        if n is None:
            return {}, [FieldError(self.name, "must be an integer")]
        if n < self.minimum:
            return {}, [FieldError(self.name, low)]
        return {self.name: n}, []


@dataclass(frozen=True)
class Text(Field):
    """String field.

    - required: absent or empty reports `required_message`
    - non_blank: whitespace-only reports "cannot be blank"
    - min_len/max_len: bounds on the raw length, reported as `length_message`
    Optional fields treat "" as absent.
    """

    name: str
    required: bool = False
    non_blank: bool = False
    min_len: int = 0
    max_len: Optional[int] = None
    length_message: str = ""
    required_message: str = BLANK

    def check(self, raw: Mapping[str, Any]) -> Checked:
        value = raw.get(self.name)
        if value is not None and not isinstance(value, str):
            return {}, [FieldError(self.name, "must be a string")]

        if not value:
            if self.required:
                return {}, [FieldError(self.name, self.required_message)]
            return {self.name: None}, []

        if self.non_blank and not value.strip():
            return {}, [FieldError(self.name, BLANK)]

        too_short = len(value) < self.min_len
        too_long = self.max_len is not None and len(value) > self.max_len
        if too_short or too_long:
            return {}, [FieldError(self.name, self.length_message)]

        return {self.name: value}, []


@dataclass(frozen=True)
class Choice(Field):
    # "" and None fall back to the default
    name: str
    choices: Tuple[str, ...]
    message: str
    default: Optional[str] = None

    def check(self, raw: Mapping[str, Any]) -> Checked:
        value = raw.get(self.name)
        if value is None or value == "":
            return {self.name: self.default}, []
        if value not in self.choices:
            return {}, [FieldError(self.name, self.message)]
        return {self.name: value}, []


@dataclass(frozen=True)
class Boolean(Field):
    name: str
    default: bool = False

    def check(self, raw: Mapping[str, Any]) -> Checked:
        value = raw.get(self.name)
        if value is None:
            return {self.name: self.default}, []
        if not isinstance(value, bool):
            return {}, [FieldError(self.name, "must be a boolean")]
        return {self.name: value}, []


Schema = Sequence[Field]


def validate(schema: Schema, raw: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Apply `schema` to `raw` and return the validated values.

    Raises ValidationError listing every failing field in schema order.
    """
    raw = raw or {}
    values: Dict[str, Any] = {}
    errors: List[FieldError] = []

    for f in schema:
        field_values, field_errors = f.check(raw)
        values.update(field_values)
        errors.extend(field_errors)

    if errors:
        raise ValidationError(errors)
    return values


# Shared field definitions

TITLE_LENGTH = "title must be between 1 and 255 characters"
EDIT_BODY_LENGTH = "body must be between 1 and 65535 characters"
EDIT_STATE = "state must be 'open' or 'closed'"
LIST_STATE = "state must be one of: open, closed, all"


def list_state() -> Choice:
    return Choice("state", ("open", "closed", "all"), LIST_STATE, default="open")


def edit_state() -> Choice:
    return Choice("state", ("open", "closed"), EDIT_STATE)


def edit_title() -> Text:
    return Text("title", min_len=1, max_len=255, length_message=TITLE_LENGTH)


def edit_body() -> Text:
    return Text("body", min_len=1, max_len=65535, length_message=EDIT_BODY_LENGTH)


def content(name: str) -> Text:
    return Text(name, required=True, non_blank=True)
