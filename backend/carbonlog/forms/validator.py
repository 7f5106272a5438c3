"""Form validation against a schema.

Validation is pure: it reads the schema and the raw values and returns a
mapping of field name to message. It never raises on user input and is
cheap enough to run on every keystroke.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from carbonlog.coercion import is_blank, parse_number
from carbonlog.formatting import format_bound
from carbonlog.forms.visibility import is_visible
from carbonlog.models.enums import FieldType
from carbonlog.models.schema import FormField

if TYPE_CHECKING:
    from carbonlog.models.schema import FormSchema, IdentificationSchema

# Returns an error message for a present value, or None if it is acceptable
ValueChecker = Callable[[FormField, object], str | None]


def _accept(field: FormField, value: object) -> str | None:
    return None


def _check_number(field: FormField, value: object) -> str | None:
    number = parse_number(value)
    if number is None:
        return f"{field.label} must be a valid number"
    if field.min is not None and number < field.min:
        return f"{field.label} must be at least {format_bound(field.min)}"
    if field.max is not None and number > field.max:
        return f"{field.label} must be at most {format_bound(field.max)}"
    return None


_CHECKERS: dict[FieldType, ValueChecker] = {
    FieldType.TEXT: _accept,
    FieldType.NUMBER: _check_number,
    FieldType.DATE: _accept,
    FieldType.SELECT: _accept,
    FieldType.TEXTAREA: _accept,
}


def validate_field(field: FormField, values: Mapping[str, object]) -> str | None:
    """Validate one field, ignoring its visibility rule."""
    value = values.get(field.name)
    if is_blank(value):
        if field.required:
            return f"{field.label} is required"
        return None
    return _CHECKERS[field.type](field, value)


def validate(schema: FormSchema, values: Mapping[str, object]) -> dict[str, str]:
    """Validate ``values`` against every visible field of ``schema``.

    Hidden fields are skipped entirely, so a conditional field that is not
    shown is never required and never range-checked.

    Returns:
        Field name -> error message, in schema order. Empty when the form
        is valid.
    """
    errors: dict[str, str] = {}
    for field in schema.iter_fields():
        if not is_visible(field, values):
            continue
        message = validate_field(field, values)
        if message is not None:
            errors[field.name] = message
    return errors


def validate_identification(
    schema: IdentificationSchema, values: Mapping[str, object]
) -> dict[str, str]:
    """Required-field check for the identification form."""
    errors: dict[str, str] = {}
    for field in schema.iter_fields():
        if field.required and is_blank(values.get(field.name)):
            errors[field.name] = f"{field.label} is required"
    return errors
