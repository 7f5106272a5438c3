"""Conditional field visibility."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from carbonlog.models.schema import FormField, FormSchema


def is_visible(field: FormField, values: Mapping[str, object]) -> bool:
    """Whether ``field`` is active for the current form values.

    A field without a ``conditionalShow`` rule is always visible. Otherwise
    the controlling field's current value must equal one of the trigger
    values exactly.
    """
    rule = field.conditional_show
    if rule is None:
        return True
    return values.get(rule.field) in rule.values


def visible_fields(
    schema: FormSchema, values: Mapping[str, object]
) -> Iterator[FormField]:
    """Yield the fields that are visible for ``values``, in schema order."""
    for field in schema.iter_fields():
        if is_visible(field, values):
            yield field
