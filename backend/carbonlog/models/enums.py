"""Enums for the carbonlog domain models."""

from enum import StrEnum


class FieldType(StrEnum):
    """Input types a schema field can declare.

    The set is closed: validation dispatches on it with one checker per
    member, so adding a type means adding a member and a checker.
    """

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"
    TEXTAREA = "textarea"
